"""Command line interface for OneDo."""

from __future__ import annotations

import time
from datetime import date, datetime
from pathlib import Path

import click

from .config import BaseConfig
from .errors import HabitDataError, HabitNotFoundError
from .models.habit import (
    GoalConfig,
    GoalType,
    IconConfig,
    Recurrence,
    ReminderConfig,
    parse_goal_value,
)
from .scheduler import create_scheduler
from .services.completion import is_completed_on
from .services.progress import completion_rate
from .services.tracker import HabitTracker
from .services.views import FilterOption, SortOption

DATE_FORMAT = click.DateTime(formats=["%Y-%m-%d"])


def _build_tracker() -> HabitTracker:
    from .infra.database import bootstrap_database
    from .infra.repositories.habit import SQLModelHabitRepository
    from .logging_config import setup_logging

    config = BaseConfig()
    setup_logging(config)
    _engine, session_factory = bootstrap_database(config)
    return HabitTracker(
        SQLModelHabitRepository(session_factory),
        max_lookback=config.STREAK_LOOKBACK_DAYS,
        progress_window=config.PROGRESS_WINDOW_DAYS,
        tz=config.timezone(),
    )


def _resolve_day(tracker: HabitTracker, value: datetime | None) -> date:
    if value is not None:
        return value.date()
    return datetime.now(tracker.tz).date()


def _tracker(ctx: click.Context) -> HabitTracker:
    if ctx.obj is None:
        ctx.obj = _build_tracker()
    return ctx.obj


@click.group()
def cli() -> None:
    """Track daily habits, streaks and progress."""


@cli.command("add")
@click.argument("name")
@click.option(
    "--recurrence",
    type=click.Choice([r.value for r in Recurrence]),
    default=Recurrence.DAILY.value,
    show_default=True,
)
@click.option("--day", "days", type=click.IntRange(1, 7), multiple=True, help="Weekday for weekly habits (1=Sun..7=Sat)")
@click.option("--remind", "remind_at", type=click.DateTime(formats=["%H:%M"]), help="Reminder time HH:MM")
@click.option("--goal-type", type=click.Choice([g.value for g in GoalType]), default=GoalType.NONE.value)
@click.option("--target", default=None, help="Goal target value")
@click.option("--unit", default=None, help="Goal unit label")
@click.option("--icon", default=None)
@click.option("--color", default=None)
@click.pass_context
def add_habit(ctx, name, recurrence, days, remind_at, goal_type, target, unit, icon, color) -> None:
    """Add a habit."""

    tracker = _tracker(ctx)
    reminder = None
    if remind_at is not None:
        reminder = ReminderConfig(enabled=True, time_of_day=remind_at.time(), days_of_week=frozenset(days))
    goal = None
    if goal_type != GoalType.NONE.value:
        goal = GoalConfig(type=goal_type, target_value=parse_goal_value(target), unit=unit or None)
    record = tracker.add_habit(
        name,
        Recurrence(recurrence),
        active_weekdays=days or None,
        reminder=reminder,
        goal=goal,
        icon=IconConfig(symbol_id=icon, color_hex=color),
    )
    click.echo(f"Added {record.name} ({record.id})")


@cli.command("list")
@click.option("--date", "on", type=DATE_FORMAT, default=None, help="Day to show (YYYY-MM-DD)")
@click.option("--filter", "filter_", type=click.Choice([f.value for f in FilterOption]), default=FilterOption.ALL.value)
@click.option("--sort", type=click.Choice([s.value for s in SortOption]), default=SortOption.CREATION_DATE_ASCENDING.value)
@click.option("--all", "show_all", is_flag=True, default=False, help="Show every habit, due or not")
@click.pass_context
def list_habits(ctx, on, filter_, sort, show_all) -> None:
    """Show the habits due on a day."""

    tracker = _tracker(ctx)
    day = _resolve_day(tracker, on)
    records = tracker.day_view(day, FilterOption(filter_), SortOption(sort), edit_mode=show_all)
    if not records:
        click.echo("No habits.")
        return
    for record in records:
        mark = "x" if is_completed_on(record, day) else " "
        streak = tracker.streak(record.id, day)
        click.echo(f"[{mark}] {record.name}  streak={streak}  ({record.id})")


@cli.command("toggle")
@click.argument("habit_id")
@click.option("--date", "on", type=DATE_FORMAT, default=None)
@click.pass_context
def toggle_habit(ctx, habit_id, on) -> None:
    """Mark a habit done (or not done) for a day."""

    tracker = _tracker(ctx)
    day = _resolve_day(tracker, on)
    try:
        record = tracker.toggle_completion(habit_id, day)
    except HabitNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc
    state = "done" if is_completed_on(record, day) else "not done"
    click.echo(f"{record.name}: {state} on {day.isoformat()}")


@cli.command("streak")
@click.argument("habit_id")
@click.option("--date", "on", type=DATE_FORMAT, default=None)
@click.pass_context
def show_streak(ctx, habit_id, on) -> None:
    """Show current and longest streaks."""

    tracker = _tracker(ctx)
    try:
        current, longest = tracker.streaks(habit_id, _resolve_day(tracker, on))
    except HabitNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"current={current} longest={longest}")


@cli.command("progress")
@click.argument("habit_id")
@click.option("--date", "on", type=DATE_FORMAT, default=None)
@click.option("--days", type=click.IntRange(min=1), default=None, help="Window size (defaults to ONEDO_PROGRESS_WINDOW_DAYS)")
@click.pass_context
def show_progress(ctx, habit_id, on, days) -> None:
    """Show the goal progress for the last N days."""

    tracker = _tracker(ctx)
    try:
        series = tracker.progress(habit_id, _resolve_day(tracker, on), days)
    except HabitNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc
    if not series:
        click.echo("No goal set.")
        return
    for point in series:
        click.echo(f"{point.day.strftime('%m/%d')}  {point.value:g}{'  *' if point.met_target else ''}")
    click.echo(f"met {completion_rate(series):.0%} of days")


@cli.command("delete")
@click.argument("habit_id")
@click.pass_context
def delete_habit(ctx, habit_id) -> None:
    """Delete a habit and cancel its reminders."""

    tracker = _tracker(ctx)
    try:
        tracker.delete_habit(habit_id)
    except HabitNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Deleted {habit_id}")


@cli.command("export")
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path), required=False)
@click.pass_context
def export_habits(ctx, path) -> None:
    """Write all habits as JSON (to stdout when no path is given)."""

    payload = _tracker(ctx).export_json()
    if path is None:
        click.echo(payload)
        return
    path.write_text(payload, encoding="utf-8")
    click.echo(f"Export written: {path}")


@cli.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def import_habits(ctx, path) -> None:
    """Load habits from a JSON export."""

    try:
        records = _tracker(ctx).import_json(path.read_text(encoding="utf-8"))
    except HabitDataError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Imported {len(records)} habit(s)")


@cli.command("remind")
@click.pass_context
def run_reminders(ctx) -> None:
    """Deliver reminders in the foreground until interrupted."""

    tracker = _tracker(ctx)
    scheduler = create_scheduler(
        lambda habit_id, name: click.echo(f"Reminder: {name} ({habit_id})"),
        auto_start=True,
        timezone=tracker.tz,
    )
    tracker.scheduler = scheduler
    try:
        tracker.sync_reminders()
        click.echo(f"Watching {len(scheduler.job_ids())} reminder(s). Press Ctrl+C to stop.")
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        click.echo("Stopping reminders.")
    finally:
        scheduler.stop()
        tracker.scheduler = None


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
