"""Background reminder scheduling on top of APScheduler."""

from __future__ import annotations

from datetime import tzinfo
from typing import Callable, Iterable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from .logging_config import get_logger
from .models.habit import HabitRecord
from .services.reminders import ReminderPlan, ReminderTrigger, cancellation_ids

logger = get_logger(__name__)

# 1=Sunday .. 7=Saturday onto cron day names
_CRON_DAYS = {1: "sun", 2: "mon", 3: "tue", 4: "wed", 5: "thu", 6: "fri", 7: "sat"}

Deliver = Callable[[str, str], None]


class ReminderScheduler:
    """Registers each habit's reminder triggers as repeating cron jobs.

    Job ids are the trigger ids from :class:`ReminderPlan`, so every trigger can
    be cancelled individually. ``deliver(habit_id, habit_name)`` is called when a
    reminder fires; showing the notification is up to the caller.
    """

    def __init__(self, deliver: Deliver, scheduler: BackgroundScheduler | None = None):
        self.deliver = deliver
        self.scheduler = scheduler or BackgroundScheduler()
        self._job_ids: set[str] = set()

    def start(self) -> None:
        """Start the background scheduler."""
        if self.scheduler.running:
            logger.warning("Reminder scheduler already running")
            return
        self.scheduler.start()
        logger.info("Reminder scheduler started")

    def stop(self) -> None:
        """Stop the background scheduler."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Reminder scheduler stopped")

    def _cron_trigger(self, trigger: ReminderTrigger) -> CronTrigger:
        kwargs = {"hour": trigger.hour, "minute": trigger.minute, "timezone": self.scheduler.timezone}
        if trigger.weekday is not None:
            kwargs["day_of_week"] = _CRON_DAYS[trigger.weekday]
        return CronTrigger(**kwargs)

    def schedule(self, record: HabitRecord) -> list[str]:
        """Replace any jobs for ``record`` with its current plan; returns the new job ids."""

        self.cancel(record.id)
        added: list[str] = []
        for trigger in ReminderPlan.build(record).triggers:
            try:
                self.scheduler.add_job(
                    func=self.deliver,
                    trigger=self._cron_trigger(trigger),
                    args=[record.id, record.name],
                    id=trigger.trigger_id,
                    name=f"Reminder: {record.name}",
                    replace_existing=True,
                )
            except Exception as exc:
                logger.error(f"Failed to add reminder {trigger.trigger_id}: {exc}", exc_info=True)
                continue
            self._job_ids.add(trigger.trigger_id)
            added.append(trigger.trigger_id)
        if added:
            logger.info(f"Scheduled {len(added)} reminder(s) for habit {record.id}")
        return added

    def cancel(self, habit_id: str) -> None:
        """Remove every reminder job derived from ``habit_id``."""

        for job_id in cancellation_ids(habit_id):
            if self.scheduler.get_job(job_id) is not None:
                self.scheduler.remove_job(job_id)
            self._job_ids.discard(job_id)

    def sync(self, records: Iterable[HabitRecord]) -> None:
        """Drop all reminder jobs and register the plans of ``records``."""

        for job_id in list(self._job_ids):
            if self.scheduler.get_job(job_id) is not None:
                self.scheduler.remove_job(job_id)
        self._job_ids.clear()
        for record in records:
            self.schedule(record)

    def job_ids(self) -> list[str]:
        """Ids of the reminder jobs currently registered."""
        return sorted(job.id for job in self.scheduler.get_jobs() if job.id in self._job_ids)


def create_scheduler(
    deliver: Deliver, *, auto_start: bool = False, timezone: tzinfo | None = None
) -> ReminderScheduler:
    """Create and optionally start a reminder scheduler.

    Cron fields are evaluated in ``timezone``, or the system local zone when omitted.
    """
    background = BackgroundScheduler(timezone=timezone) if timezone is not None else BackgroundScheduler()
    scheduler = ReminderScheduler(deliver, background)
    if auto_start:
        scheduler.start()
    return scheduler
