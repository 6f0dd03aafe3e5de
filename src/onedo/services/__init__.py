"""Habit engine services: scheduling, completion, streaks, progress and views."""
