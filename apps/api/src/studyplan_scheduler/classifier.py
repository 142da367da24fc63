from __future__ import annotations

from .models import AbstractTask, DistributionType

DAILY_MARKERS: tuple[str, ...] = ("每日", "每天", "daily", "every day", "everyday")

SHORT_TASK_HOURS = 0.5
WEEKLY_TASK_MAX_HOURS = 2.0


def has_daily_marker(description: str) -> bool:
    lowered = description.lower()
    return any(marker in lowered for marker in DAILY_MARKERS)


def classify_task(task: AbstractTask) -> DistributionType:
    """Classify by duration first; the description only matters for short tasks."""
    hours = task.duration_hours
    if hours <= SHORT_TASK_HOURS:
        if has_daily_marker(task.description):
            return DistributionType.DAILY
        return DistributionType.WEEKLY
    if hours <= WEEKLY_TASK_MAX_HOURS:
        return DistributionType.WEEKLY
    return DistributionType.INTENSIVE
