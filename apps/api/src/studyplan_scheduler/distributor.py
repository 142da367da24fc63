from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace
from datetime import date, timedelta

from .classifier import classify_task
from .durations import (
    format_duration_label,
    seconds_to_minutes,
    split_minutes,
    standardize_minutes,
)
from .models import (
    AbstractTask,
    DistributionType,
    ScheduleCalendar,
    ScheduleSettings,
)

logger = logging.getLogger(__name__)

DAYS_IN_WEEK = 7

# (upper bound in hours, number of days)
_OPTIMAL_DAY_STEPS: tuple[tuple[float, int], ...] = (
    (0.5, 1),
    (1.0, 2),
    (2.0, 2),
    (3.0, 3),
    (4.0, 4),
)
_MAX_OPTIMAL_DAYS = 5


def get_available_days(
    week_start: date,
    settings: ScheduleSettings,
    calendar: ScheduleCalendar | None = None,
) -> list[int]:
    """Return the day offsets (0..6) of the week whose weekday is selected."""
    # Offsets follow each date's real weekday. Offset n maps to code n + 1
    # only when the week starts on a Sunday.
    calendar = calendar or ScheduleCalendar()
    return [
        offset
        for offset in range(DAYS_IN_WEEK)
        if calendar.weekday_code(week_start + timedelta(days=offset))
        in settings.selected_weekdays
    ]


def optimal_day_count(duration_seconds: float) -> int:
    hours = duration_seconds / 3600
    for upper_hours, days in _OPTIMAL_DAY_STEPS:
        if hours <= upper_hours:
            return days
    return _MAX_OPTIMAL_DAYS


def split_task(task: AbstractTask, days: int) -> list[AbstractTask]:
    """Split a task into ``days`` sub-tasks with standardized durations."""
    allocations = split_minutes(seconds_to_minutes(task.estimated_duration), days)
    sub_tasks = []
    for raw_minutes in allocations:
        minutes = standardize_minutes(raw_minutes)
        sub_tasks.append(
            replace(
                task,
                estimated_duration=float(minutes * 60),
                duration_label=format_duration_label(minutes),
            )
        )
    return sub_tasks


def distribute_tasks(
    tasks: Sequence[AbstractTask],
    week_start: date,
    settings: ScheduleSettings,
    calendar: ScheduleCalendar | None = None,
) -> dict[int, list[AbstractTask]]:
    """Spread a week's tasks over its available days as day-sized sub-tasks."""
    available_days = get_available_days(week_start, settings, calendar)
    if not available_days:
        logger.info(f"No available days in week starting {week_start}")
        return {}

    counts = dict.fromkeys(DistributionType, 0)
    by_day: dict[int, list[AbstractTask]] = {}

    # Tasks are visited in input order so each day's list keeps that order.
    for task in tasks:
        kind = classify_task(task)
        counts[kind] += 1

        if kind is DistributionType.DAILY:
            sub_tasks = split_task(task, len(available_days))
            for index, sub_task in enumerate(sub_tasks):
                day = available_days[index % len(available_days)]
                by_day.setdefault(day, []).append(sub_task)
            continue

        # Intensive tasks currently share the weekly policy; whether they should
        # be spread with minimum gaps instead is an open product question.
        days = min(optimal_day_count(task.estimated_duration), len(available_days))
        for index, sub_task in enumerate(split_task(task, days)):
            by_day.setdefault(available_days[index], []).append(sub_task)

    logger.debug(
        f"Distributed {len(tasks)} tasks over days {sorted(by_day)} "
        f"(daily={counts[DistributionType.DAILY]}, "
        f"weekly={counts[DistributionType.WEEKLY]}, "
        f"intensive={counts[DistributionType.INTENSIVE]})"
    )
    return by_day
