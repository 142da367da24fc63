from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace
from datetime import date, timedelta

from .models import (
    AbstractTask,
    DayPackResult,
    ScheduleCalendar,
    ScheduledTask,
    ScheduleSettings,
    TimeSlot,
    UnscheduledReason,
    UnscheduledTask,
)

logger = logging.getLogger(__name__)

SLOT_LENGTH = timedelta(minutes=30)


def generate_time_slots(
    day: date,
    settings: ScheduleSettings,
    calendar: ScheduleCalendar | None = None,
) -> list[TimeSlot]:
    """Chop the day's study window into 30-minute slots.

    The last slot is cut at the window end. A window whose start is not before
    its end yields no slots.
    """
    calendar = calendar or ScheduleCalendar()
    window_start = calendar.at(day, settings.window_start)
    window_end = calendar.at(day, settings.window_end)

    slots: list[TimeSlot] = []
    current = window_start
    while current < window_end:
        slot_end = min(current + SLOT_LENGTH, window_end)
        slots.append(TimeSlot(start=current, end=slot_end))
        current = slot_end
    return slots


def _packing_order(tasks: Sequence[AbstractTask]) -> list[AbstractTask]:
    # sorted() is stable, so equal keys keep their input order
    return sorted(tasks, key=lambda t: (t.difficulty.rank, t.estimated_duration))


def _find_single_slot(slots: Sequence[TimeSlot], required: timedelta) -> int | None:
    for index, slot in enumerate(slots):
        if slot.is_available and slot.duration >= required:
            return index
    return None


def _find_slot_run(
    slots: Sequence[TimeSlot], required: timedelta
) -> tuple[int, int] | None:
    """Find the first run of contiguous available slots covering ``required``.

    Returns inclusive (first, last) slot indices.
    """
    for first in range(len(slots)):
        if not slots[first].is_available:
            continue
        accumulated = timedelta(0)
        for last in range(first, len(slots)):
            slot = slots[last]
            if not slot.is_available:
                break
            if last > first and slots[last - 1].end != slot.start:
                break
            accumulated += slot.duration
            if accumulated >= required:
                return first, last
    return None


def pack_day(
    sub_tasks: Sequence[AbstractTask],
    slots: Sequence[TimeSlot],
    *,
    day: date | None = None,
    week_plan_id: str | None = None,
    week_number: int | None = None,
    goal_id: str | None = None,
    plan_id: str | None = None,
) -> DayPackResult:
    """Greedily bind a day's sub-tasks to its slots.

    Easier and shorter tasks go first. Each task takes the first single slot
    long enough for it, otherwise the first contiguous run of free slots. Tasks
    that fit nowhere are reported as unscheduled. The scheduled end is the
    start plus the task's own duration. The given slots are left untouched.
    """
    working = [replace(slot) for slot in slots]
    result = DayPackResult()
    if day is None and working:
        day = working[0].start.date()

    for task in _packing_order(sub_tasks):
        if not working:
            result.unscheduled.append(
                UnscheduledTask(
                    task=task, reason=UnscheduledReason.EMPTY_TIME_WINDOW, day=day
                )
            )
            continue

        required = timedelta(seconds=task.estimated_duration)

        single = _find_single_slot(working, required)
        if single is not None:
            span = (single, single)
        else:
            span = _find_slot_run(working, required)

        if span is None:
            logger.debug(f"No room for '{task.title}' ({required}) on {day}")
            result.unscheduled.append(
                UnscheduledTask(
                    task=task, reason=UnscheduledReason.CAPACITY_EXCEEDED, day=day
                )
            )
            continue

        first, last = span
        start = working[first].start
        scheduled = ScheduledTask.from_task(
            task,
            start,
            start + required,
            week_plan_id=week_plan_id,
            week_number=week_number,
            goal_id=goal_id,
            plan_id=plan_id,
        )
        for slot in working[first : last + 1]:
            slot.is_available = False
            slot.task_id = scheduled.id
        result.scheduled.append(scheduled)

    return result
