"""Weekly study task scheduling decoupled from the API layer.

This package is intentionally dependency-light. It classifies a week's
abstract learning tasks, splits them over the user's available days and packs
them into each day's study window.
"""

from .classifier import classify_task
from .distributor import (
    distribute_tasks,
    get_available_days,
    optimal_day_count,
    split_task,
)
from .durations import (
    format_duration_label,
    parse_duration_label,
    split_minutes,
    standardize_minutes,
)
from .models import (
    AbstractTask,
    DayPackResult,
    DistributionType,
    ScheduleCalendar,
    ScheduledTask,
    ScheduleSettings,
    TaskDifficulty,
    TaskPriority,
    TimeSlot,
    UnscheduledReason,
    UnscheduledTask,
    WeekPlan,
    WeeklyScheduleResult,
)
from .packer import generate_time_slots, pack_day
from .weekly import schedule_weekly_tasks

__all__ = [
    "AbstractTask",
    "classify_task",
    "DayPackResult",
    "distribute_tasks",
    "DistributionType",
    "format_duration_label",
    "generate_time_slots",
    "get_available_days",
    "optimal_day_count",
    "pack_day",
    "parse_duration_label",
    "ScheduleCalendar",
    "ScheduledTask",
    "ScheduleSettings",
    "schedule_weekly_tasks",
    "split_minutes",
    "split_task",
    "standardize_minutes",
    "TaskDifficulty",
    "TaskPriority",
    "TimeSlot",
    "UnscheduledReason",
    "UnscheduledTask",
    "WeekPlan",
    "WeeklyScheduleResult",
]
