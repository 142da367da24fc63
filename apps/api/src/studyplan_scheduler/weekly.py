from __future__ import annotations

import logging
from datetime import date, timedelta

from .distributor import DAYS_IN_WEEK, distribute_tasks, get_available_days
from .models import (
    ScheduleCalendar,
    ScheduleSettings,
    UnscheduledReason,
    UnscheduledTask,
    WeekPlan,
    WeeklyScheduleResult,
)
from .packer import generate_time_slots, pack_day

logger = logging.getLogger(__name__)


def schedule_weekly_tasks(
    week_plan: WeekPlan,
    week_start_date: date,
    goal_id: str | None = None,
    plan_id: str | None = None,
    settings: ScheduleSettings | None = None,
    calendar: ScheduleCalendar | None = None,
) -> WeeklyScheduleResult:
    """Place a week plan's abstract tasks onto concrete days and times.

    Tasks are classified, split into day-sized sub-tasks over the selected
    weekdays and packed into each day's study window. Sub-tasks that cannot be
    placed are returned in ``unscheduled`` with the reason.
    """
    settings = settings or ScheduleSettings()
    calendar = calendar or ScheduleCalendar()
    result = WeeklyScheduleResult()

    if not get_available_days(week_start_date, settings, calendar):
        logger.warning(
            f"Week {week_plan.week_number}: no selected weekdays, "
            f"{len(week_plan.tasks)} tasks left unscheduled"
        )
        result.unscheduled.extend(
            UnscheduledTask(task=task, reason=UnscheduledReason.NO_AVAILABLE_DAYS)
            for task in week_plan.tasks
        )
        return result

    by_day = distribute_tasks(week_plan.tasks, week_start_date, settings, calendar)

    for offset in range(DAYS_IN_WEEK):
        day = week_start_date + timedelta(days=offset)
        if calendar.weekday_code(day) not in settings.selected_weekdays:
            continue

        day_tasks = by_day.get(offset, [])
        slots = generate_time_slots(day, settings, calendar)
        day_result = pack_day(
            day_tasks,
            slots,
            day=day,
            week_plan_id=week_plan.id,
            week_number=week_plan.week_number,
            goal_id=goal_id,
            plan_id=plan_id,
        )
        logger.debug(
            f"{day}: {len(slots)} slots, {len(day_result.scheduled)}/"
            f"{len(day_tasks)} sub-tasks scheduled"
        )
        result.extend(day_result)

    if result.unscheduled:
        logger.warning(
            f"Week {week_plan.week_number}: {len(result.unscheduled)} sub-tasks "
            f"could not be scheduled"
        )
    logger.info(
        f"Week {week_plan.week_number}: scheduled {len(result.scheduled)} tasks "
        f"({result.total_scheduled_minutes:.0f} min)"
    )
    return result
