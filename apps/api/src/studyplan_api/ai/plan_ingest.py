"""
Conversion of generator output into scheduler week plans.

This is the only place free-text duration labels are parsed; everything past
this point uses the numeric ``estimated_duration``.
"""

import json
import logging
import math
from datetime import date, timedelta
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from studyplan_api.ai.models import (
    GeneratedPlan,
    GoalBrief,
    LearningResource,
    RawPlan,
    RawResource,
    RawTask,
    RawWeekPlan,
    ResourceType,
)
from studyplan_api.exceptions import PlanParseError
from studyplan_scheduler import (
    AbstractTask,
    TaskDifficulty,
    WeekPlan,
    parse_duration_label,
)

logger = logging.getLogger(__name__)

_EASY_LABELS = {"简单", "easy"}
_HARD_LABELS = {"困难", "hard"}

_RESOURCE_TYPES = {
    ResourceType.VIDEO: {"视频", "video"},
    ResourceType.TEXTBOOK: {"文档", "document", "pdf", "教材", "textbook"},
    ResourceType.WEBSITE: {"网站", "website", "url"},
    ResourceType.APP: {"应用", "app", "application"},
    ResourceType.EXERCISE: {"习题", "exercise"},
    ResourceType.COURSE: {"课程", "course"},
}


def calculate_total_weeks(start_date: date, end_date: date) -> int:
    """Weeks between two dates, rounded up, at least one."""
    days = (end_date - start_date).days
    return max(1, math.ceil(days / 7))


def align_to_monday(day: date) -> date:
    """Move forward to the next Monday unless ``day`` already is one."""
    return day + timedelta(days=(7 - day.weekday()) % 7)


def week_start_for(plan_start: date, week_number: int) -> date:
    return align_to_monday(plan_start) + timedelta(weeks=week_number - 1)


def map_difficulty(label: str | None) -> TaskDifficulty:
    normalized = (label or "").strip().lower()
    if normalized in _EASY_LABELS:
        return TaskDifficulty.EASY
    if normalized in _HARD_LABELS:
        return TaskDifficulty.HARD
    return TaskDifficulty.MEDIUM


def map_resource_type(label: str | None) -> ResourceType:
    normalized = (label or "").strip().lower()
    for resource_type, labels in _RESOURCE_TYPES.items():
        if normalized in labels:
            return resource_type
    return ResourceType.OTHER


def strip_code_fences(text: str) -> str:
    return text.replace("```json", "").replace("```", "").strip()


def load_plan_json(text: str) -> dict[str, Any]:
    """Decode generator output into a JSON object."""
    cleaned = strip_code_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise PlanParseError(f"Generator output is not valid JSON: {e.msg}") from e
    if not isinstance(data, dict):
        raise PlanParseError(
            f"Generator output must be a JSON object, got {type(data).__name__}"
        )
    return data


def to_abstract_task(raw: RawTask) -> AbstractTask:
    return AbstractTask(
        title=raw.title,
        description=raw.description,
        quantity=raw.quantity,
        duration_label=raw.duration,
        estimated_duration=parse_duration_label(raw.duration),
        difficulty=map_difficulty(raw.difficulty),
    )


def parse_week_plan(data: Any, plan_start: date) -> WeekPlan | None:
    """Convert one generator week entry; entries without a week number are skipped."""
    try:
        raw_week = RawWeekPlan.model_validate(data)
    except PydanticValidationError as e:
        logger.warning(f"Skipping malformed week entry: {e.error_count()} error(s)")
        return None

    tasks = []
    for index, item in enumerate(raw_week.tasks, start=1):
        try:
            tasks.append(to_abstract_task(RawTask.model_validate(item)))
        except PydanticValidationError:
            logger.warning(
                f"Week {raw_week.week_number}: skipping malformed task #{index}"
            )

    return WeekPlan(
        week_number=raw_week.week_number,
        start_date=week_start_for(plan_start, raw_week.week_number),
        milestones=raw_week.milestones,
        task_count=raw_week.task_count,
        estimated_hours=raw_week.estimated_hours,
        tasks=tasks,
    )


def parse_resource(data: Any) -> LearningResource | None:
    try:
        raw = RawResource.model_validate(data)
    except PydanticValidationError:
        return None
    return LearningResource(
        title=raw.title,
        type=map_resource_type(raw.type),
        url=raw.url,
        description=raw.description,
    )


def parse_generated_plan(
    text: str, goal: GoalBrief, total_weeks: int
) -> GeneratedPlan:
    """Parse raw generator text into a ``GeneratedPlan``.

    Raises ``PlanParseError`` when the text is not a JSON plan object.
    """
    try:
        raw_plan = RawPlan.model_validate(load_plan_json(text))
    except PydanticValidationError as e:
        raise PlanParseError(f"Generator output has an invalid plan shape: {e}") from e

    week_plans = [
        week
        for week in (parse_week_plan(item, goal.start_date) for item in raw_plan.weekly_plans)
        if week is not None
    ]
    if not week_plans:
        raise PlanParseError("Generator output contains no usable weekly plans")
    week_plans.sort(key=lambda week: week.week_number)
    if len(week_plans) != total_weeks:
        logger.warning(
            f"Generator returned {len(week_plans)} weeks, {total_weeks} requested "
            f"(plan claims {raw_plan.total_weeks})"
        )
    resources = [
        resource
        for resource in (parse_resource(item) for item in raw_plan.resources)
        if resource is not None
    ]

    logger.info(
        f"Parsed generated plan: {len(week_plans)} weeks, "
        f"{sum(len(w.tasks) for w in week_plans)} tasks, {len(resources)} resources"
    )

    return GeneratedPlan(
        title=raw_plan.title or f"{goal.title} study plan",
        description=raw_plan.description or "AI generated study plan",
        total_weeks=len(week_plans),
        week_plans=week_plans,
        resources=resources,
    )


def _default_tasks() -> list[AbstractTask]:
    specs = [
        ("Theory study", "Study the core concepts", "2 hours", "2小时", TaskDifficulty.MEDIUM),
        ("Practice", "Work through exercises", "5 exercises", "1小时", TaskDifficulty.MEDIUM),
        ("Review", "Review this week's material", "1 session", "1小时", TaskDifficulty.EASY),
        ("Extended reading", "Read related material", "3 articles", "1小时", TaskDifficulty.EASY),
        ("Reflection", "Write a short summary", "1 note", "30分钟", TaskDifficulty.EASY),
    ]
    return [
        AbstractTask(
            title=title,
            description=description,
            quantity=quantity,
            duration_label=duration,
            estimated_duration=parse_duration_label(duration),
            difficulty=difficulty,
        )
        for title, description, quantity, duration, difficulty in specs
    ]


def build_default_plan(goal: GoalBrief, total_weeks: int) -> GeneratedPlan:
    """Generic plan used when generator output cannot be parsed."""
    week_plans = []
    for week_number in range(1, total_weeks + 1):
        tasks = _default_tasks()
        week_plans.append(
            WeekPlan(
                week_number=week_number,
                start_date=week_start_for(goal.start_date, week_number),
                milestones=[f"Complete week {week_number} goals"],
                task_count=len(tasks),
                estimated_hours=10.0,
                tasks=tasks,
            )
        )
    return GeneratedPlan(
        title=f"{goal.title} study plan",
        description="Study plan generated from the goal",
        total_weeks=total_weeks,
        week_plans=week_plans,
        is_fallback=True,
    )
