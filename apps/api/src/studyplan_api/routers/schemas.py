"""
Request and response models shared by the scheduling routers.
"""

from datetime import date, datetime, time
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_serializer, field_validator

from studyplan_scheduler import (
    AbstractTask,
    ScheduledTask,
    ScheduleSettings,
    TaskDifficulty,
    UnscheduledTask,
    WeekPlan,
    WeeklyScheduleResult,
)


def _parse_hhmm(v: str) -> str:
    try:
        time_parts = v.split(":")
        if len(time_parts) != 2:
            raise ValueError("Time must be in HH:MM format")
        hour, minute = map(int, time_parts)
        if not (0 <= hour <= 23 and 0 <= minute <= 59):
            raise ValueError("Invalid time values")
        return f"{hour:02d}:{minute:02d}"
    except (ValueError, TypeError):
        raise ValueError("Time must be in HH:MM format") from None


def _to_time(v: str | None) -> time | None:
    if v is None:
        return None
    return datetime.strptime(v, "%H:%M").time()


class TaskInput(BaseModel):
    """Abstract weekly task as sent by clients."""

    id: str | None = Field(None, description="Task identifier (generated if omitted)")
    title: str = Field(..., min_length=1)
    description: str = ""
    quantity: str = ""
    duration_label: str = ""
    estimated_duration: float = Field(..., gt=0, description="Duration in seconds")
    difficulty: TaskDifficulty = TaskDifficulty.MEDIUM
    preferred_weekdays: list[int] = Field(default_factory=list)
    preferred_time_slots: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)

    def to_task(self) -> AbstractTask:
        kwargs: dict[str, Any] = {}
        if self.id:
            kwargs["id"] = self.id
        return AbstractTask(
            title=self.title,
            description=self.description,
            quantity=self.quantity,
            duration_label=self.duration_label,
            estimated_duration=self.estimated_duration,
            difficulty=self.difficulty,
            preferred_weekdays=tuple(self.preferred_weekdays),
            preferred_time_slots=tuple(self.preferred_time_slots),
            dependencies=tuple(self.dependencies),
            **kwargs,
        )


class WeekPlanInput(BaseModel):
    id: str | None = None
    week_number: int = Field(1, ge=1)
    start_date: date
    milestones: list[str] = Field(default_factory=list)
    task_count: int = Field(0, ge=0)
    estimated_hours: float = Field(0.0, ge=0)
    tasks: list[TaskInput] = Field(default_factory=list)

    def to_week_plan(self) -> WeekPlan:
        kwargs: dict[str, Any] = {}
        if self.id:
            kwargs["id"] = self.id
        return WeekPlan(
            week_number=self.week_number,
            start_date=self.start_date,
            milestones=list(self.milestones),
            task_count=self.task_count,
            estimated_hours=self.estimated_hours,
            tasks=[task.to_task() for task in self.tasks],
            **kwargs,
        )


class ScheduleSettingsInput(BaseModel):
    """User availability for scheduling."""

    selected_weekdays: list[int] = Field(
        default_factory=lambda: [2, 3, 4, 5, 6],
        description="Weekday codes, 1=Sunday ... 7=Saturday",
    )
    earliest_start: str | None = Field(None, description="HH:MM")
    latest_end: str | None = Field(None, description="HH:MM")

    @field_validator("selected_weekdays")
    @classmethod
    def validate_weekdays(cls, v):
        invalid = [code for code in v if not 1 <= code <= 7]
        if invalid:
            raise ValueError(f"Weekday codes must be between 1 and 7: {invalid}")
        return v

    @field_validator("earliest_start", "latest_end")
    @classmethod
    def validate_time_format(cls, v):
        if v is None:
            return v
        return _parse_hhmm(v)

    def to_settings(self, default_window: tuple[time, time]) -> ScheduleSettings:
        earliest = _to_time(self.earliest_start) or default_window[0]
        latest = _to_time(self.latest_end) or default_window[1]
        return ScheduleSettings(
            selected_weekdays=frozenset(self.selected_weekdays),
            earliest_start=earliest,
            latest_end=latest,
        )


def validate_timezone_name(v: str | None) -> str | None:
    if v is None:
        return v
    try:
        ZoneInfo(v)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone: {v}") from None
    return v


class ScheduledTaskOutput(BaseModel):
    id: str
    source_task_id: str | None
    title: str
    description: str
    quantity: str
    duration_label: str
    estimated_duration: float
    difficulty: TaskDifficulty
    priority: str
    scheduled_start: datetime
    scheduled_end: datetime
    week_plan_id: str | None
    week_number: int | None
    goal_id: str | None
    plan_id: str | None

    @field_serializer("scheduled_start", "scheduled_end")
    def serialize_timestamp(self, value: datetime) -> str:
        return value.isoformat()

    @classmethod
    def from_scheduled(cls, task: ScheduledTask) -> "ScheduledTaskOutput":
        return cls(
            id=task.id,
            source_task_id=task.source_task_id,
            title=task.title,
            description=task.description,
            quantity=task.quantity,
            duration_label=task.duration_label,
            estimated_duration=task.estimated_duration,
            difficulty=task.difficulty,
            priority=task.priority.value,
            scheduled_start=task.scheduled_start,
            scheduled_end=task.scheduled_end,
            week_plan_id=task.week_plan_id,
            week_number=task.week_number,
            goal_id=task.goal_id,
            plan_id=task.plan_id,
        )


class UnscheduledTaskOutput(BaseModel):
    task_id: str
    title: str
    estimated_duration: float
    reason: str
    day: date | None = None

    @classmethod
    def from_unscheduled(cls, item: UnscheduledTask) -> "UnscheduledTaskOutput":
        return cls(
            task_id=item.task.id,
            title=item.task.title,
            estimated_duration=item.task.estimated_duration,
            reason=item.reason.value,
            day=item.day,
        )


class ScheduleSummary(BaseModel):
    success: bool
    scheduled: list[ScheduledTaskOutput]
    unscheduled: list[UnscheduledTaskOutput]
    total_scheduled_minutes: float

    @classmethod
    def from_result(cls, result: WeeklyScheduleResult) -> "ScheduleSummary":
        return cls(
            success=result.success,
            scheduled=[ScheduledTaskOutput.from_scheduled(t) for t in result.scheduled],
            unscheduled=[
                UnscheduledTaskOutput.from_unscheduled(u) for u in result.unscheduled
            ],
            total_scheduled_minutes=result.total_scheduled_minutes,
        )


class WeeklyScheduleResponse(ScheduleSummary):
    week_start_date: str
    generated_at: datetime

    @field_serializer("generated_at")
    def serialize_generated_at(self, value: datetime) -> str:
        return value.isoformat()
