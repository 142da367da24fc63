"""
AI planning endpoints: generate a study plan and optionally schedule it.
"""

import logging
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_serializer, field_validator

from studyplan_api.ai.models import GoalBrief, LearningResource
from studyplan_api.ai.planning_service import PlanningService
from studyplan_api.routers.scheduler import get_planning_service
from studyplan_api.routers.schemas import (
    ScheduleSettingsInput,
    ScheduleSummary,
    validate_timezone_name,
)
from studyplan_scheduler import ScheduleCalendar, WeekPlan

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai-planning"])


class PlanGenerationRequest(BaseModel):
    goal: GoalBrief
    goal_id: str | None = None
    plan_id: str | None = None
    total_weeks: int | None = Field(None, ge=1, le=52)
    schedule: bool = Field(False, description="Also schedule the generated weeks")
    settings: ScheduleSettingsInput | None = None
    timezone: str | None = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v):
        return validate_timezone_name(v)


class GeneratedTaskOutput(BaseModel):
    id: str
    title: str
    description: str
    quantity: str
    duration_label: str
    estimated_duration: float
    difficulty: str


class GeneratedWeekOutput(BaseModel):
    id: str
    week_number: int
    start_date: date
    end_date: date
    milestones: list[str]
    task_count: int
    estimated_hours: float
    total_minutes: float
    tasks: list[GeneratedTaskOutput]

    @classmethod
    def from_week_plan(cls, week: WeekPlan) -> "GeneratedWeekOutput":
        return cls(
            id=week.id,
            week_number=week.week_number,
            start_date=week.start_date,
            end_date=week.end_date,
            milestones=week.milestones,
            task_count=week.task_count,
            estimated_hours=week.estimated_hours,
            total_minutes=week.total_minutes,
            tasks=[
                GeneratedTaskOutput(
                    id=task.id,
                    title=task.title,
                    description=task.description,
                    quantity=task.quantity,
                    duration_label=task.duration_label,
                    estimated_duration=task.estimated_duration,
                    difficulty=task.difficulty.value,
                )
                for task in week.tasks
            ],
        )


class PlanGenerationResponse(BaseModel):
    title: str
    description: str
    total_weeks: int
    is_fallback: bool
    weeks: list[GeneratedWeekOutput]
    resources: list[LearningResource]
    schedule: ScheduleSummary | None = None
    generated_at: datetime

    @field_serializer("generated_at")
    def serialize_generated_at(self, value: datetime) -> str:
        return value.isoformat()


@router.post("/plans", response_model=PlanGenerationResponse)
async def generate_plan(
    request: PlanGenerationRequest,
    service: PlanningService = Depends(get_planning_service),
):
    """
    Generate a week-by-week study plan for a goal.

    Generator failures surface through the exception handlers as 502/503.
    """
    plan = await service.generate_plan(request.goal, request.total_weeks)

    schedule = None
    if request.schedule:
        schedule_settings = (
            request.settings.to_settings(service.config.default_window)
            if request.settings is not None
            else None
        )
        calendar = (
            ScheduleCalendar(timezone=ZoneInfo(request.timezone))
            if request.timezone
            else None
        )
        result = service.schedule_plan(
            plan.week_plans,
            schedule_settings,
            goal_id=request.goal_id,
            plan_id=request.plan_id,
            calendar=calendar,
        )
        schedule = ScheduleSummary.from_result(result)

    return PlanGenerationResponse(
        title=plan.title,
        description=plan.description,
        total_weeks=plan.total_weeks,
        is_fallback=plan.is_fallback,
        weeks=[GeneratedWeekOutput.from_week_plan(w) for w in plan.week_plans],
        resources=plan.resources,
        schedule=schedule,
        generated_at=datetime.now(UTC),
    )
