"""
Scheduler API endpoints for weekly study task scheduling.
"""

import logging
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator

from studyplan_api.ai.planning_service import PlanningService, planning_service
from studyplan_api.exceptions import ValidationError
from studyplan_api.routers.schemas import (
    ScheduleSettingsInput,
    ScheduleSummary,
    WeekPlanInput,
    WeeklyScheduleResponse,
    validate_timezone_name,
)
from studyplan_scheduler import ScheduleCalendar, schedule_weekly_tasks

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schedule", tags=["scheduling"])


def get_planning_service() -> PlanningService:
    return planning_service


class WeeklyScheduleRequest(BaseModel):
    """Request model for weekly task scheduling."""

    week_plan: WeekPlanInput
    week_start_date: str = Field(..., description="Week start date (YYYY-MM-DD)")
    goal_id: str | None = Field(None, description="Opaque goal identifier")
    plan_id: str | None = Field(None, description="Opaque plan identifier")
    settings: ScheduleSettingsInput | None = None
    timezone: str | None = Field(None, description="IANA timezone, e.g. Asia/Shanghai")

    @field_validator("week_start_date")
    @classmethod
    def validate_date_format(cls, v):
        try:
            datetime.strptime(v, "%Y-%m-%d")
            return v
        except ValueError:
            raise ValueError("Date must be in YYYY-MM-DD format") from None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v):
        return validate_timezone_name(v)


@router.post("/weekly", response_model=WeeklyScheduleResponse)
async def create_weekly_schedule(
    request: WeeklyScheduleRequest,
    service: PlanningService = Depends(get_planning_service),
):
    """
    Place one week plan's tasks onto concrete days and time slots.

    Tasks that do not fit are returned in ``unscheduled`` instead of being
    dropped silently.
    """
    week_start = datetime.strptime(request.week_start_date, "%Y-%m-%d").date()
    if request.week_plan.start_date != week_start:
        raise ValidationError(
            f"week plan starts on {request.week_plan.start_date}, "
            f"not on {week_start}",
            field="week_start_date",
        )
    logger.info(
        f"Scheduling week {request.week_plan.week_number} starting {week_start} "
        f"({len(request.week_plan.tasks)} tasks)"
    )

    if request.settings is not None:
        schedule_settings = request.settings.to_settings(service.config.default_window)
    else:
        schedule_settings = service.default_schedule_settings()

    if request.timezone:
        calendar = ScheduleCalendar(timezone=ZoneInfo(request.timezone))
    else:
        calendar = service.default_calendar()

    try:
        result = schedule_weekly_tasks(
            request.week_plan.to_week_plan(),
            week_start,
            goal_id=request.goal_id,
            plan_id=request.plan_id,
            settings=schedule_settings,
            calendar=calendar,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        ) from e

    summary = ScheduleSummary.from_result(result)
    return WeeklyScheduleResponse(
        week_start_date=week_start.isoformat(),
        generated_at=datetime.now(UTC),
        **dict(summary),
    )
