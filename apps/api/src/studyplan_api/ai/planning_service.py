"""
Study plan generation and scheduling service
"""

import logging
from collections.abc import Sequence
from zoneinfo import ZoneInfo

from studyplan_api.ai.models import GeneratedPlan, GoalBrief
from studyplan_api.ai.plan_generator import PlanGenerator
from studyplan_api.ai.plan_ingest import build_default_plan, calculate_total_weeks
from studyplan_api.config import Settings, settings
from studyplan_api.exceptions import PlanParseError
from studyplan_scheduler import (
    ScheduleCalendar,
    ScheduleSettings,
    WeekPlan,
    WeeklyScheduleResult,
    schedule_weekly_tasks,
)

logger = logging.getLogger(__name__)


class PlanningService:
    """Generates study plans and schedules their weeks onto the calendar"""

    def __init__(
        self, generator: PlanGenerator | None = None, config: Settings | None = None
    ):
        self.config = config or settings
        self.generator = generator or PlanGenerator(config=self.config)

    def default_calendar(self) -> ScheduleCalendar:
        return ScheduleCalendar(timezone=ZoneInfo(self.config.default_timezone))

    def default_schedule_settings(self) -> ScheduleSettings:
        earliest, latest = self.config.default_window
        return ScheduleSettings(earliest_start=earliest, latest_end=latest)

    async def generate_plan(
        self, goal: GoalBrief, total_weeks: int | None = None
    ) -> GeneratedPlan:
        """Generate a plan for the goal; week count defaults to the goal's span."""
        weeks = total_weeks or calculate_total_weeks(goal.start_date, goal.target_date)
        try:
            return await self.generator.generate_plan(goal, weeks)
        except PlanParseError as e:
            if not self.config.fallback_to_default_plan:
                raise
            logger.warning(f"Falling back to default plan for '{goal.title}': {e.message}")
            return build_default_plan(goal, weeks)

    def schedule_plan(
        self,
        week_plans: Sequence[WeekPlan],
        schedule_settings: ScheduleSettings | None = None,
        goal_id: str | None = None,
        plan_id: str | None = None,
        calendar: ScheduleCalendar | None = None,
    ) -> WeeklyScheduleResult:
        """Schedule every week of a plan at its own start date."""
        schedule_settings = schedule_settings or self.default_schedule_settings()
        calendar = calendar or self.default_calendar()

        combined = WeeklyScheduleResult()
        for week_plan in week_plans:
            combined.extend(
                schedule_weekly_tasks(
                    week_plan,
                    week_plan.start_date,
                    goal_id=goal_id,
                    plan_id=plan_id,
                    settings=schedule_settings,
                    calendar=calendar,
                )
            )

        logger.info(
            f"Plan scheduling complete: {len(combined.scheduled)} tasks scheduled, "
            f"{len(combined.unscheduled)} unscheduled across {len(week_plans)} weeks"
        )
        return combined


planning_service = PlanningService()
