"""
Tests for the planning service: fallback plans and multi-week scheduling
"""

from datetime import date, time
from unittest.mock import AsyncMock, Mock

import pytest

from studyplan_api.ai.models import GeneratedPlan, GoalBrief
from studyplan_api.ai.plan_ingest import build_default_plan
from studyplan_api.ai.planning_service import PlanningService
from studyplan_api.config import Settings
from studyplan_api.exceptions import GeneratorAPIError, PlanParseError
from studyplan_scheduler import ScheduleSettings, UnscheduledReason


@pytest.fixture
def goal():
    return GoalBrief(
        title="Learn Spanish",
        start_date=date(2024, 1, 1),
        target_date=date(2024, 1, 21),
    )


@pytest.fixture
def mock_generator():
    generator = Mock()
    generator.generate_plan = AsyncMock()
    return generator


def make_service(generator, **overrides):
    config = Settings(
        openai_api_key="sk-test",
        default_timezone="Asia/Shanghai",
        default_earliest_start="19:00",
        default_latest_end="21:00",
        **overrides,
    )
    return PlanningService(generator=generator, config=config)


class TestGeneratePlan:
    @pytest.mark.asyncio
    async def test_week_count_defaults_to_goal_span(self, goal, mock_generator):
        expected = GeneratedPlan(title="Plan", description="", total_weeks=3)
        mock_generator.generate_plan.return_value = expected
        service = make_service(mock_generator)

        plan = await service.generate_plan(goal)

        assert plan is expected
        mock_generator.generate_plan.assert_awaited_once_with(goal, 3)

    @pytest.mark.asyncio
    async def test_explicit_week_count(self, goal, mock_generator):
        mock_generator.generate_plan.return_value = GeneratedPlan(
            title="Plan", description="", total_weeks=5
        )
        service = make_service(mock_generator)

        await service.generate_plan(goal, total_weeks=5)

        mock_generator.generate_plan.assert_awaited_once_with(goal, 5)

    @pytest.mark.asyncio
    async def test_parse_error_falls_back_to_default_plan(self, goal, mock_generator):
        mock_generator.generate_plan.side_effect = PlanParseError("bad json")
        service = make_service(mock_generator)

        plan = await service.generate_plan(goal)

        assert plan.is_fallback is True
        assert plan.total_weeks == 3
        assert len(plan.week_plans) == 3

    @pytest.mark.asyncio
    async def test_parse_error_propagates_when_fallback_disabled(self, goal, mock_generator):
        mock_generator.generate_plan.side_effect = PlanParseError("bad json")
        service = make_service(mock_generator, fallback_to_default_plan=False)

        with pytest.raises(PlanParseError):
            await service.generate_plan(goal)

    @pytest.mark.asyncio
    async def test_api_errors_are_not_masked(self, goal, mock_generator):
        mock_generator.generate_plan.side_effect = GeneratorAPIError("down", attempts=4)
        service = make_service(mock_generator)

        with pytest.raises(GeneratorAPIError):
            await service.generate_plan(goal)


class TestSchedulePlan:
    def test_default_settings_from_config(self, mock_generator):
        service = make_service(mock_generator)
        settings = service.default_schedule_settings()

        assert settings.window_start == time(19, 0)
        assert settings.window_end == time(21, 0)
        assert settings.selected_weekdays == frozenset({2, 3, 4, 5, 6})
        assert str(service.default_calendar().timezone) == "Asia/Shanghai"

    def test_each_week_scheduled_at_its_start(self, goal, mock_generator):
        service = make_service(mock_generator)
        plan = build_default_plan(goal, 2)

        result = service.schedule_plan(plan.week_plans, goal_id="goal-1", plan_id="plan-1")

        assert result.scheduled
        week_numbers = {task.week_number for task in result.scheduled}
        assert week_numbers == {1, 2}
        for task in result.scheduled:
            week = plan.week_plans[task.week_number - 1]
            assert week.start_date <= task.scheduled_date <= week.end_date
            assert task.goal_id == "goal-1"
            assert task.plan_id == "plan-1"
            assert time(19, 0) <= task.scheduled_start.time()
            assert task.scheduled_end.time() <= time(21, 0)

    def test_explicit_settings_override_defaults(self, goal, mock_generator):
        service = make_service(mock_generator)
        plan = build_default_plan(goal, 1)

        result = service.schedule_plan(
            plan.week_plans, ScheduleSettings(selected_weekdays=frozenset())
        )

        assert result.scheduled == []
        assert len(result.unscheduled) == 5
        assert all(u.reason is UnscheduledReason.NO_AVAILABLE_DAYS for u in result.unscheduled)
