import os
from datetime import date, time
from zoneinfo import ZoneInfo

import pytest

# Set test environment variables before importing any application code
os.environ.update({
    "OPENAI_API_KEY": "sk-test-key-for-testing-purposes-only",
    "ENVIRONMENT": "test",
    "DEBUG": "true",
    "DEFAULT_TIMEZONE": "Asia/Shanghai",
    "PLAN_GENERATION_RETRY_DELAY_SECONDS": "0",
})

from studyplan_scheduler import (  # noqa: E402
    AbstractTask,
    ScheduleCalendar,
    ScheduleSettings,
    TaskDifficulty,
    WeekPlan,
)


@pytest.fixture
def calendar():
    """Calendar pinned to the default study timezone"""
    return ScheduleCalendar(timezone=ZoneInfo("Asia/Shanghai"))


@pytest.fixture
def monday():
    """2024-01-01 is a Monday"""
    return date(2024, 1, 1)


@pytest.fixture
def sunday():
    """2023-12-31 is a Sunday"""
    return date(2023, 12, 31)


@pytest.fixture
def evening_settings():
    """Weekday evenings, 18:00-22:00"""
    return ScheduleSettings(
        selected_weekdays=frozenset({2, 3, 4, 5, 6}),
        earliest_start=time(18, 0),
        latest_end=time(22, 0),
    )


@pytest.fixture
def make_task():
    """Factory for abstract tasks with sensible defaults"""

    def _make(
        title="Task",
        minutes=60,
        difficulty=TaskDifficulty.MEDIUM,
        description="",
        **kwargs,
    ):
        return AbstractTask(
            title=title,
            estimated_duration=minutes * 60,
            difficulty=difficulty,
            description=description,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_week_plan():
    """Factory for week plans"""

    def _make(tasks, start_date=date(2024, 1, 1), week_number=1, **kwargs):
        return WeekPlan(
            week_number=week_number,
            start_date=start_date,
            tasks=list(tasks),
            **kwargs,
        )

    return _make
