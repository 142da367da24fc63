"""Unit tests for task distribution classification."""

import pytest

from studyplan_scheduler import DistributionType, classify_task
from studyplan_scheduler.classifier import has_daily_marker


class TestClassifyTask:
    """Duration thresholds and the daily description marker."""

    def test_short_task_with_daily_marker_is_daily(self, make_task):
        task = make_task(minutes=25, description="每日练习")
        assert classify_task(task) is DistributionType.DAILY

    def test_short_task_without_marker_is_weekly(self, make_task):
        task = make_task(minutes=25, description="Read one article")
        assert classify_task(task) is DistributionType.WEEKLY

    def test_half_hour_boundary_is_short(self, make_task):
        task = make_task(minutes=30, description="practice every day")
        assert classify_task(task) is DistributionType.DAILY

    def test_medium_task_is_weekly_regardless_of_description(self, make_task):
        task = make_task(minutes=90, description="每日练习")
        assert classify_task(task) is DistributionType.WEEKLY

    def test_two_hour_boundary_is_weekly(self, make_task):
        assert classify_task(make_task(minutes=120)) is DistributionType.WEEKLY

    def test_long_task_is_intensive(self, make_task):
        task = make_task(minutes=180, description="daily")
        assert classify_task(task) is DistributionType.INTENSIVE

    def test_classification_is_deterministic(self, make_task):
        task = make_task(minutes=25, description="每天背单词")
        results = {classify_task(task) for _ in range(10)}
        assert results == {DistributionType.DAILY}


@pytest.mark.parametrize(
    "description,expected",
    [
        ("每日练习", True),
        ("每天背单词", True),
        ("Daily vocabulary", True),
        ("Listen every day", True),
        ("weekly review", False),
        ("", False),
    ],
)
def test_has_daily_marker(description, expected):
    assert has_daily_marker(description) is expected
