"""Unit tests for time slot generation and greedy day packing."""

from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo

import pytest

from studyplan_scheduler import (
    ScheduleSettings,
    TaskDifficulty,
    TimeSlot,
    UnscheduledReason,
    generate_time_slots,
    pack_day,
)

SHANGHAI = ZoneInfo("Asia/Shanghai")


def at(hour, minute=0):
    return datetime(2024, 1, 1, hour, minute, tzinfo=SHANGHAI)


def window(start, end):
    return ScheduleSettings(earliest_start=start, latest_end=end)


class TestGenerateTimeSlots:
    """Chopping a study window into 30-minute slots."""

    def test_evening_window_has_eight_slots(self, monday, evening_settings, calendar):
        slots = generate_time_slots(monday, evening_settings, calendar)
        assert len(slots) == 8
        assert slots[0].start == at(18)
        assert slots[-1].end == at(22)
        assert all(slot.duration == timedelta(minutes=30) for slot in slots)
        assert all(slot.is_available for slot in slots)

    def test_slots_are_contiguous(self, monday, evening_settings, calendar):
        slots = generate_time_slots(monday, evening_settings, calendar)
        for previous, current in zip(slots, slots[1:]):
            assert previous.end == current.start

    def test_final_slot_cut_at_window_end(self, monday, calendar):
        slots = generate_time_slots(monday, window(time(18, 0), time(19, 15)), calendar)
        assert len(slots) == 3
        assert slots[-1].start == at(19)
        assert slots[-1].end == at(19, 15)
        assert slots[-1].duration == timedelta(minutes=15)

    @pytest.mark.parametrize(
        "start,end", [(time(22, 0), time(18, 0)), (time(20, 0), time(20, 0))]
    )
    def test_empty_window(self, monday, calendar, start, end):
        assert generate_time_slots(monday, window(start, end), calendar) == []

    def test_default_window_used_when_unset(self, monday, calendar):
        slots = generate_time_slots(monday, ScheduleSettings(), calendar)
        assert slots[0].start == at(18)
        assert slots[-1].end == at(22)

    def test_slots_carry_timezone(self, monday, evening_settings, calendar):
        slot = generate_time_slots(monday, evening_settings, calendar)[0]
        assert slot.start.utcoffset() == timedelta(hours=8)


class TestPackDay:
    """Greedy binding of sub-tasks to slots."""

    @pytest.fixture
    def slots(self, monday, evening_settings, calendar):
        return generate_time_slots(monday, evening_settings, calendar)

    def test_task_fits_single_slot(self, slots, make_task):
        task = make_task(minutes=30)
        result = pack_day([task], slots)

        assert result.unscheduled == []
        assert len(result.scheduled) == 1
        scheduled = result.scheduled[0]
        assert scheduled.scheduled_start == at(18)
        assert scheduled.scheduled_end == at(18, 30)
        assert scheduled.source_task_id == task.id

    def test_task_spans_contiguous_run(self, slots, make_task):
        """A 45-minute task takes two slots but ends at its own duration."""
        result = pack_day([make_task(minutes=45)], slots)

        scheduled = result.scheduled[0]
        assert scheduled.scheduled_start == at(18)
        assert scheduled.scheduled_end == at(18, 45)

    def test_run_slots_not_reused(self, slots, make_task):
        first = make_task(title="Long", minutes=45, difficulty=TaskDifficulty.EASY)
        second = make_task(title="Short", minutes=30, difficulty=TaskDifficulty.MEDIUM)
        result = pack_day([first, second], slots)

        by_title = {t.title: t for t in result.scheduled}
        assert by_title["Long"].scheduled_start == at(18)
        assert by_title["Short"].scheduled_start == at(19)

    def test_scheduled_tasks_do_not_overlap(self, slots, make_task):
        tasks = [make_task(minutes=m) for m in (15, 30, 45, 60, 75)]
        result = pack_day(tasks, slots)

        intervals = sorted((t.scheduled_start, t.scheduled_end) for t in result.scheduled)
        for (_, previous_end), (next_start, _) in zip(intervals, intervals[1:]):
            assert previous_end <= next_start
        for start, end in intervals:
            assert at(18) <= start < end <= at(22)

    def test_easier_and_shorter_tasks_first(self, slots, make_task):
        hard = make_task(title="Hard", minutes=30, difficulty=TaskDifficulty.HARD)
        easy_long = make_task(title="Easy long", minutes=60, difficulty=TaskDifficulty.EASY)
        easy_short = make_task(title="Easy short", minutes=30, difficulty=TaskDifficulty.EASY)
        result = pack_day([hard, easy_long, easy_short], slots)

        assert [t.title for t in result.scheduled] == ["Easy short", "Easy long", "Hard"]
        assert result.scheduled[0].scheduled_start == at(18)
        assert result.scheduled[1].scheduled_start == at(18, 30)
        assert result.scheduled[2].scheduled_start == at(19, 30)

    def test_equal_keys_keep_input_order(self, slots, make_task):
        tasks = [make_task(title=name, minutes=30) for name in ("A", "B", "C")]
        result = pack_day(tasks, slots)
        assert [t.title for t in result.scheduled] == ["A", "B", "C"]

    def test_capacity_exceeded_reported(self, monday, calendar, make_task):
        slots = generate_time_slots(monday, window(time(18, 0), time(19, 0)), calendar)
        task = make_task(minutes=90)
        result = pack_day([task], slots, day=monday)

        assert result.scheduled == []
        assert len(result.unscheduled) == 1
        assert result.unscheduled[0].task is task
        assert result.unscheduled[0].reason is UnscheduledReason.CAPACITY_EXCEEDED
        assert result.unscheduled[0].day == monday

    def test_overflow_is_partial(self, slots, make_task):
        """Tasks that no longer fit are reported, the rest stay scheduled."""
        tasks = [make_task(title=f"T{i}", minutes=90) for i in range(4)]
        result = pack_day(tasks, slots)

        assert len(result.scheduled) == 2
        assert len(result.unscheduled) == 2
        assert all(
            u.reason is UnscheduledReason.CAPACITY_EXCEEDED for u in result.unscheduled
        )

    def test_non_contiguous_slots_not_joined(self, make_task):
        slots = [
            TimeSlot(start=at(18), end=at(18, 30)),
            TimeSlot(start=at(19), end=at(19, 30)),
        ]
        result = pack_day([make_task(minutes=45)], slots)
        assert result.scheduled == []
        assert result.unscheduled[0].reason is UnscheduledReason.CAPACITY_EXCEEDED

    def test_occupied_slots_skipped(self, make_task):
        slots = [
            TimeSlot(start=at(18), end=at(18, 30), is_available=False),
            TimeSlot(start=at(18, 30), end=at(19)),
        ]
        result = pack_day([make_task(minutes=30)], slots)
        assert result.scheduled[0].scheduled_start == at(18, 30)

    def test_empty_window_reported(self, monday, make_task):
        result = pack_day([make_task()], [], day=monday)
        assert result.scheduled == []
        assert result.unscheduled[0].reason is UnscheduledReason.EMPTY_TIME_WINDOW
        assert result.unscheduled[0].day == monday

    def test_input_slots_not_mutated(self, slots, make_task):
        pack_day([make_task(minutes=60), make_task(minutes=30)], slots)
        assert all(slot.is_available for slot in slots)
        assert all(slot.task_id is None for slot in slots)

    def test_identifiers_passed_through(self, slots, make_task):
        result = pack_day(
            [make_task()],
            slots,
            week_plan_id="week-1",
            week_number=3,
            goal_id="goal-1",
            plan_id="plan-1",
        )
        scheduled = result.scheduled[0]
        assert scheduled.week_plan_id == "week-1"
        assert scheduled.week_number == 3
        assert scheduled.goal_id == "goal-1"
        assert scheduled.plan_id == "plan-1"

    def test_priority_follows_difficulty(self, slots, make_task):
        result = pack_day([make_task(difficulty=TaskDifficulty.HARD)], slots)
        assert result.scheduled[0].priority.value == "high"
