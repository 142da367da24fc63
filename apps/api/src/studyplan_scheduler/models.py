from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from enum import Enum
from uuid import uuid4

# Sunday-first weekday codes: 1 = Sunday, 2 = Monday ... 7 = Saturday
SUNDAY = 1
MONDAY = 2
SATURDAY = 7
WEEKDAY_CODES = frozenset(range(SUNDAY, SATURDAY + 1))
DEFAULT_SELECTED_WEEKDAYS = frozenset({2, 3, 4, 5, 6})

DEFAULT_EARLIEST_START = time(18, 0)
DEFAULT_LATEST_END = time(22, 0)


def _new_id() -> str:
    return str(uuid4())


class TaskDifficulty(Enum):
    """Ordered task difficulty (easy < medium < hard)."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def rank(self) -> int:
        return _DIFFICULTY_RANK[self]

    @property
    def priority(self) -> TaskPriority:
        return _DIFFICULTY_PRIORITY[self]


class TaskPriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


_DIFFICULTY_RANK = {
    TaskDifficulty.EASY: 0,
    TaskDifficulty.MEDIUM: 1,
    TaskDifficulty.HARD: 2,
}

_DIFFICULTY_PRIORITY = {
    TaskDifficulty.EASY: TaskPriority.LOW,
    TaskDifficulty.MEDIUM: TaskPriority.MEDIUM,
    TaskDifficulty.HARD: TaskPriority.HIGH,
}


class DistributionType(Enum):
    """How a weekly task should be spread across the week."""

    DAILY = "daily"
    WEEKLY = "weekly"
    INTENSIVE = "intensive"


class UnscheduledReason(Enum):
    NO_AVAILABLE_DAYS = "no_available_days"
    EMPTY_TIME_WINDOW = "empty_time_window"
    CAPACITY_EXCEEDED = "capacity_exceeded"


@dataclass(frozen=True)
class AbstractTask:
    """A learning task with a duration and difficulty but no calendar time yet.

    ``estimated_duration`` is in seconds and is the only duration the scheduler
    reads; ``duration_label`` is kept for display.
    """

    title: str
    estimated_duration: float
    difficulty: TaskDifficulty = TaskDifficulty.MEDIUM
    description: str = ""
    quantity: str = ""
    duration_label: str = ""
    preferred_weekdays: tuple[int, ...] = ()
    preferred_time_slots: tuple[str, ...] = ()
    dependencies: tuple[str, ...] = ()
    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        if self.estimated_duration <= 0:
            raise ValueError(
                f"estimated_duration must be positive, got {self.estimated_duration}"
            )

    @property
    def duration_minutes(self) -> float:
        return self.estimated_duration / 60

    @property
    def duration_hours(self) -> float:
        return self.estimated_duration / 3600


@dataclass
class WeekPlan:
    """Abstract tasks and metadata for one calendar week of a plan."""

    week_number: int
    start_date: date
    tasks: list[AbstractTask] = field(default_factory=list)
    end_date: date | None = None
    milestones: list[str] = field(default_factory=list)
    task_count: int = 0
    estimated_hours: float = 0.0
    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        if self.week_number < 1:
            raise ValueError(f"week_number must be >= 1, got {self.week_number}")
        if self.end_date is None:
            self.end_date = self.start_date + timedelta(days=6)

    @property
    def total_minutes(self) -> float:
        """Actual workload from task durations (the hints are advisory)."""
        return sum(task.duration_minutes for task in self.tasks)


@dataclass(frozen=True)
class ScheduleSettings:
    """User availability: selected weekdays and the daily study window."""

    selected_weekdays: frozenset[int] = DEFAULT_SELECTED_WEEKDAYS
    earliest_start: time | None = None
    latest_end: time | None = None

    def __post_init__(self) -> None:
        weekdays = frozenset(self.selected_weekdays)
        invalid = sorted(weekdays - WEEKDAY_CODES)
        if invalid:
            raise ValueError(f"Weekday codes must be between 1 and 7, got {invalid}")
        object.__setattr__(self, "selected_weekdays", weekdays)

    @property
    def window_start(self) -> time:
        return self.earliest_start or DEFAULT_EARLIEST_START

    @property
    def window_end(self) -> time:
        return self.latest_end or DEFAULT_LATEST_END


@dataclass(frozen=True)
class ScheduleCalendar:
    """Calendar context used for weekday arithmetic and timestamps.

    Weekday codes follow the Sunday-first convention regardless of locale.
    """

    timezone: tzinfo = UTC

    def weekday_code(self, day: date) -> int:
        return day.isoweekday() % 7 + 1

    def at(self, day: date, moment: time) -> datetime:
        return datetime.combine(day, moment, tzinfo=self.timezone)


@dataclass
class TimeSlot:
    start: datetime
    end: datetime
    is_available: bool = True
    task_id: str | None = None

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


@dataclass
class ScheduledTask:
    """An abstract task bound to a concrete start and end time."""

    title: str
    estimated_duration: float
    difficulty: TaskDifficulty
    scheduled_start: datetime
    scheduled_end: datetime
    description: str = ""
    quantity: str = ""
    duration_label: str = ""
    preferred_weekdays: tuple[int, ...] = ()
    preferred_time_slots: tuple[str, ...] = ()
    dependencies: tuple[str, ...] = ()
    source_task_id: str | None = None
    week_plan_id: str | None = None
    week_number: int | None = None
    goal_id: str | None = None
    plan_id: str | None = None
    id: str = field(default_factory=_new_id)

    @property
    def priority(self) -> TaskPriority:
        return self.difficulty.priority

    @property
    def scheduled_date(self) -> date:
        return self.scheduled_start.date()

    @classmethod
    def from_task(
        cls,
        task: AbstractTask,
        start: datetime,
        end: datetime,
        *,
        week_plan_id: str | None = None,
        week_number: int | None = None,
        goal_id: str | None = None,
        plan_id: str | None = None,
    ) -> ScheduledTask:
        return cls(
            title=task.title,
            estimated_duration=task.estimated_duration,
            difficulty=task.difficulty,
            scheduled_start=start,
            scheduled_end=end,
            description=task.description,
            quantity=task.quantity,
            duration_label=task.duration_label,
            preferred_weekdays=task.preferred_weekdays,
            preferred_time_slots=task.preferred_time_slots,
            dependencies=task.dependencies,
            source_task_id=task.id,
            week_plan_id=week_plan_id,
            week_number=week_number,
            goal_id=goal_id,
            plan_id=plan_id,
        )


@dataclass
class UnscheduledTask:
    task: AbstractTask
    reason: UnscheduledReason
    day: date | None = None


@dataclass
class DayPackResult:
    scheduled: list[ScheduledTask] = field(default_factory=list)
    unscheduled: list[UnscheduledTask] = field(default_factory=list)


@dataclass
class WeeklyScheduleResult:
    scheduled: list[ScheduledTask] = field(default_factory=list)
    unscheduled: list[UnscheduledTask] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True when every distributed sub-task found a slot."""
        return not self.unscheduled

    @property
    def total_scheduled_minutes(self) -> float:
        return sum(task.estimated_duration for task in self.scheduled) / 60

    def extend(self, other: WeeklyScheduleResult | DayPackResult) -> None:
        self.scheduled.extend(other.scheduled)
        self.unscheduled.extend(other.unscheduled)
