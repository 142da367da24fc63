"""
AI plan generation data models and types
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from studyplan_scheduler import WeekPlan


class ResourceType(str, Enum):
    VIDEO = "video"
    TEXTBOOK = "textbook"
    WEBSITE = "website"
    APP = "app"
    EXERCISE = "exercise"
    COURSE = "course"
    OTHER = "other"


class GoalBrief(BaseModel):
    """The learning goal a plan is generated for."""

    title: str = Field(..., min_length=1, description="Goal title")
    description: str = Field("", description="Goal description")
    start_date: date = Field(..., description="First day of the goal")
    target_date: date = Field(..., description="Day the goal should be reached")
    milestones: list[str] = Field(default_factory=list)
    key_results: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def target_not_before_start(self) -> "GoalBrief":
        if self.target_date < self.start_date:
            raise ValueError("target_date must not be before start_date")
        return self


def _text(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (int, float)):
        return str(value)
    return value


class RawTask(BaseModel):
    """A task exactly as the generator returns it."""

    model_config = ConfigDict(extra="ignore")

    title: str = Field(..., min_length=1)
    description: str = ""
    quantity: str = ""
    duration: str = ""
    difficulty: str = ""

    @field_validator("description", "quantity", "duration", "difficulty", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _text(v)


class RawWeekPlan(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    week_number: int = Field(..., ge=1, alias="weekNumber")
    milestones: list[str] = Field(default_factory=list)
    task_count: int = Field(5, alias="taskCount")
    estimated_hours: float = Field(10.0, alias="estimatedHours")
    tasks: list[Any] = Field(default_factory=list)

    @field_validator("milestones", mode="before")
    @classmethod
    def coerce_milestones(cls, v):
        if v is None:
            return []
        if isinstance(v, list):
            return [_text(item) for item in v]
        return v


class RawResource(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str = Field(..., min_length=1)
    type: str = ""
    url: str = ""
    description: str = ""

    @field_validator("type", "url", "description", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _text(v)


class RawPlan(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    title: str | None = None
    description: str | None = None
    total_weeks: int | None = Field(None, alias="totalWeeks")
    weekly_plans: list[Any] = Field(default_factory=list, alias="weeklyPlans")
    resources: list[Any] = Field(default_factory=list)


class LearningResource(BaseModel):
    title: str
    type: ResourceType = ResourceType.OTHER
    url: str = ""
    description: str = ""


@dataclass
class GeneratedPlan:
    """A plan produced by the generator, converted to scheduler types."""

    title: str
    description: str
    total_weeks: int
    week_plans: list[WeekPlan] = field(default_factory=list)
    resources: list[LearningResource] = field(default_factory=list)
    is_fallback: bool = False
