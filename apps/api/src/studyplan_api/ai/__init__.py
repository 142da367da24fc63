"""
AI plan generation module
"""

from studyplan_api.ai.models import GeneratedPlan, GoalBrief, LearningResource
from studyplan_api.ai.plan_generator import PlanGenerator
from studyplan_api.ai.planning_service import PlanningService, planning_service

__all__ = [
    "GeneratedPlan",
    "GoalBrief",
    "LearningResource",
    "PlanGenerator",
    "PlanningService",
    "planning_service",
]
