from studyplan_api.routers import ai_planning, scheduler

__all__ = ["ai_planning", "scheduler"]
