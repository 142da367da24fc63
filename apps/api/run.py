#!/usr/bin/env python
"""
Entry point for running the StudyPlan API server
"""

import uvicorn

from studyplan_api.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "studyplan_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        reload_dirs=["./src"],
    )
