import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from studyplan_api.config import settings, validate_production_config
from studyplan_api.exceptions import (
    StudyPlanException,
    general_exception_handler,
    http_exception_handler,
    pydantic_validation_exception_handler,
    study_plan_exception_handler,
    validation_exception_handler,
)
from studyplan_api.routers import ai_planning, scheduler


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger(__name__)
    logger.info("🚀 FastAPI server starting up...")

    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Host: {settings.host}, Port: {settings.port}")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Default timezone: {settings.default_timezone}")

    validate_production_config()
    if not settings.openai_api_key:
        logger.warning("⚠️ OPENAI_API_KEY not set, plan generation is disabled")

    logger.info("✅ FastAPI server startup complete")
    yield
    # Shutdown
    logger.info("🔄 FastAPI server shutting down...")


app = FastAPI(
    title=settings.api_title,
    description=settings.api_description,
    version=settings.api_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(ValidationError, pydantic_validation_exception_handler)
app.add_exception_handler(StudyPlanException, study_plan_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

app.include_router(scheduler.router, prefix="/api")
app.include_router(ai_planning.router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return JSONResponse({"status": "healthy", "message": "OK"})


@app.get("/")
async def root():
    """Root endpoint with API information"""
    return JSONResponse({"message": "StudyPlan API", "status": "active"})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "studyplan_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
