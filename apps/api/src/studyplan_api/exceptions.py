from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError


class StudyPlanException(Exception):
    """Base exception for StudyPlan API"""

    def __init__(self, message: str, error_code: str | None = None):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ValidationError(StudyPlanException):
    """Validation error exception"""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        if field:
            message = f"Validation error for field '{field}': {message}"
        super().__init__(message, "VALIDATION_ERROR")


class PlanGenerationError(StudyPlanException):
    """Base for plan content generator failures"""

    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, message: str, error_code: str = "PLAN_GENERATION_ERROR"):
        super().__init__(message, error_code)


class GeneratorUnavailableError(PlanGenerationError):
    """Raised when no API key is configured for the generator"""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, message: str = "Plan generator is not configured"):
        super().__init__(message, "GENERATOR_UNAVAILABLE")


class GeneratorAPIError(PlanGenerationError):
    """Raised when the generator API keeps failing after all retries"""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, message: str, attempts: int = 1):
        self.attempts = attempts
        super().__init__(
            f"Plan generator API error after {attempts} attempt(s): {message}",
            "GENERATOR_API_ERROR",
        )


class EmptyResponseError(PlanGenerationError):
    """Raised when the generator answers without any content"""

    def __init__(self, message: str = "Plan generator returned no content"):
        super().__init__(message, "GENERATOR_EMPTY_RESPONSE")


class PlanParseError(PlanGenerationError):
    """Raised when generator output is not a usable plan"""

    def __init__(self, message: str):
        super().__init__(message, "PLAN_PARSE_ERROR")


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "error_code": getattr(exc, "error_code", None),
            "path": str(request.url),
        },
    )


def _format_errors(errors) -> list[dict]:
    return [
        {
            "field": " -> ".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in errors
    ]


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors"""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Request validation failed",
            "error_code": "VALIDATION_ERROR",
            "errors": _format_errors(exc.errors()),
            "path": str(request.url),
        },
    )


async def pydantic_validation_exception_handler(
    request: Request, exc: PydanticValidationError
):
    """Handle Pydantic validation errors"""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Data validation failed",
            "error_code": "VALIDATION_ERROR",
            "errors": _format_errors(exc.errors()),
            "path": str(request.url),
        },
    )


async def study_plan_exception_handler(request: Request, exc: StudyPlanException):
    """Handle custom StudyPlan exceptions"""
    status_code = status.HTTP_400_BAD_REQUEST

    if isinstance(exc, ValidationError):
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    elif isinstance(exc, PlanGenerationError):
        status_code = exc.status_code

    return JSONResponse(
        status_code=status_code,
        content={
            "detail": exc.message,
            "error_code": exc.error_code,
            "path": str(request.url),
        },
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "error_code": "INTERNAL_ERROR",
            "path": str(request.url),
        },
    )
