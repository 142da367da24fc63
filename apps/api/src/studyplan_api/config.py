from datetime import datetime, time

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    # API Configuration
    api_title: str = "StudyPlan API"
    api_version: str = "0.1.0"
    api_description: str = "AI-assisted study plan generation and weekly task scheduling API"

    # Server Configuration
    host: str = "0.0.0.0"  # nosec B104
    port: int = 8000
    debug: bool = False

    # Plan generator (any OpenAI-compatible chat completions endpoint)
    openai_api_key: str = Field(default="", description="API key for the plan generator")
    openai_base_url: str | None = Field(
        default="https://dashscope.aliyuncs.com/compatible-mode/v1",
        description="Base URL of the OpenAI-compatible endpoint",
    )
    openai_model: str = Field(default="qwen-plus", description="Chat model name")
    openai_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    openai_max_tokens: int = Field(default=8000, gt=0)
    openai_top_p: float = Field(default=0.8, gt=0.0, le=1.0)
    openai_timeout_seconds: float = Field(
        default=300.0, gt=0, description="Plan generation can take minutes"
    )
    plan_generation_retries: int = Field(
        default=3, ge=0, description="Extra attempts after a failed generator call"
    )
    plan_generation_retry_delay_seconds: float = Field(
        default=1.0, ge=0, description="Fixed delay between generator attempts"
    )
    fallback_to_default_plan: bool = Field(
        default=True,
        description="Use a generic plan when generator output cannot be parsed",
    )

    # Scheduling defaults
    default_timezone: str = Field(default="Asia/Shanghai")
    default_earliest_start: str = Field(default="18:00", description="HH:MM")
    default_latest_end: str = Field(default="22:00", description="HH:MM")

    # Environment
    environment: str = Field(
        default="development", pattern="^(development|staging|production|test)$"
    )

    cors_origins: list[str] | str = Field(
        default="http://localhost:3000,http://localhost:3001",
        description="Allowed CORS origins",
    )

    @field_validator("default_earliest_start", "default_latest_end")
    @classmethod
    def validate_time_format(cls, v: str) -> str:
        """Validate HH:MM time strings"""
        try:
            datetime.strptime(v, "%H:%M")
        except ValueError:
            raise ValueError("Time must be in HH:MM format") from None
        return v

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list, supporting both list and comma-separated string"""
        if isinstance(self.cors_origins, str):
            return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
        return self.cors_origins

    @property
    def default_window(self) -> tuple[time, time]:
        start = datetime.strptime(self.default_earliest_start, "%H:%M").time()
        end = datetime.strptime(self.default_latest_end, "%H:%M").time()
        return start, end

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )


# Global settings instance
settings = Settings()


def validate_production_config(config: Settings | None = None) -> None:
    """Validate configuration for production deployment."""
    config = config or settings
    if config.environment == "production" and not config.openai_api_key.strip():
        raise RuntimeError(
            "OPENAI_API_KEY must be set in production; plan generation is unavailable without it."
        )
