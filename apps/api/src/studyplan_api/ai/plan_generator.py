"""
OpenAI-compatible client for study plan content generation
"""

import asyncio
import logging

from openai import (
    APIConnectionError,
    APIError,
    AsyncOpenAI,
    InternalServerError,
    RateLimitError,
)

from studyplan_api.ai.models import GeneratedPlan, GoalBrief
from studyplan_api.ai.plan_ingest import parse_generated_plan
from studyplan_api.ai.prompts import SYSTEM_PROMPT, build_plan_prompt
from studyplan_api.config import Settings, settings
from studyplan_api.exceptions import (
    EmptyResponseError,
    GeneratorAPIError,
    GeneratorUnavailableError,
)

logger = logging.getLogger(__name__)

# Errors worth another attempt; anything else (auth, bad request) fails at once.
RETRYABLE_ERRORS = (APIConnectionError, RateLimitError, InternalServerError)


class PlanGenerator:
    """Generates week plans through a chat completions endpoint"""

    def __init__(self, client: AsyncOpenAI | None = None, config: Settings | None = None):
        self.config = config or settings
        if client is not None:
            self.client = client
        elif self.config.openai_api_key.strip():
            # Retries are handled here with a fixed delay, not by the SDK.
            self.client = AsyncOpenAI(
                api_key=self.config.openai_api_key,
                base_url=self.config.openai_base_url,
                timeout=self.config.openai_timeout_seconds,
                max_retries=0,
            )
        else:
            logger.warning(
                "Plan generator API key not configured - AI planning will not be available"
            )
            self.client = None
        self.model = self.config.openai_model

    def is_available(self) -> bool:
        """Check if the generator client is available"""
        return self.client is not None

    async def complete(self, prompt: str) -> str:
        """Send one prompt, retrying transient failures with a fixed delay."""
        if not self.is_available():
            raise GeneratorUnavailableError()

        attempts = self.config.plan_generation_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                response = await self.client.chat.completions.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                    temperature=self.config.openai_temperature,
                    max_tokens=self.config.openai_max_tokens,
                    top_p=self.config.openai_top_p,
                )
                break
            except RETRYABLE_ERRORS as e:
                logger.warning(
                    f"Plan generator attempt {attempt}/{attempts} failed: {e}"
                )
                if attempt == attempts:
                    raise GeneratorAPIError(str(e), attempts=attempt) from e
                await asyncio.sleep(self.config.plan_generation_retry_delay_seconds)
            except APIError as e:
                logger.error(
                    f"Plan generator API error - status: {getattr(e, 'status_code', 'N/A')}: {e}"
                )
                raise GeneratorAPIError(str(e), attempts=attempt) from e

        if not response.choices or not response.choices[0].message.content:
            raise EmptyResponseError()
        return response.choices[0].message.content

    async def generate_plan(self, goal: GoalBrief, total_weeks: int) -> GeneratedPlan:
        """Ask the model for a plan and parse it into week plans."""
        logger.info(
            f"Generating {total_weeks}-week plan for goal '{goal.title}' with model {self.model}"
        )
        content = await self.complete(build_plan_prompt(goal, total_weeks))
        return parse_generated_plan(content, goal, total_weeks)
