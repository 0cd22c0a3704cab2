"""
AI Workout Plan Generation

Builds a prompt from the user's equipment, goals and constraints, asks an
OpenAI-compatible chat model (OpenRouter) for a JSON plan, and validates the
document before anything is persisted.

Failures are raised as AIServiceError carrying the HTTP status to surface.
"""
from __future__ import annotations

import json
import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

import openai
from openai import OpenAI
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from core.config import settings
from core.exceptions import AIServiceError
from schemas import PlanRestrictions

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a certified personal trainer and nutritionist with expertise in exercise science. "
    "Create safe, effective workout plans based on available equipment and user constraints. "
    "Always prioritise proper form, progressive overload, and adequate recovery."
)


# --- Expected model output ---

class GeneratedExercise(BaseModel):
    name: str = Field(min_length=1)
    sets: Optional[int] = Field(default=None, gt=0, le=200)
    reps: Optional[int] = Field(default=None, gt=0, le=500)
    duration: Optional[int] = Field(default=None, gt=0, le=3600)  # seconds
    equipment: Optional[str] = Field(default=None, min_length=1)
    instructions: str = Field(min_length=1)

    model_config = ConfigDict(extra="allow")


class GeneratedWorkout(BaseModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    exercises: List[GeneratedExercise] = Field(min_length=1)
    estimated_duration: int = Field(gt=0, le=240)
    day_of_week: int = Field(ge=0, le=6)

    model_config = ConfigDict(extra="allow")


class GeneratedPlan(BaseModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    workouts: List[GeneratedWorkout] = Field(min_length=1)
    nutritional_guidance: str = Field(min_length=1)

    model_config = ConfigDict(extra="allow")


# --- Prompt building ---

def format_equipment_list(equipment: Sequence[Any]) -> str:
    if not equipment:
        return "Bodyweight only"

    items = []
    for eq in equipment:
        qualifiers = []
        if eq.type and eq.type != eq.name:
            qualifiers.append(eq.type)
        if isinstance(eq.weight, (int, float)):
            qualifiers.append(f"{eq.weight}kg")
        if eq.quantity and eq.quantity > 1:
            qualifiers.append(f"x{eq.quantity}")
        items.append(f"{eq.name} ({', '.join(qualifiers)})" if qualifiers else eq.name)
    return ", ".join(items)


def format_restrictions(restrictions: PlanRestrictions) -> str:
    items = []

    if restrictions.space == "limited":
        items.append("limited space")
    elif restrictions.space:
        items.append(f"{restrictions.space} space available")

    if restrictions.noise == "no_noise":
        items.append("no noise (quiet exercises only)")
    elif restrictions.noise == "low_noise":
        items.append("low noise preferred")
    elif restrictions.noise:
        items.append("noise level not restricted")

    items.append("outdoor activities allowed" if restrictions.outdoor else "indoor only")
    return ", ".join(items)


def workouts_per_week(weekly_minutes: int, daily_minutes: int) -> int:
    return max(1, math.ceil(weekly_minutes / daily_minutes))


def build_plan_prompt(
    equipment: Sequence[Any],
    goals: Sequence[str],
    restrictions: PlanRestrictions,
    weekly_minutes: int,
    daily_minutes: int,
) -> str:
    days = workouts_per_week(weekly_minutes, daily_minutes)
    return f"""Create a personalized fitness workout plan based on the following criteria:

**Available Equipment:** {format_equipment_list(equipment)}
**Fitness Goals:** {", ".join(goals)}
**Restrictions:** {format_restrictions(restrictions)}
**Time Commitment:** {daily_minutes} minutes per day, {weekly_minutes} minutes per week
**Workout Days:** {days} days per week

Please generate a complete workout plan with:
1. Overall plan name and description
2. {days} specific workouts (one for each training day)
3. Each workout should include exercises with sets, reps, or duration that respect the available equipment
4. All exercises must be scientifically sound, emphasize progressive overload, and respect the user's constraints
5. Include basic nutritional guidance aligned with the fitness goals, emphasising recovery and sustainable habits
6. Ensure total estimated duration per workout remains within {daily_minutes} minutes

Respond in JSON format with this structure:
{{
  "name": "Plan name",
  "description": "Brief plan description",
  "workouts": [
    {{
      "name": "Workout name",
      "description": "Workout description",
      "exercises": [
        {{
          "name": "Exercise name",
          "sets": 3,
          "reps": 12,
          "duration": 60,
          "equipment": "equipment used",
          "instructions": "How to perform the exercise safely"
        }}
      ],
      "estimated_duration": 30,
      "day_of_week": 0
    }}
  ],
  "nutritional_guidance": "Dietary recommendations for the goals"
}}"""


# --- Model call ---

def _extract_json_object(text: str) -> Dict[str, Any]:
    """First JSON object in the model output; tolerates surrounding prose."""
    if not text:
        raise ValueError("Empty model response")

    try:
        parsed = json.loads(text)
        if isinstance(parsed, dict):
            return parsed
    except json.JSONDecodeError:
        pass

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end <= start:
        raise ValueError("No JSON object found in model response")

    parsed = json.loads(text[start : end + 1])
    if not isinstance(parsed, dict):
        raise ValueError("Model response JSON is not an object")
    return parsed


def get_client() -> OpenAI:
    if not settings.OPENROUTER_API_KEY:
        raise AIServiceError("AI service is not configured", status_code=503)

    headers = {}
    if settings.OPENROUTER_SITE_URL:
        headers["HTTP-Referer"] = settings.OPENROUTER_SITE_URL
    if settings.OPENROUTER_APP_TITLE:
        headers["X-Title"] = settings.OPENROUTER_APP_TITLE

    return OpenAI(
        api_key=settings.OPENROUTER_API_KEY,
        base_url=settings.OPENROUTER_BASE_URL,
        timeout=settings.OPENROUTER_TIMEOUT_S,
        max_retries=0,
        default_headers=headers,
    )


def _request_completion(client: OpenAI, prompt: str):
    try:
        return client.chat.completions.create(
            model=settings.OPENROUTER_MODEL,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            response_format={"type": "json_object"},
            temperature=0.7,
        )
    except openai.APITimeoutError:
        raise AIServiceError("AI service request timed out", status_code=504)
    except (openai.AuthenticationError, openai.PermissionDeniedError):
        raise AIServiceError("AI service API key is invalid or unauthorized", status_code=401)
    except openai.RateLimitError:
        raise AIServiceError("AI service rate limit reached. Please try again shortly.", status_code=429)
    except openai.APIStatusError as e:
        if e.status_code >= 500:
            raise AIServiceError(
                "AI service is temporarily unavailable. Please try again later.",
                status_code=503,
            )
        raise AIServiceError(f"AI request failed ({e.status_code}): {e.message}", status_code=502)
    except openai.APIConnectionError as e:
        logger.error(f"Could not reach AI service: {e}")
        raise AIServiceError("Failed to communicate with AI service.", status_code=503)


def _metadata(response) -> Dict[str, Any]:
    usage = getattr(response, "usage", None)
    return {
        "provider": "openrouter",
        "model": getattr(response, "model", None) or settings.OPENROUTER_MODEL,
        "request_id": getattr(response, "id", None),
        "created_at": datetime.now(timezone.utc).isoformat(),
        "usage": {
            "prompt_tokens": getattr(usage, "prompt_tokens", None),
            "completion_tokens": getattr(usage, "completion_tokens", None),
            "total_tokens": getattr(usage, "total_tokens", None),
        } if usage else None,
    }


def generate_workout_plan(
    equipment: Sequence[Any],
    goals: Sequence[str],
    restrictions: PlanRestrictions,
    weekly_minutes: int,
    daily_minutes: int,
    client: Optional[OpenAI] = None,
) -> Tuple[GeneratedPlan, Dict[str, Any]]:
    """
    Ask the model for a plan and validate it.

    Returns:
        (plan, metadata) where metadata records provider, model, request id
        and token usage for storage alongside the plan.
    """
    if not goals:
        raise AIServiceError("At least one fitness goal is required", status_code=400)
    if weekly_minutes <= 0 or daily_minutes <= 0:
        raise AIServiceError("Weekly and daily minutes must be greater than 0", status_code=400)

    prompt = build_plan_prompt(equipment, goals, restrictions, weekly_minutes, daily_minutes)
    client = client or get_client()
    response = _request_completion(client, prompt)

    content = None
    if response.choices:
        content = response.choices[0].message.content
    if not content or not isinstance(content, str):
        raise AIServiceError("No content received from AI service", status_code=502)

    try:
        data = _extract_json_object(content)
    except ValueError as e:
        logger.error(f"Failed to parse AI plan response: {e}")
        raise AIServiceError("Invalid response format from AI service", status_code=502)

    try:
        plan = GeneratedPlan.model_validate(data)
    except PydanticValidationError as e:
        logger.error(
            "AI plan response failed validation",
            extra={"extra_fields": {"errors": e.errors(include_url=False)}},
        )
        raise AIServiceError("AI service returned an incomplete workout plan", status_code=502)

    metadata = _metadata(response)
    logger.info(
        f"Generated plan '{plan.name}' with {len(plan.workouts)} workouts",
        extra={"extra_fields": {"model": metadata["model"], "request_id": metadata["request_id"]}},
    )
    return plan, metadata
