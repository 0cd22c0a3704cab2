from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from datetime import datetime, date
from typing import Any, Dict, List, Optional


# --- Equipment ---

class EquipmentCreate(BaseModel):
    type: str = Field(min_length=1)
    name: str = Field(min_length=1)
    weight: Optional[int] = Field(default=None, ge=0)  # kg
    quantity: int = Field(default=1, ge=1)


class EquipmentUpdate(BaseModel):
    type: Optional[str] = Field(default=None, min_length=1)
    name: Optional[str] = Field(default=None, min_length=1)
    weight: Optional[int] = Field(default=None, ge=0)
    quantity: Optional[int] = Field(default=None, ge=1)


class EquipmentResponse(BaseModel):
    id: str
    user_id: str
    type: str
    name: str
    weight: Optional[int] = None
    quantity: int

    model_config = ConfigDict(from_attributes=True)


# --- Workout plans ---

class PlanRestrictions(BaseModel):
    space: str = Field(min_length=1)  # 'limited', 'moderate', 'spacious'
    noise: str = Field(min_length=1)  # 'no_noise', 'low_noise', 'any'
    outdoor: bool


class WorkoutPlanCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    goals: Optional[List[str]] = None
    restrictions: Optional[Dict[str, Any]] = None
    weekly_minutes: int = Field(gt=0)
    daily_minutes: int = Field(gt=0)
    nutritional_guidance: Optional[str] = None
    ai_metadata: Optional[Dict[str, Any]] = None


class WorkoutPlanUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    goals: Optional[List[str]] = None
    restrictions: Optional[Dict[str, Any]] = None
    weekly_minutes: Optional[int] = Field(default=None, gt=0)
    daily_minutes: Optional[int] = Field(default=None, gt=0)
    nutritional_guidance: Optional[str] = None


class WorkoutPlanResponse(BaseModel):
    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    goals: Optional[List[str]] = None
    restrictions: Optional[Dict[str, Any]] = None
    weekly_minutes: int
    daily_minutes: int
    nutritional_guidance: Optional[str] = None
    ai_metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class GeneratePlanRequest(BaseModel):
    goals: List[str] = Field(min_length=1)
    restrictions: PlanRestrictions
    weekly_minutes: int = Field(gt=0)
    daily_minutes: int = Field(gt=0)

    @field_validator("goals")
    @classmethod
    def goals_not_blank(cls, v: List[str]) -> List[str]:
        if any(not g.strip() for g in v):
            raise ValueError("goals must be non-empty strings")
        return v


# --- Workouts ---

class WorkoutUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    exercises: Optional[List[Dict[str, Any]]] = None
    estimated_duration: Optional[int] = Field(default=None, gt=0)
    day_of_week: Optional[int] = Field(default=None, ge=0, le=6)


class WorkoutResponse(BaseModel):
    id: str
    plan_id: str
    name: str
    exercises: Optional[List[Dict[str, Any]]] = None
    estimated_duration: Optional[int] = None
    day_of_week: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class GeneratedPlanResponse(BaseModel):
    plan: WorkoutPlanResponse
    workouts: List[WorkoutResponse]
    nutritional_guidance: str
    ai_metadata: Dict[str, Any]


# --- Workout logs ---

class LoggedExercise(BaseModel):
    """
    Performed exercise. Unknown keys (band, intensity notes...) are kept.

    camelCase measurement keys from older clients are accepted and stored
    under the snake_case names.
    """
    name: str = Field(min_length=1)
    sets: Optional[int] = Field(default=None, gt=0, le=200)
    reps: Optional[int] = Field(default=None, gt=0, le=500)
    weight_kg: Optional[float] = Field(
        default=None, ge=0, le=500,
        validation_alias=AliasChoices("weight_kg", "weightKg"),
    )
    duration_minutes: Optional[int] = Field(
        default=None, gt=0, le=600,
        validation_alias=AliasChoices("duration_minutes", "durationMinutes"),
    )
    duration_seconds: Optional[int] = Field(
        default=None, gt=0, le=3600,
        validation_alias=AliasChoices("duration_seconds", "durationSeconds"),
    )
    notes: Optional[str] = Field(default=None, max_length=500)
    intensity: Optional[str] = Field(default=None, max_length=100)

    model_config = ConfigDict(extra="allow")


class WorkoutLogFields(BaseModel):
    workout_id: Optional[str] = None
    completed_at: Optional[datetime] = None
    exercises: Optional[List[LoggedExercise]] = Field(default=None, max_length=50)
    notes: Optional[str] = Field(default=None, max_length=500)
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    rpe: Optional[int] = Field(default=None, ge=1, le=10)
    duration_minutes: Optional[int] = Field(default=None, ge=1, le=600)
    calories_burned: Optional[int] = Field(default=None, ge=0, le=5000)
    tags: Optional[List[str]] = Field(default=None, max_length=8)

    @field_validator("workout_id", mode="before")
    @classmethod
    def blank_workout_id_is_null(cls, v):
        if v == "":
            return None
        return v

    @field_validator("notes", mode="before")
    @classmethod
    def trim_notes(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("rating", "rpe", "duration_minutes", "calories_burned", mode="before")
    @classmethod
    def blank_number_is_null(cls, v):
        if v == "":
            return None
        return v

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        cleaned = [tag.strip() for tag in v]
        for tag in cleaned:
            if not tag:
                raise ValueError("Tags must be at least 1 character")
            if len(tag) > 30:
                raise ValueError("Tags must be 30 characters or fewer")
        return cleaned


class WorkoutLogCreate(WorkoutLogFields):
    """completed_at defaults to now when omitted."""


class WorkoutLogUpdate(WorkoutLogFields):
    """Partial update: only fields present in the request body are applied."""


class WorkoutLogResponse(BaseModel):
    id: str
    user_id: str
    workout_id: Optional[str] = None
    completed_at: Optional[datetime] = None
    exercises: Optional[List[Dict[str, Any]]] = None
    notes: Optional[str] = None
    rating: Optional[int] = None
    rpe: Optional[int] = None
    duration_minutes: Optional[int] = None
    calories_burned: Optional[int] = None
    tags: Optional[List[str]] = None
    workout: Optional[WorkoutResponse] = None

    model_config = ConfigDict(from_attributes=True)


# --- Progress ---

class DailyStatResponse(BaseModel):
    label: str
    day: date
    workouts: int
    streak: int


class WeeklySummaryResponse(BaseModel):
    week_start: date
    week_end: date
    workouts: int
    total_minutes: int
    avg_rpe: float
    calories: int


class TagBreakdownResponse(BaseModel):
    tag: str
    count: int


class ProgressReportResponse(BaseModel):
    daily_stats: List[DailyStatResponse]
    total_workouts: int
    current_streak: int
    workouts_this_week: int
    total_minutes: int
    average_rating: float
    average_rpe: float
    total_calories: int
    tag_breakdown: List[TagBreakdownResponse]
    weekly_summaries: List[WeeklySummaryResponse]
    window_days: int
