from sqlalchemy import Column, Integer, DateTime, ForeignKey, Text, String, Index, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from core.database import Base
import uuid
from datetime import datetime, timezone

# JSONB on Postgres, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=_new_id)
    username = Column(Text, unique=True, nullable=False)
    password = Column(Text, nullable=False)


class Equipment(Base):
    __tablename__ = "equipment"

    id = Column(String, primary_key=True, default=_new_id)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(Text, nullable=False)  # 'dumbbell', 'resistance_band', 'kettlebell', ...
    name = Column(Text, nullable=False)
    weight = Column(Integer, nullable=True)  # kg, null for bodyweight equipment
    quantity = Column(Integer, nullable=False, default=1)


class WorkoutPlan(Base):
    __tablename__ = "workout_plans"

    id = Column(String, primary_key=True, default=_new_id)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    goals = Column(JSONType, nullable=True)  # ["strength", "weight_loss", ...]
    restrictions = Column(JSONType, nullable=True)  # {space, noise, outdoor}
    weekly_minutes = Column(Integer, nullable=False)
    daily_minutes = Column(Integer, nullable=False)
    nutritional_guidance = Column(Text, nullable=True)
    ai_metadata = Column(JSONType, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Workout(Base):
    """A single training day inside a plan."""
    __tablename__ = "workouts"

    id = Column(String, primary_key=True, default=_new_id)
    plan_id = Column(String, ForeignKey("workout_plans.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    # [{name, sets, reps, duration (seconds), equipment, instructions}]
    exercises = Column(JSONType, nullable=True)
    estimated_duration = Column(Integer, nullable=True)  # minutes
    day_of_week = Column(Integer, nullable=True)  # 0-6


class WorkoutLog(Base):
    """
    One completed training session.

    A log without workout_id is a custom session and must carry at least one
    exercise; the API enforces this on write.
    """
    __tablename__ = "workout_logs"

    id = Column(String, primary_key=True, default=_new_id)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    workout_id = Column(String, ForeignKey("workouts.id", ondelete="SET NULL"), nullable=True)
    completed_at = Column(DateTime(timezone=True), default=_utcnow)
    # Performed exercises, loosely typed: {name, sets, reps, weight_kg, duration_minutes, duration_seconds, ...}
    exercises = Column(JSONType, nullable=True)
    notes = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)  # 1-5 difficulty/satisfaction
    rpe = Column(Integer, nullable=True, index=True)  # 1-10 perceived exertion
    duration_minutes = Column(Integer, nullable=True, index=True)
    calories_burned = Column(Integer, nullable=True)
    tags = Column(JSONType, nullable=True)

    __table_args__ = (
        Index("ix_workout_logs_user_id_completed_at", "user_id", "completed_at"),
    )
