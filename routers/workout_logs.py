"""
Workout Log API Endpoints

Completed sessions. A log either references one of the user's plan workouts
or is a custom session, in which case it must list at least one exercise.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from core.database import get_db
from core.exceptions import ForbiddenError, NotFoundError, ValidationError
from models import Workout, WorkoutLog
from schemas import WorkoutLogCreate, WorkoutLogResponse, WorkoutLogUpdate, WorkoutResponse
from services.demo_user import get_demo_user_id
from services.workout_log_store import (
    enrich_logs_with_workouts,
    get_user_workout_logs,
    get_workout_owner_id,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["workout-logs"])

CUSTOM_LOG_NEEDS_EXERCISES = "Custom workout logs must include at least one exercise."


def _to_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Stored timestamps are UTC; naive input is taken as UTC already
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _exercise_count(exercises: Any) -> int:
    return len(exercises) if isinstance(exercises, list) else 0


def _ensure_workout_belongs_to_user(db: Session, workout_id: str, user_id: str) -> Workout:
    workout = db.query(Workout).filter(Workout.id == workout_id).first()
    if not workout:
        raise NotFoundError("Workout")
    if get_workout_owner_id(db, workout) != user_id:
        raise ForbiddenError("Workout does not belong to the active user")
    return workout


def _log_payload_values(payload, fields: Dict[str, Any]) -> Dict[str, Any]:
    values = dict(fields)
    if "exercises" in values and payload.exercises is not None:
        values["exercises"] = [e.model_dump(exclude_none=True) for e in payload.exercises]
    if "completed_at" in values:
        values["completed_at"] = _to_utc(values["completed_at"])
    return values


def _to_response(log: WorkoutLog, workout: Optional[Workout]) -> WorkoutLogResponse:
    response = WorkoutLogResponse.model_validate(log)
    response.workout = WorkoutResponse.model_validate(workout) if workout else None
    return response


def _get_owned_log(db: Session, log_id: str, user_id: str) -> WorkoutLog:
    log = db.query(WorkoutLog).filter(WorkoutLog.id == log_id).first()
    if not log or log.user_id != user_id:
        raise NotFoundError("Workout log")
    return log


@router.get("/workout-logs", response_model=List[WorkoutLogResponse])
def list_workout_logs(
    limit: int = Query(default=20, ge=1, le=100),
    user_id: str = Depends(get_demo_user_id),
    db: Session = Depends(get_db),
):
    """Most recent logs first, each with its workout definition (or null)."""
    logs = get_user_workout_logs(db, user_id, limit)
    return [_to_response(item["log"], item["workout"]) for item in enrich_logs_with_workouts(db, logs)]


@router.post("/workout-logs", response_model=WorkoutLogResponse, status_code=201)
def create_workout_log(
    payload: WorkoutLogCreate,
    user_id: str = Depends(get_demo_user_id),
    db: Session = Depends(get_db),
):
    workout = None
    if payload.workout_id:
        workout = _ensure_workout_belongs_to_user(db, payload.workout_id, user_id)
    elif _exercise_count(payload.exercises) == 0:
        raise ValidationError(
            "Provide at least one exercise when logging a custom workout.",
            field="exercises",
        )

    values = _log_payload_values(payload, payload.model_dump())
    if values.get("completed_at") is None:
        values.pop("completed_at")

    log = WorkoutLog(user_id=user_id, **values)
    db.add(log)
    db.commit()
    db.refresh(log)

    logger.info(
        "Workout log created",
        extra={"extra_fields": {"log_id": log.id, "workout_id": log.workout_id}},
    )
    return _to_response(log, workout)


@router.put("/workout-logs/{log_id}", response_model=WorkoutLogResponse)
def update_workout_log(
    log_id: str,
    payload: WorkoutLogUpdate,
    user_id: str = Depends(get_demo_user_id),
    db: Session = Depends(get_db),
):
    """
    Partial update. Only fields present in the body are applied; an explicit
    null clears the field (workout_id: null turns the log into a custom one).
    """
    log = _get_owned_log(db, log_id, user_id)
    updates = payload.model_dump(exclude_unset=True)

    if "workout_id" in updates:
        if updates["workout_id"]:
            _ensure_workout_belongs_to_user(db, updates["workout_id"], user_id)
        else:
            exercises = updates["exercises"] if "exercises" in updates else log.exercises
            if _exercise_count(exercises) == 0:
                raise ValidationError(CUSTOM_LOG_NEEDS_EXERCISES, field="exercises")
    elif "exercises" in updates:
        if _exercise_count(updates["exercises"]) == 0 and not log.workout_id:
            raise ValidationError(CUSTOM_LOG_NEEDS_EXERCISES, field="exercises")

    for key, value in _log_payload_values(payload, updates).items():
        if key == "completed_at" and value is None:
            continue
        setattr(log, key, value)

    db.commit()
    db.refresh(log)

    workout = None
    if log.workout_id:
        workout = db.query(Workout).filter(Workout.id == log.workout_id).first()
    return _to_response(log, workout)


@router.delete("/workout-logs/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_workout_log(
    log_id: str,
    user_id: str = Depends(get_demo_user_id),
    db: Session = Depends(get_db),
):
    log = _get_owned_log(db, log_id, user_id)
    db.delete(log)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
