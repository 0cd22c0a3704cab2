"""
Workout API Endpoints

Individual training days belonging to the user's plans.
"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from core.database import get_db
from core.exceptions import NotFoundError
from models import Workout, WorkoutLog, WorkoutPlan
from schemas import WorkoutResponse, WorkoutUpdate
from services.demo_user import get_demo_user_id

router = APIRouter(prefix="/api", tags=["workouts"])


def _get_owned_workout(db: Session, workout_id: str, user_id: str) -> Workout:
    workout = db.query(Workout).join(
        WorkoutPlan, WorkoutPlan.id == Workout.plan_id,
    ).filter(
        Workout.id == workout_id,
        WorkoutPlan.user_id == user_id,
    ).first()
    if not workout:
        raise NotFoundError("Workout")
    return workout


@router.get("/workouts/{workout_id}", response_model=WorkoutResponse)
def get_workout(
    workout_id: str,
    user_id: str = Depends(get_demo_user_id),
    db: Session = Depends(get_db),
):
    return _get_owned_workout(db, workout_id, user_id)


@router.put("/workouts/{workout_id}", response_model=WorkoutResponse)
def update_workout(
    workout_id: str,
    payload: WorkoutUpdate,
    user_id: str = Depends(get_demo_user_id),
    db: Session = Depends(get_db),
):
    workout = _get_owned_workout(db, workout_id, user_id)
    for key, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(workout, key, value)
    db.commit()
    db.refresh(workout)
    return workout


@router.delete("/workouts/{workout_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_workout(
    workout_id: str,
    user_id: str = Depends(get_demo_user_id),
    db: Session = Depends(get_db),
):
    workout = _get_owned_workout(db, workout_id, user_id)
    # Logs of a deleted workout become custom sessions (ON DELETE SET NULL)
    db.query(WorkoutLog).filter(WorkoutLog.workout_id == workout.id).update(
        {WorkoutLog.workout_id: None}, synchronize_session=False,
    )
    db.delete(workout)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
