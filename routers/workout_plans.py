"""
Workout Plan API Endpoints

Plan CRUD plus AI generation. A generated plan is stored together with its
workouts and the model metadata (provider, model, token usage).
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from core.database import get_db
from core.exceptions import AIServiceError, NotFoundError
from models import Equipment, Workout, WorkoutLog, WorkoutPlan
from schemas import (
    GeneratedPlanResponse,
    GeneratePlanRequest,
    WorkoutPlanCreate,
    WorkoutPlanResponse,
    WorkoutPlanUpdate,
    WorkoutResponse,
)
from services import plan_generator
from services.demo_user import get_demo_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["workout-plans"])


def _get_owned_plan(db: Session, plan_id: str, user_id: str) -> WorkoutPlan:
    plan = db.query(WorkoutPlan).filter(
        WorkoutPlan.id == plan_id,
        WorkoutPlan.user_id == user_id,
    ).first()
    if not plan:
        raise NotFoundError("Workout plan")
    return plan


@router.get("/workout-plans", response_model=List[WorkoutPlanResponse])
def list_workout_plans(
    user_id: str = Depends(get_demo_user_id),
    db: Session = Depends(get_db),
):
    return db.query(WorkoutPlan).filter(
        WorkoutPlan.user_id == user_id,
    ).order_by(WorkoutPlan.created_at.desc()).all()


@router.get("/workout-plans/{plan_id}", response_model=WorkoutPlanResponse)
def get_workout_plan(
    plan_id: str,
    user_id: str = Depends(get_demo_user_id),
    db: Session = Depends(get_db),
):
    return _get_owned_plan(db, plan_id, user_id)


@router.post("/workout-plans", response_model=WorkoutPlanResponse, status_code=201)
def create_workout_plan(
    payload: WorkoutPlanCreate,
    user_id: str = Depends(get_demo_user_id),
    db: Session = Depends(get_db),
):
    plan = WorkoutPlan(user_id=user_id, **payload.model_dump())
    db.add(plan)
    db.commit()
    db.refresh(plan)
    return plan


@router.put("/workout-plans/{plan_id}", response_model=WorkoutPlanResponse)
def update_workout_plan(
    plan_id: str,
    payload: WorkoutPlanUpdate,
    user_id: str = Depends(get_demo_user_id),
    db: Session = Depends(get_db),
):
    plan = _get_owned_plan(db, plan_id, user_id)
    for key, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(plan, key, value)
    db.commit()
    db.refresh(plan)
    return plan


@router.delete("/workout-plans/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_workout_plan(
    plan_id: str,
    user_id: str = Depends(get_demo_user_id),
    db: Session = Depends(get_db),
):
    plan = _get_owned_plan(db, plan_id, user_id)
    # Detach logs and remove workouts before the plan row goes
    workout_ids = [w.id for w in db.query(Workout.id).filter(Workout.plan_id == plan.id)]
    if workout_ids:
        db.query(WorkoutLog).filter(WorkoutLog.workout_id.in_(workout_ids)).update(
            {WorkoutLog.workout_id: None}, synchronize_session=False,
        )
        db.query(Workout).filter(Workout.id.in_(workout_ids)).delete(synchronize_session=False)
    db.delete(plan)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/workout-plans/{plan_id}/workouts", response_model=List[WorkoutResponse])
def list_plan_workouts(
    plan_id: str,
    user_id: str = Depends(get_demo_user_id),
    db: Session = Depends(get_db),
):
    plan = _get_owned_plan(db, plan_id, user_id)
    return db.query(Workout).filter(
        Workout.plan_id == plan.id,
    ).order_by(Workout.day_of_week.asc()).all()


@router.post("/generate-workout-plan", response_model=GeneratedPlanResponse, status_code=201)
def generate_workout_plan(
    payload: GeneratePlanRequest,
    user_id: str = Depends(get_demo_user_id),
    db: Session = Depends(get_db),
):
    """
    Generate a plan from the user's equipment, goals and constraints.

    The model call happens before anything is written, so a failed
    generation leaves no partial plan behind.
    """
    equipment = db.query(Equipment).filter(Equipment.user_id == user_id).all()

    try:
        generated, ai_metadata = plan_generator.generate_workout_plan(
            equipment=equipment,
            goals=payload.goals,
            restrictions=payload.restrictions,
            weekly_minutes=payload.weekly_minutes,
            daily_minutes=payload.daily_minutes,
        )
    except AIServiceError as e:
        logger.warning(f"Workout plan generation failed ({e.status_code}): {e.message}")
        raise HTTPException(status_code=e.status_code, detail=e.message)

    plan = WorkoutPlan(
        user_id=user_id,
        name=generated.name,
        description=generated.description,
        goals=payload.goals,
        restrictions=payload.restrictions.model_dump(),
        weekly_minutes=payload.weekly_minutes,
        daily_minutes=payload.daily_minutes,
        nutritional_guidance=generated.nutritional_guidance,
        ai_metadata=ai_metadata,
    )
    db.add(plan)
    db.flush()

    workouts = []
    for item in generated.workouts:
        workout = Workout(
            plan_id=plan.id,
            name=item.name,
            exercises=[exercise.model_dump(exclude_none=True) for exercise in item.exercises],
            estimated_duration=item.estimated_duration,
            day_of_week=item.day_of_week,
        )
        db.add(workout)
        workouts.append(workout)

    db.commit()
    db.refresh(plan)

    return GeneratedPlanResponse(
        plan=WorkoutPlanResponse.model_validate(plan),
        workouts=[WorkoutResponse.model_validate(w) for w in workouts],
        nutritional_guidance=generated.nutritional_guidance,
        ai_metadata=ai_metadata,
    )
