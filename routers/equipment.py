"""
Equipment API Endpoints

The user's equipment catalog; plan generation only prescribes what is listed here.
"""
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from core.database import get_db
from core.exceptions import NotFoundError
from models import Equipment
from schemas import EquipmentCreate, EquipmentResponse, EquipmentUpdate
from services.demo_user import get_demo_user_id

router = APIRouter(prefix="/api", tags=["equipment"])


def _get_owned_equipment(db: Session, equipment_id: str, user_id: str) -> Equipment:
    equipment = db.query(Equipment).filter(
        Equipment.id == equipment_id,
        Equipment.user_id == user_id,
    ).first()
    if not equipment:
        raise NotFoundError("Equipment")
    return equipment


@router.get("/equipment", response_model=List[EquipmentResponse])
def list_equipment(
    user_id: str = Depends(get_demo_user_id),
    db: Session = Depends(get_db),
):
    return db.query(Equipment).filter(Equipment.user_id == user_id).all()


@router.post("/equipment", response_model=EquipmentResponse, status_code=201)
def create_equipment(
    payload: EquipmentCreate,
    user_id: str = Depends(get_demo_user_id),
    db: Session = Depends(get_db),
):
    equipment = Equipment(user_id=user_id, **payload.model_dump())
    db.add(equipment)
    db.commit()
    db.refresh(equipment)
    return equipment


@router.put("/equipment/{equipment_id}", response_model=EquipmentResponse)
def update_equipment(
    equipment_id: str,
    payload: EquipmentUpdate,
    user_id: str = Depends(get_demo_user_id),
    db: Session = Depends(get_db),
):
    equipment = _get_owned_equipment(db, equipment_id, user_id)
    for key, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(equipment, key, value)
    db.commit()
    db.refresh(equipment)
    return equipment


@router.delete("/equipment/{equipment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_equipment(
    equipment_id: str,
    user_id: str = Depends(get_demo_user_id),
    db: Session = Depends(get_db),
):
    equipment = _get_owned_equipment(db, equipment_id, user_id)
    db.delete(equipment)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
