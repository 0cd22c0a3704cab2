"""
Progress API Router

"Am I showing up?" for the active user: daily activity series, streaks,
weekly rollups, tag focus areas and derived totals over a trailing window.
"""
import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.database import get_db
from schemas import ProgressReportResponse
from services.demo_user import get_demo_user_id
from services.progress_report import get_progress_report

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["progress"])


@router.get("/progress", response_model=ProgressReportResponse)
def get_progress(
    days: int = Query(default=7, ge=1, le=31, description="Window length in days"),
    user_id: str = Depends(get_demo_user_id),
    db: Session = Depends(get_db),
):
    report = get_progress_report(db, user_id, days)
    return ProgressReportResponse.model_validate(asdict(report))
