"""
Single implicit identity.

There is no authentication: every request acts as the demo user, which is
provisioned on first use.
"""
import logging

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.config import settings
from core.database import get_db
from models import User

logger = logging.getLogger(__name__)

DEMO_USER_PASSWORD = "demo-user-password"


def resolve_demo_user_id(db: Session) -> str:
    """
    Find or create the demo user and return its id.

    Lookup order: configured id, then username. If another request creates
    the row between our read and insert, re-read by username.
    """
    existing = db.query(User).filter(User.id == settings.DEMO_USER_ID).first()
    if existing:
        return existing.id

    existing = db.query(User).filter(User.username == settings.DEMO_USER_USERNAME).first()
    if existing:
        return existing.id

    try:
        user = User(
            id=settings.DEMO_USER_ID,
            username=settings.DEMO_USER_USERNAME,
            password=DEMO_USER_PASSWORD,
        )
        db.add(user)
        db.commit()
        logger.info(f"Provisioned demo user {user.id}")
        return user.id
    except IntegrityError:
        db.rollback()
        fallback = db.query(User).filter(User.username == settings.DEMO_USER_USERNAME).first()
        if fallback:
            return fallback.id
        logger.error("Failed to provision demo user", exc_info=True)
        raise


def get_demo_user_id(db: Session = Depends(get_db)) -> str:
    """FastAPI dependency: the acting user's id."""
    return resolve_demo_user_id(db)
