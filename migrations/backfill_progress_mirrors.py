"""
Migration: rebuild the legacy progress mirrors for every stored user.

- completed_modules / completed_modules_with_score: recomputed from
  module_progress with learning.reconciler (records written by older
  clients may have drifted).
- total_time_spent: recomputed from the question results.

Safe to run repeatedly; users already in sync are not rewritten.
"""

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from api.config import SessionLocal, create_db
from api.models.models import User
from api.services.progress_service import load_state, store_state
from api.utils.logger import get_logger

logger = get_logger(__name__)


def backfill(db: Session) -> int:
    """Reconcile every user row; returns how many rows were rewritten."""
    updated = 0
    for user_id, in db.query(User.id).order_by(User.id).all():
        user = db.query(User).filter(User.id == user_id).first()
        if user is None:
            continue
        if not store_state(user, load_state(user)):
            continue
        try:
            db.commit()
        except StaleDataError:
            # a live request wrote this row meanwhile; it reconciled on its own write
            db.rollback()
            logger.warning("user_id=%s changed during backfill. Skipping.", user_id)
            continue
        updated += 1
        logger.info("user_id=%s: progress mirrors rebuilt", user_id)
    return updated


def run_migration():
    create_db()
    db = SessionLocal()
    try:
        updated = backfill(db)
        logger.info("Migration backfill_progress_mirrors completed: %s user(s) updated", updated)
    finally:
        db.close()


if __name__ == "__main__":
    run_migration()
