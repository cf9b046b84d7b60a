from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from models.db_models import Attempt
from services.errors import ConflictError, NotFoundError


def create_attempt(db: Session, quiz_id: int, user_id: int,
                   started_at: Optional[datetime] = None) -> Attempt:
    attempt = Attempt(
        quiz_id=quiz_id,
        user_id=user_id,
        started_at=started_at or datetime.utcnow(),
        answers=[]
    )
    db.add(attempt)
    db.commit()
    db.refresh(attempt)
    return attempt


def get_attempt(db: Session, attempt_id: int) -> Optional[Attempt]:
    return db.get(Attempt, attempt_id)


def get_user_attempts(db: Session, user_id: int) -> List[Attempt]:
    return db.query(Attempt).filter(
        Attempt.user_id == user_id).order_by(Attempt.id).all()


def get_quiz_attempts(db: Session, quiz_id: int) -> List[Attempt]:
    return db.query(Attempt).filter(
        Attempt.quiz_id == quiz_id).order_by(Attempt.id).all()


def get_all_attempts(db: Session) -> List[Attempt]:
    return db.query(Attempt).order_by(Attempt.id).all()


def complete_attempt(db: Session, attempt_id: int, score: int,
                     answers: List[dict],
                     completed_at: Optional[datetime] = None) -> Attempt:
    """started -> completed. A completed attempt is never touched again."""
    attempt = get_attempt(db, attempt_id)
    if not attempt:
        raise NotFoundError(f"Attempt {attempt_id} not found", code='attempt_not_found')
    if attempt.completed_at is not None:
        raise ConflictError(f"Attempt {attempt_id} already completed",
                            code='attempt_already_completed')
    attempt.completed_at = completed_at or datetime.utcnow()
    attempt.score = score
    attempt.answers = answers
    db.commit()
    db.refresh(attempt)
    return attempt
