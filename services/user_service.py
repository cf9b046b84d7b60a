import random
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from config import RESET_CODE_TTL_MINUTES
from models.db_models import User
from services.errors import NotFoundError


# CRUD operations for users
def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def create_user(db: Session, username: str, password_hash: str,
                role: str = 'student') -> User:
    user = User(username=username, password=password_hash, role=role, badges=[])
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_user_badges(db: Session, user_id: int, badges: List[dict]) -> User:
    user = get_user(db, user_id)
    if not user:
        raise NotFoundError(f"User {user_id} not found", code='user_not_found')
    # new list so the JSON column is flagged as changed
    user.badges = list(badges)
    db.commit()
    db.refresh(user)
    return user


def ensure_admin(db: Session, username: str, password_hash: str) -> User:
    user = get_user_by_username(db, username)
    if not user:
        return create_user(db, username, password_hash, role='admin')
    if user.role != 'admin':
        user.role = 'admin'
        db.commit()
        db.refresh(user)
    return user


def get_usernames(db: Session) -> Dict[int, str]:
    return {user_id: username
            for user_id, username in db.query(User.id, User.username).all()}


# Password reset
def generate_reset_code() -> str:
    return f"{random.randint(100000, 999999)}"


def set_reset_code(db: Session, username: str, code: str,
                   expiry: Optional[datetime] = None) -> None:
    user = get_user_by_username(db, username)
    if not user:
        raise NotFoundError(f"User {username} not found", code='user_not_found')
    user.reset_code = code
    user.reset_code_expiry = expiry or (
        datetime.utcnow() + timedelta(minutes=RESET_CODE_TTL_MINUTES))
    db.commit()


def validate_reset_code(db: Session, username: str, code: str) -> bool:
    user = get_user_by_username(db, username)
    if not user:
        return False
    if not user.reset_code or not user.reset_code_expiry:
        return False
    if user.reset_code_expiry < datetime.utcnow():
        return False
    return user.reset_code == code


def reset_password(db: Session, username: str, password_hash: str) -> None:
    user = get_user_by_username(db, username)
    if not user:
        raise NotFoundError(f"User {username} not found", code='user_not_found')
    user.password = password_hash
    user.reset_code = None
    user.reset_code_expiry = None
    db.commit()
