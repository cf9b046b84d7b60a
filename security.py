import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError
from fastapi.security.http import HTTPAuthorizationCredentials
from datetime import datetime, timedelta, timezone
from fastapi.security import HTTPBearer
from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash, check_password_hash
from config import JWT_SECRET_KEY, ACCESS_TOKEN_EXPIRE_MINUTES
from database import get_db
from models.db_models import User
from services.user_service import get_user

bearer_scheme = HTTPBearer(auto_error=False)

if not JWT_SECRET_KEY:
    raise ValueError("JWT_SECRET_KEY environment variable is not set")
ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    return generate_password_hash(password, method="scrypt")


def verify_password(password: str, hashed: str) -> bool:
    return check_password_hash(hashed, password)


def create_access_token(data: dict) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=ALGORITHM)


def token_for_user(user: User) -> str:
    return create_access_token(
        {"sub": user.username, "user_id": user.id, "role": user.role})


def decode_access_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise HTTPException(status_code=401, detail={"code": "token_expired"})
    except InvalidTokenError:
        raise HTTPException(status_code=401, detail={"code": "invalid_token"})
    if not isinstance(payload.get("sub"), str) or not isinstance(payload.get("user_id"), int):
        raise HTTPException(status_code=401, detail={"code": "invalid_token"})
    return payload


async def get_current_user(
        credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
        db: Session = Depends(get_db)) -> User:
    if credentials is None:
        raise HTTPException(status_code=401, detail={"code": "not_authenticated"})
    payload = decode_access_token(credentials.credentials)

    user = get_user(db, payload["user_id"])
    if not user:
        raise HTTPException(status_code=401, detail={"code": "user_not_found"})
    return user


def require_roles(*roles: str):
    """Dependency factory: only lets through users holding one of ``roles``."""
    async def checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise HTTPException(status_code=403, detail={"code": "forbidden"})
        return user
    return checker
