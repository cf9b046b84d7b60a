import logging
from typing import Literal
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session
from database import get_db
from models.db_models import User
from models.schemas import UserOut
from security import get_current_user, hash_password, token_for_user, verify_password
from services.user_service import (
    create_user,
    generate_reset_code,
    get_user_by_username,
    reset_password,
    set_reset_code,
    validate_reset_code
)

MAX_USERNAME_LEN = 32
MIN_PASSWORD_LEN = 8
MAX_PASSWORD_LEN = 64

logger = logging.getLogger(__name__)

router = APIRouter()


# Error code constants
class ErrorCodes:
    USER_EXISTS = 'user_exists'
    INVALID_CREDENTIALS = 'invalid_credentials'
    INVALID_RESET_CODE = 'invalid_reset_code'
    RESET_CODE_SENT = 'reset_code_sent'
    RESET_CODE_VERIFIED = 'reset_code_verified'
    PASSWORD_RESET_SUCCESS = 'password_reset_success'
    LOGOUT_SUCCESS = 'logout_success'


# Request models
class RegisterRequest(BaseModel):
    username: str = Field(min_length=1, max_length=MAX_USERNAME_LEN)
    password: str = Field(min_length=MIN_PASSWORD_LEN, max_length=MAX_PASSWORD_LEN)
    # admins are only created from config at startup
    role: Literal['student', 'teacher'] = 'student'


class LoginRequest(BaseModel):
    username: str
    password: str


class ResetRequest(BaseModel):
    username: str


class VerifyResetRequest(BaseModel):
    username: str
    code: str


class ResetPasswordRequest(BaseModel):
    username: str
    code: str
    new_password: str = Field(min_length=MIN_PASSWORD_LEN, max_length=MAX_PASSWORD_LEN)


def _auth_response(user: User) -> dict:
    return {
        'access_token': token_for_user(user),
        'token_type': 'bearer',
        'user': UserOut.model_validate(user)
    }


# Endpoints
@router.post('/register', status_code=201)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    if get_user_by_username(db, data.username):
        raise HTTPException(
            status_code=400, detail={
                'code': ErrorCodes.USER_EXISTS})
    user = create_user(db, data.username, hash_password(data.password), data.role)
    logger.info(f"Registered user {user.id} ({user.role})")
    return _auth_response(user)


@router.post('/login')
def login(data: LoginRequest, db: Session = Depends(get_db)):
    user = get_user_by_username(db, data.username)
    if not user or not verify_password(data.password, user.password):
        raise HTTPException(
            status_code=401, detail={
                'code': ErrorCodes.INVALID_CREDENTIALS})
    return _auth_response(user)


@router.post('/logout')
def logout(user: User = Depends(get_current_user)):
    # tokens are stateless, the client just drops it
    return {'message': {'code': ErrorCodes.LOGOUT_SUCCESS}}


@router.get('/user', response_model=UserOut)
def current_user(user: User = Depends(get_current_user)):
    return user


@router.post('/request-reset')
def request_reset(data: ResetRequest, db: Session = Depends(get_db)):
    user = get_user_by_username(db, data.username)
    if not user:
        return {'message': {'code': ErrorCodes.RESET_CODE_SENT}}
    code = generate_reset_code()
    set_reset_code(db, data.username, code)
    # no mail delivery: the code goes back in the response
    return {'message': {'code': ErrorCodes.RESET_CODE_SENT}, 'code': code}


@router.post('/verify-reset-code')
def verify_reset_code(data: VerifyResetRequest, db: Session = Depends(get_db)):
    if not validate_reset_code(db, data.username, data.code):
        raise HTTPException(
            status_code=400, detail={
                'code': ErrorCodes.INVALID_RESET_CODE})
    return {'message': {'code': ErrorCodes.RESET_CODE_VERIFIED}}


@router.post('/reset-password')
def reset_password_endpoint(data: ResetPasswordRequest, db: Session = Depends(get_db)):
    if not validate_reset_code(db, data.username, data.code):
        raise HTTPException(
            status_code=400, detail={
                'code': ErrorCodes.INVALID_RESET_CODE})
    reset_password(db, data.username, hash_password(data.new_password))
    logger.info(f"Password reset for {data.username}")
    return {'message': {'code': ErrorCodes.PASSWORD_RESET_SUCCESS}}
