from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from database import get_db
from models.db_models import User
from models.schemas import AttemptOut, AttemptSubmit, QuizCreate, QuizOut, SubmitResult
from security import get_current_user, require_roles
from services.attempt_service import create_attempt
from services.quiz_service import (
    create_quiz,
    get_assigned_quizzes,
    get_quiz,
    get_quizzes_by_creator,
    quiz_view,
    submit_attempt
)

router = APIRouter()


def _can_see_answers(quiz, user: User) -> bool:
    return user.role == "admin" or quiz.creator_id == user.id


@router.post("/quizzes", response_model=QuizOut, status_code=201)
async def create_new_quiz(
        quiz_data: QuizCreate,
        user: User = Depends(require_roles("teacher", "admin")),
        db: Session = Depends(get_db)
):
    quiz = create_quiz(db, quiz_data, user.id)
    return quiz_view(quiz, with_answers=True)


@router.get("/quizzes", response_model=List[QuizOut])
async def list_quizzes(
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    if user.role == "student":
        quizzes = get_assigned_quizzes(db, user.id)
    else:
        quizzes = get_quizzes_by_creator(db, user.id)
    return [quiz_view(q, with_answers=_can_see_answers(q, user)) for q in quizzes]


@router.get("/quizzes/{quiz_id}", response_model=QuizOut)
async def get_quiz_by_id(
        quiz_id: int,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    quiz = get_quiz(db, quiz_id)
    if not quiz:
        raise HTTPException(status_code=404, detail={"code": "quiz_not_found"})
    return quiz_view(quiz, with_answers=_can_see_answers(quiz, user))


@router.post("/quizzes/{quiz_id}/attempts", response_model=AttemptOut, status_code=201)
async def start_attempt(
        quiz_id: int,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    if not get_quiz(db, quiz_id):
        raise HTTPException(status_code=404, detail={"code": "quiz_not_found"})
    return create_attempt(db, quiz_id, user.id)


@router.patch("/attempts/{attempt_id}", response_model=SubmitResult)
async def submit_quiz_attempt(
        attempt_id: int,
        submission: AttemptSubmit,
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    result = submit_attempt(db, attempt_id, user.id, submission.answers)
    return SubmitResult(
        attempt=AttemptOut.model_validate(result["attempt"]),
        new_badges=result["new_badges"]
    )
