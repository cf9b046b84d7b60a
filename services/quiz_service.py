import logging
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from models.db_models import Quiz
from models.schemas import AnswerIn, QuizCreate
from services.achievement_service import check_and_award
from services.attempt_service import complete_attempt, get_attempt
from services.errors import ConflictError, NotFoundError, PermissionDeniedError
from services.leaderboard_service import invalidate_leaderboard, round_half_up

logger = logging.getLogger(__name__)


def create_quiz(db: Session, quiz_data: QuizCreate, creator_id: int) -> Quiz:
    questions = [
        {"id": index, **q.model_dump()}
        for index, q in enumerate(quiz_data.questions, start=1)
    ]
    quiz = Quiz(
        title=quiz_data.title,
        creator_id=creator_id,
        time_limit=quiz_data.time_limit,
        questions=questions
    )
    db.add(quiz)
    db.commit()
    db.refresh(quiz)
    logger.info(f"User {creator_id} created quiz {quiz.id} with {len(questions)} questions")
    return quiz


def get_quiz(db: Session, quiz_id: int) -> Optional[Quiz]:
    return db.get(Quiz, quiz_id)


def get_quizzes_by_creator(db: Session, creator_id: int) -> List[Quiz]:
    return db.query(Quiz).filter(Quiz.creator_id == creator_id).order_by(Quiz.id).all()


def get_assigned_quizzes(db: Session, user_id: int) -> List[Quiz]:
    # no per-student assignment yet, every quiz is open to every student
    return db.query(Quiz).order_by(Quiz.id).all()


def quiz_view(quiz: Quiz, with_answers: bool) -> Dict:
    questions = []
    for q in quiz.questions:
        question = dict(q)
        if not with_answers:
            question.pop("correct_answer", None)
        questions.append(question)
    return {
        "id": quiz.id,
        "title": quiz.title,
        "creator_id": quiz.creator_id,
        "time_limit": quiz.time_limit,
        "questions": questions
    }


# Grading
def is_correct(question: dict, given: Optional[str]) -> bool:
    if given is None:
        return False
    expected = str(question["correct_answer"]).strip()
    given = given.strip()
    if question["type"] == "MCQ":
        return given == expected
    return given.lower() == expected.lower()


def grade_answers(questions: List[dict], answers: List[AnswerIn]) -> int:
    """Percentage of questions answered correctly, rounded half up."""
    if not questions:
        return 0
    given = {a.question_id: a.answer for a in answers}
    correct = sum(1 for q in questions if is_correct(q, given.get(q["id"])))
    return int(round_half_up(Decimal(correct * 100) / Decimal(len(questions)), places=0))


def submit_attempt(db: Session, attempt_id: int, user_id: int,
                   answers: List[AnswerIn]) -> Dict:
    attempt = get_attempt(db, attempt_id)
    if not attempt:
        raise NotFoundError(f"Attempt {attempt_id} not found", code='attempt_not_found')
    if attempt.user_id != user_id:
        raise PermissionDeniedError(
            f"Attempt {attempt_id} belongs to another user", code='not_attempt_owner')
    if attempt.completed_at is not None:
        raise ConflictError(f"Attempt {attempt_id} already completed",
                            code='attempt_already_completed')

    quiz = get_quiz(db, attempt.quiz_id)
    if not quiz:
        raise NotFoundError(f"Quiz {attempt.quiz_id} not found", code='quiz_not_found')

    known_ids = {q["id"] for q in quiz.questions}
    kept = [a for a in answers if a.question_id in known_ids]
    score = grade_answers(quiz.questions, kept)

    attempt = complete_attempt(db, attempt_id, score, [a.model_dump() for a in kept])
    logger.info(f"User {user_id} completed attempt {attempt_id} on quiz {quiz.id} with score {score}")

    invalidate_leaderboard()
    new_badges = check_and_award(db, user_id)
    return {"attempt": attempt, "new_badges": new_badges}
