import pytest

from models.schemas import AnswerIn
from services.quiz_service import grade_answers, is_correct

MCQ = {"id": 1, "type": "MCQ", "correct_answer": "def"}
TF = {"id": 2, "type": "TrueFalse", "correct_answer": "true"}
SHORT = {"id": 3, "type": "ShortAnswer", "correct_answer": "Guido"}


@pytest.mark.parametrize("question,given,expected", [
    (MCQ, "def", True),
    (MCQ, " def ", True),
    (MCQ, "DEF", False),
    (TF, "True", True),
    (TF, "false", False),
    (SHORT, "guido ", True),
    (SHORT, "guido van rossum", False),
    (SHORT, None, False),
])
def test_is_correct(question, given, expected):
    assert is_correct(question, given) is expected


def test_unanswered_questions_count_as_wrong():
    answers = [AnswerIn(question_id=1, answer="def")]
    assert grade_answers([MCQ, TF, SHORT], answers) == 33


def test_score_rounds_half_up():
    questions = [{"id": i, "type": "MCQ", "correct_answer": "a"} for i in range(1, 9)]
    answers = [AnswerIn(question_id=1, answer="a")]
    # 1/8 -> 12.5
    assert grade_answers(questions, answers) == 13
    assert grade_answers([MCQ, TF, SHORT], [
        AnswerIn(question_id=1, answer="def"),
        AnswerIn(question_id=2, answer="true")]) == 67


def test_empty_quiz_scores_zero():
    assert grade_answers([], []) == 0
