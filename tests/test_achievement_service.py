from datetime import datetime, timezone

import pytest

from models.schemas import AchievementOut, AttemptOut, Badge, Requirement
from services.achievement_service import (
    RULE_CHECKS,
    RequirementType,
    check_and_award,
    evaluate,
    get_user_badges,
)
from services.attempt_service import complete_attempt, create_attempt
from services.errors import NotFoundError
from services.user_service import create_user

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)
T1 = datetime(2025, 12, 1, 10, 0)
T2 = datetime(2025, 12, 2, 10, 0)


def attempt(score=None, completed_at=T1, attempt_id=1, user_id=1):
    return AttemptOut(id=attempt_id, quiz_id=1, user_id=user_id,
                      started_at=T1, completed_at=completed_at, score=score)


def rule(rule_type, threshold, name="Rule", rule_id=1):
    return AchievementOut(
        id=rule_id, name=name, description=f"{rule_type} >= {threshold}",
        badge_image="*", requirement=Requirement(type=rule_type, threshold=threshold))


def names(badges):
    return [b.name for b in badges]


def test_every_requirement_type_has_a_check():
    assert set(RULE_CHECKS) == set(RequirementType)


def test_quizzes_completed_earned_at_threshold():
    attempts = [attempt(100, T1), attempt(80, T2, attempt_id=2)]
    rules = [rule("quizzes_completed", 2, name="Quiz Master", rule_id=7)]

    badges = evaluate(attempts, rules, [], now=NOW)

    assert len(badges) == 1
    assert badges[0].name == "Quiz Master"
    assert badges[0].id == "7"
    assert badges[0].earned_at == NOW


def test_in_progress_attempts_do_not_count_as_completed():
    attempts = [attempt(90, T1), attempt(None, None, attempt_id=2)]
    assert evaluate(attempts, [rule("quizzes_completed", 2)], [], now=NOW) == []


@pytest.mark.parametrize("threshold,earned", [(1, True), (2, False)])
def test_perfect_scores_threshold(threshold, earned):
    badges = evaluate([attempt(100)], [rule("perfect_scores", threshold)], [], now=NOW)
    assert bool(badges) is earned


@pytest.mark.parametrize("threshold", [0, 50, 100])
def test_quiz_score_without_scored_attempts_is_never_earned(threshold):
    attempts = [attempt(None, None), attempt(None, T1, attempt_id=2)]
    assert evaluate(attempts, [rule("quiz_score", threshold)], [], now=NOW) == []
    assert evaluate([], [rule("quiz_score", threshold)], [], now=NOW) == []


def test_quiz_score_uses_average_of_completed_scored_attempts():
    attempts = [attempt(100, T1), attempt(80, T2, attempt_id=2), attempt(None, None, attempt_id=3)]
    assert names(evaluate(attempts, [rule("quiz_score", 90)], [], now=NOW)) == ["Rule"]
    assert evaluate(attempts, [rule("quiz_score", 90.5)], [], now=NOW) == []


def test_unknown_requirement_type_is_never_satisfied():
    assert evaluate([attempt(100)], [rule("streak_days", 0)], [], now=NOW) == []


def test_already_earned_badges_are_kept_and_not_reawarded():
    earned = Badge(id="1", name="Perfect Score", description="d", image="*",
                   earned_at=datetime(2025, 1, 1, tzinfo=timezone.utc))
    rules = [rule("perfect_scores", 1, name="Perfect Score"),
             rule("quizzes_completed", 1, name="First Steps", rule_id=2)]

    badges = evaluate([attempt(100)], rules, [earned], now=NOW)

    assert names(badges) == ["Perfect Score", "First Steps"]
    assert badges[0] == earned


def test_earned_badges_survive_when_history_no_longer_qualifies():
    earned = Badge(id="3", name="High Achiever", description="d", image="*", earned_at=NOW)
    badges = evaluate([attempt(10)], [rule("quiz_score", 90, name="High Achiever")], [earned])
    assert badges == [earned]


def test_evaluate_is_idempotent_and_pure():
    attempts = [attempt(100)]
    rules = [rule("perfect_scores", 1), rule("quizzes_completed", 1, name="Other", rule_id=2)]
    already = []

    first = evaluate(attempts, rules, already, now=NOW)
    second = evaluate(attempts, rules, already, now=NOW)

    assert first == second
    assert already == []
    assert evaluate(attempts, rules, first) == first


def test_duplicate_rule_names_earn_a_single_badge():
    rules = [rule("perfect_scores", 1, name="Star"),
             rule("quizzes_completed", 1, name="Star", rule_id=2)]
    assert names(evaluate([attempt(100)], rules, [], now=NOW)) == ["Star"]


def test_check_and_award_persists_new_badges(db):
    user = create_user(db, "alice", "hash")
    first = create_attempt(db, quiz_id=1, user_id=user.id)
    complete_attempt(db, first.id, score=100, answers=[])

    new_badges = check_and_award(db, user.id, now=NOW)

    assert names(new_badges) == ["Perfect Score", "High Achiever"]
    assert names(get_user_badges(db, user.id)) == ["Perfect Score", "High Achiever"]
    assert check_and_award(db, user.id) == []


def test_check_and_award_unknown_user(db):
    with pytest.raises(NotFoundError):
        check_and_award(db, 999)
