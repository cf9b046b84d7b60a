import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from sqlalchemy.orm import Session

from models.db_models import Achievement
from models.schemas import AchievementOut, Badge, Requirement
from services.attempt_service import get_user_attempts
from services.errors import NotFoundError
from services.user_service import get_user, update_user_badges

logger = logging.getLogger(__name__)


class RequirementType(str, Enum):
    QUIZZES_COMPLETED = 'quizzes_completed'
    PERFECT_SCORES = 'perfect_scores'
    QUIZ_SCORE = 'quiz_score'


def is_scored(attempt) -> bool:
    """Completed attempt that carries a score; the only kind averages use."""
    return attempt.completed_at is not None and attempt.score is not None


def _quizzes_completed(attempts: Sequence, threshold: float) -> bool:
    return sum(1 for a in attempts if a.completed_at is not None) >= threshold


def _perfect_scores(attempts: Sequence, threshold: float) -> bool:
    return sum(1 for a in attempts if a.score == 100) >= threshold


def _quiz_score(attempts: Sequence, threshold: float) -> bool:
    scores = [a.score for a in attempts if is_scored(a)]
    if not scores:
        return False
    return sum(scores) / len(scores) >= threshold


RULE_CHECKS: Dict[RequirementType, Callable[[Sequence, float], bool]] = {
    RequirementType.QUIZZES_COMPLETED: _quizzes_completed,
    RequirementType.PERFECT_SCORES: _perfect_scores,
    RequirementType.QUIZ_SCORE: _quiz_score,
}


def is_satisfied(rule: AchievementOut, attempts: Sequence) -> bool:
    try:
        check = RULE_CHECKS[RequirementType(rule.requirement.type)]
    except ValueError:
        logger.debug(f"Unknown requirement type {rule.requirement.type!r} "
                     f"for achievement {rule.name}")
        return False
    return check(attempts, rule.requirement.threshold)


def evaluate(user_attempts: Sequence, rules: Iterable[AchievementOut],
             already_earned: Iterable[Badge],
             now: Optional[datetime] = None) -> List[Badge]:
    """
    Returns ``already_earned`` plus a badge for every rule the attempt
    history now satisfies. Rules whose name is already earned are skipped,
    so running it again over the same history adds nothing. Inputs are
    never mutated.
    """
    now = now or datetime.now(timezone.utc)
    badges = list(already_earned)
    earned_names = {b.name for b in badges}

    for rule in rules:
        if rule.name in earned_names:
            continue
        if not is_satisfied(rule, user_attempts):
            continue
        badges.append(Badge(
            id=str(rule.id),
            name=rule.name,
            description=rule.description,
            image=rule.badge_image,
            earned_at=now
        ))
        earned_names.add(rule.name)
    return badges


# Catalog persistence
def to_rule(achievement: Achievement) -> AchievementOut:
    return AchievementOut(
        id=achievement.id,
        name=achievement.name,
        description=achievement.description,
        badge_image=achievement.badge_image,
        requirement=Requirement(
            type=achievement.requirement_type,
            threshold=achievement.threshold
        )
    )


def create_achievement(db: Session, name: str, description: str,
                       badge_image: str, requirement_type: str,
                       threshold: float) -> AchievementOut:
    achievement = Achievement(
        name=name,
        description=description,
        badge_image=badge_image,
        requirement_type=requirement_type,
        threshold=threshold
    )
    db.add(achievement)
    db.commit()
    db.refresh(achievement)
    return to_rule(achievement)


def get_achievement(db: Session, achievement_id: int) -> Optional[AchievementOut]:
    achievement = db.get(Achievement, achievement_id)
    return to_rule(achievement) if achievement else None


def get_all_achievements(db: Session) -> List[AchievementOut]:
    return [to_rule(a) for a in db.query(Achievement).order_by(Achievement.id).all()]


def get_user_badges(db: Session, user_id: int) -> List[Badge]:
    user = get_user(db, user_id)
    if not user:
        raise NotFoundError(f"User {user_id} not found", code='user_not_found')
    return [Badge.model_validate(b) for b in user.badges or []]


def check_and_award(db: Session, user_id: int,
                    now: Optional[datetime] = None) -> List[Badge]:
    """Re-evaluates the user's history, stores the badges and returns the new ones."""
    earned = get_user_badges(db, user_id)
    attempts = get_user_attempts(db, user_id)
    badges = evaluate(attempts, get_all_achievements(db), earned, now=now)

    new_badges = badges[len(earned):]
    if not new_badges:
        return []
    update_user_badges(db, user_id, [b.model_dump(mode='json') for b in badges])
    for badge in new_badges:
        logger.info(f"User {user_id} earned achievement {badge.name}")
    return new_badges
