import json
import logging
from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Sequence

from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from config import LEADERBOARD_CACHE_SECONDS
from database import redis_client
from models.schemas import LeaderboardEntry
from services.achievement_service import is_scored
from services.attempt_service import get_all_attempts
from services.user_service import get_usernames

logger = logging.getLogger(__name__)

CACHE_KEY = "leaderboard"
UNKNOWN_USERNAME = "Unknown"


def round_half_up(value, places: int = 2) -> Decimal:
    exp = Decimal(1).scaleb(-places)
    return Decimal(value).quantize(exp, rounding=ROUND_HALF_UP)


def compute_leaderboard(all_attempts: Sequence,
                        users: Dict[int, str]) -> List[LeaderboardEntry]:
    """
    Ranks users by their average score over completed, scored attempts.
    Users without such an attempt are left out. Ties go to the lower user id.
    """
    totals: Dict[int, List[int]] = defaultdict(lambda: [0, 0])
    for attempt in all_attempts:
        if not is_scored(attempt):
            continue
        stats = totals[attempt.user_id]
        stats[0] += attempt.score
        stats[1] += 1

    entries = [
        LeaderboardEntry(
            user_id=user_id,
            username=users.get(user_id, UNKNOWN_USERNAME),
            score=float(round_half_up(Decimal(total) / Decimal(count)))
        )
        for user_id, (total, count) in totals.items()
    ]
    entries.sort(key=lambda e: (-e.score, e.user_id))
    return entries


def get_leaderboard(db: Session, cache=redis_client) -> List[LeaderboardEntry]:
    if cache is not None:
        cached = cache.get(CACHE_KEY)
        if cached:
            try:
                return [LeaderboardEntry(**e) for e in json.loads(cached)]
            except (ValueError, TypeError) as e:
                logger.warning(f"Ignoring unreadable leaderboard cache entry: {e}")

    result = compute_leaderboard(get_all_attempts(db), get_usernames(db))

    if cache is not None:
        cache.setex(CACHE_KEY, LEADERBOARD_CACHE_SECONDS,
                    json.dumps([e.model_dump() for e in result]))
    return result


def invalidate_leaderboard(cache=redis_client) -> None:
    if cache is None:
        return
    try:
        cache.delete(CACHE_KEY)
    except RedisError as e:
        logger.warning(f"Could not invalidate leaderboard cache: {e}")
        return
    logger.debug("Leaderboard cache invalidated")
