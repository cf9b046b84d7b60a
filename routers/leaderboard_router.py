import logging
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from redis.exceptions import RedisError
from database import get_cache, get_db
from models.db_models import User
from models.schemas import LeaderboardEntry
from security import get_current_user
from services.leaderboard_service import get_leaderboard

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/leaderboard", response_model=List[LeaderboardEntry])
async def leaderboard(
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
        cache=Depends(get_cache)
):
    try:
        return get_leaderboard(db, cache=cache)
    except RedisError as e:
        logger.warning(f"Leaderboard cache unavailable: {e}")
        return get_leaderboard(db, cache=None)
