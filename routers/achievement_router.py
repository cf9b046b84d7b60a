from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database import get_db
from models.db_models import User
from models.schemas import AchievementOut, Badge
from security import get_current_user
from services.achievement_service import get_all_achievements, get_user_badges

router = APIRouter()


@router.get("/achievements", response_model=List[AchievementOut])
async def list_achievements(
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    return get_all_achievements(db)


@router.get("/user/achievements", response_model=List[Badge])
async def my_achievements(
        user: User = Depends(get_current_user),
        db: Session = Depends(get_db)
):
    return get_user_badges(db, user.id)
