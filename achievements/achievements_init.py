import logging
from sqlalchemy.orm import Session
from models.db_models import Achievement
from database import SessionLocal
from achievements.achievements_config import ACHIEVEMENTS
from services.achievement_service import create_achievement

logger = logging.getLogger(__name__)


def init_achievements(db: Session = None):
    own_session = db is None
    db = db or SessionLocal()
    try:
        for name, data in ACHIEVEMENTS.items():
            if not db.query(Achievement).filter_by(name=name).first():
                create_achievement(
                    db,
                    name=name,
                    description=data["description"],
                    badge_image=data["badge_image"],
                    requirement_type=data["requirement"]["type"],
                    threshold=data["requirement"]["threshold"]
                )
                logger.info(f"Seeded achievement {name}")
    finally:
        if own_session:
            db.close()
