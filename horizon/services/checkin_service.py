"""
Check-in service.
Logs quick wins against a mission and levels the mission up.
"""
import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from horizon.models import Checkin, UserBadge
from horizon.repositories.entry_repository import CheckinRepository
from horizon.repositories.mission_repository import MissionRepository
from horizon.services.badge_service import BadgeService
from horizon.validation import ensure_safe_text
from horizon.constants import CHECKIN_XP, XP_PER_LEVEL, MAX_NOTE_LENGTH
from horizon.exceptions import MissionNotFoundException

logger = logging.getLogger("horizon.checkins")


def level_for_xp(xp: int) -> int:
    """Level 1 at 0-99 XP, level 2 at 100-199, ..."""
    return (xp or 0) // XP_PER_LEVEL + 1


class CheckinService:
    """Service for mission check-ins"""

    def __init__(self, db: Session):
        self.db = db
        self.checkin_repo = CheckinRepository()
        self.mission_repo = MissionRepository()
        self.badge_service = BadgeService(db)

    def get_checkins(self, user_id: str, limit: int = 50) -> List[Checkin]:
        return self.checkin_repo.get_recent(self.db, user_id, limit)

    def log_checkin(self, user_id: str, mission_id: int, note: Optional[str] = None) -> dict:
        """
        Record a check-in and add CHECKIN_XP to the mission's level progress.

        Awards the mission's first level-up badge when it reaches level 2,
        then evaluates the regular badges.

        Returns:
            {"checkin", "mission", "leveled_up", "new_badges"}

        Raises:
            MissionNotFoundException: mission missing, inactive or not the user's
            ValidationException / UnsafeContentException: bad note
        """
        note = ensure_safe_text("note", note, MAX_NOTE_LENGTH)

        mission = self.mission_repo.get_by_id(self.db, user_id, mission_id)
        if not mission or not mission.active:
            raise MissionNotFoundException(mission_id)

        new_badges: List[UserBadge] = []
        try:
            checkin = self.checkin_repo.create(
                self.db,
                Checkin(user_id=user_id, mission_id=mission_id, note=note or None, xp_awarded=CHECKIN_XP)
            )

            old_level = mission.level or 1
            mission.level_xp = (mission.level_xp or 0) + CHECKIN_XP
            mission.level = level_for_xp(mission.level_xp)
            leveled_up = mission.level > old_level

            if leveled_up and old_level == 1:
                new_badges.extend(
                    self.badge_service.award_first_level_up(user_id, mission.id, mission.title)
                )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Check-in logged: user={user_id} mission={mission_id} "
            f"level={mission.level} leveled_up={leveled_up}"
        )

        new_badges.extend(self.badge_service.check_and_award_badges(user_id))
        self.db.refresh(checkin)
        return {
            "checkin": checkin,
            "mission": mission,
            "leveled_up": leveled_up,
            "new_badges": new_badges,
        }
