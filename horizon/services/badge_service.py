"""
Badge evaluation service.
Checks achievement conditions and awards badges at most once per user.
"""
import logging
from typing import List
from sqlalchemy.orm import Session

from horizon.models import UserBadge
from horizon.repositories.entry_repository import DailyEntryRepository
from horizon.repositories.mission_repository import MissionCompletionRepository
from horizon.repositories.stats_repository import BadgeRepository
from horizon.services.streak_service import StreakService
from horizon.constants import (
    BADGE_DEFINITIONS,
    BADGE_STREAK_7,
    BADGE_CHECKINS_30,
    BADGE_FIRST_LEVELUP_PREFIX,
    STREAK_BADGE_DAYS,
    COMPLETIONS_BADGE_COUNT,
)

logger = logging.getLogger("horizon.badges")


class BadgeService:
    """Service for badge awards"""

    def __init__(self, db: Session):
        self.db = db
        self.badge_repo = BadgeRepository()
        self.entry_repo = DailyEntryRepository()
        self.completion_repo = MissionCompletionRepository()

    def get_badges(self, user_id: str) -> List[UserBadge]:
        return self.badge_repo.get_all(self.db, user_id)

    def has_streak_badge_condition(self, user_id: str) -> bool:
        """Last 7 completed daily entries exist and are pairwise consecutive"""
        dates = self.entry_repo.get_recent_completed_dates(self.db, user_id, STREAK_BADGE_DAYS)
        if len(dates) < STREAK_BADGE_DAYS:
            return False
        return StreakService.count_consecutive_days(dates) == STREAK_BADGE_DAYS

    def has_completions_badge_condition(self, user_id: str) -> bool:
        return self.completion_repo.count_for_user(self.db, user_id) >= COMPLETIONS_BADGE_COUNT

    def check_and_award_badges(self, user_id: str) -> List[UserBadge]:
        """
        Evaluate the fixed badge conditions and award whatever is newly earned.

        Badges the user already holds are skipped. Commits.

        Returns:
            Newly awarded badges (empty if none)
        """
        earned = self.badge_repo.get_badge_ids(self.db, user_id)
        awarded = []

        if BADGE_STREAK_7 not in earned and self.has_streak_badge_condition(user_id):
            if self._award(user_id, BADGE_STREAK_7, **BADGE_DEFINITIONS[BADGE_STREAK_7]):
                awarded.append(BADGE_STREAK_7)

        if BADGE_CHECKINS_30 not in earned and self.has_completions_badge_condition(user_id):
            if self._award(user_id, BADGE_CHECKINS_30, **BADGE_DEFINITIONS[BADGE_CHECKINS_30]):
                awarded.append(BADGE_CHECKINS_30)

        self.db.commit()
        return self.badge_repo.get_by_badge_ids(self.db, user_id, awarded)

    def award_first_level_up(self, user_id: str, mission_id: int, mission_title: str) -> List[UserBadge]:
        """
        Award the one-off badge for a mission's first level-up (level 1 -> 2).
        Does not commit; the check-in transaction does.
        """
        badge_id = f"{BADGE_FIRST_LEVELUP_PREFIX}{mission_id}"
        if not self._award(
            user_id,
            badge_id,
            name=f"{mission_title} Initiate",
            description=f"First level-up in {mission_title}!",
        ):
            return []
        self.db.flush()
        return self.badge_repo.get_by_badge_ids(self.db, user_id, [badge_id])

    def _award(self, user_id: str, badge_id: str, name: str, description: str) -> bool:
        awarded = self.badge_repo.award(self.db, user_id, badge_id, name, description)
        if awarded:
            logger.info(f"Badge awarded: user={user_id} badge={badge_id}")
        return awarded
