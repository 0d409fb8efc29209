"""
Daily pulse service.
One entry per user and calendar day holding mood, reflections and the
prompt/suggestion shown for the day.
"""
import logging
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session

from horizon.models import DailyEntry
from horizon.schemas import DailyEntryUpsert
from horizon.repositories.entry_repository import DailyEntryRepository
from horizon.services.badge_service import BadgeService
from horizon.services.period_service import PeriodService
from horizon.validation import ensure_safe_text

logger = logging.getLogger("horizon.daily_pulse")


class DailyEntryService:
    """Service for daily pulse entries"""

    def __init__(self, db: Session):
        self.db = db
        self.entry_repo = DailyEntryRepository()
        self.badge_service = BadgeService(db)

    def get_entry(self, user_id: str, target_date: Optional[date] = None) -> Optional[DailyEntry]:
        target_date = target_date or PeriodService.today()
        return self.entry_repo.get_by_date(self.db, user_id, target_date)

    def get_recent_entries(self, user_id: str, limit: int = 30) -> List[DailyEntry]:
        return self.entry_repo.get_recent(self.db, user_id, limit)

    def upsert_entry(self, user_id: str, target_date: date, entry_data: DailyEntryUpsert) -> dict:
        """
        Create or update the entry for a date.

        Reflections are safety-checked before anything is written. Fields
        left out of entry_data keep their stored values. When the entry is
        completed, badges are evaluated.

        Returns:
            {"entry": DailyEntry, "new_badges": [...]}
        """
        values = entry_data.model_dump(exclude_unset=True)
        if "reflections" in values:
            values["reflections"] = ensure_safe_text("reflections", values["reflections"])

        try:
            entry = self.entry_repo.get_or_create(self.db, user_id, target_date)
            for field, value in values.items():
                setattr(entry, field, value)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(entry)

        new_badges = []
        if entry.completed:
            logger.info(f"Daily pulse completed: user={user_id} date={target_date}")
            new_badges = self.badge_service.check_and_award_badges(user_id)

        return {"entry": entry, "new_badges": new_badges}
