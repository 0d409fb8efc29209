"""
Mentor note service.
Stores mentor notes and enforces the plan's daily note allowance.
"""
import logging
from datetime import date, datetime, timedelta
from typing import List, Optional
from sqlalchemy.orm import Session

from horizon.models import MentorNote
from horizon.repositories.entry_repository import MentorNoteRepository
from horizon.services.profile_service import ProfileService
from horizon.services.period_service import PeriodService
from horizon.validation import ensure_safe_text
from horizon.exceptions import PlanLimitException, ValidationException

logger = logging.getLogger("horizon.mentor")


class MentorNoteService:
    """Service for mentor notes"""

    def __init__(self, db: Session):
        self.db = db
        self.note_repo = MentorNoteRepository()
        self.profile_service = ProfileService(db)

    def get_notes(self, user_id: str, limit: int = 50) -> List[MentorNote]:
        return self.note_repo.get_recent(self.db, user_id, limit)

    def count_today(self, user_id: str, today: Optional[date] = None) -> int:
        today = today or PeriodService.today()
        day_start = datetime.combine(today, datetime.min.time())
        return self.note_repo.count_in_range(
            self.db, user_id, day_start, day_start + timedelta(days=1)
        )

    def can_add_note(self, user_id: str, today: Optional[date] = None) -> bool:
        limit = self.profile_service.get_limit(user_id, "mentor_notes_per_day")
        if limit is None:
            return True
        return self.count_today(user_id, today) < limit

    def add_note(self, user_id: str, note: str, tags: Optional[List[str]] = None) -> MentorNote:
        """
        Raises:
            ValidationException / UnsafeContentException: empty or unsafe text
            PlanLimitException: daily allowance used up
        """
        note = ensure_safe_text("note", note)
        if not note:
            raise ValidationException("note", "Message cannot be empty")

        self.profile_service.get_profile(user_id)
        if not self.can_add_note(user_id):
            raise PlanLimitException(
                self.profile_service.get_plan(user_id),
                "mentor_notes_per_day",
                self.profile_service.get_limit(user_id, "mentor_notes_per_day"),
            )

        mentor_note = self.note_repo.create(
            self.db,
            MentorNote(user_id=user_id, note=note, tags=[tag.strip() for tag in tags or [] if tag.strip()])
        )
        logger.info(f"Mentor note added: user={user_id} note={mentor_note.id}")
        return mentor_note
