"""
Tests for MentorNoteService.

Tests cover:
1. Adding notes
2. Daily allowance per plan
3. Text checks
"""
import pytest

from horizon.services.mentor_note_service import MentorNoteService
from horizon.models import MentorNote
from horizon.exceptions import PlanLimitException, ValidationException, UnsafeContentException


def fill_notes(db_session, user_id, count):
    for i in range(count):
        db_session.add(MentorNote(user_id=user_id, note=f"note {i}", tags=[]))
    db_session.commit()


class TestAddNote:
    """Tests for add_note"""

    def test_adds_note_with_clean_tags(self, db_session, user_id):
        note = MentorNoteService(db_session).add_note(user_id, " Prefers mornings ", ["habits", " ", " sleep "])

        assert note.id is not None
        assert note.note == "Prefers mornings"
        assert note.tags == ["habits", "sleep"]

    def test_empty_note_rejected(self, db_session, user_id):
        with pytest.raises(ValidationException) as exc_info:
            MentorNoteService(db_session).add_note(user_id, "   ")

        assert exc_info.value.field == "note"

    def test_unsafe_note_rejected(self, db_session, user_id):
        with pytest.raises(UnsafeContentException):
            MentorNoteService(db_session).add_note(user_id, "asked how to overdose")

    def test_free_plan_daily_allowance(self, db_session, user_id):
        fill_notes(db_session, user_id, 40)
        service = MentorNoteService(db_session)

        assert service.can_add_note(user_id) is False
        with pytest.raises(PlanLimitException) as exc_info:
            service.add_note(user_id, "one more")
        assert exc_info.value.limit == 40
        assert db_session.query(MentorNote).count() == 40

    def test_premium_plan_has_no_allowance(self, db_session, premium_user):
        fill_notes(db_session, premium_user, 40)

        note = MentorNoteService(db_session).add_note(premium_user, "one more")

        assert note.id is not None

    def test_allowance_is_per_user(self, db_session, user_id, other_user_id):
        fill_notes(db_session, other_user_id, 40)

        assert MentorNoteService(db_session).can_add_note(user_id) is True
