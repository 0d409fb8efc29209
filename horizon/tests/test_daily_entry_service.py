"""
Tests for DailyEntryService.

Tests cover:
1. Upsert creates once per day and merges partial updates
2. Reflections safety check
3. Streak badge on completing the seventh day
"""
import pytest
from datetime import timedelta

from horizon.services.daily_entry_service import DailyEntryService
from horizon.schemas import DailyEntryUpsert
from horizon.models import DailyEntry
from horizon.exceptions import UnsafeContentException


class TestUpsertEntry:
    """Tests for upsert_entry"""

    def test_creates_entry(self, db_session, user_id, today):
        result = DailyEntryService(db_session).upsert_entry(
            user_id, today, DailyEntryUpsert(mood=4, reflections=" Calm day ")
        )

        entry = result["entry"]
        assert entry.date == today
        assert entry.mood == 4
        assert entry.reflections == "Calm day"
        assert entry.completed is False
        assert result["new_badges"] == []

    def test_partial_update_keeps_other_fields(self, db_session, user_id, today):
        service = DailyEntryService(db_session)
        service.upsert_entry(user_id, today, DailyEntryUpsert(mood=2, reflections="Rough start"))

        result = service.upsert_entry(user_id, today, DailyEntryUpsert(completed=True))

        assert result["entry"].mood == 2
        assert result["entry"].reflections == "Rough start"
        assert result["entry"].completed is True
        assert db_session.query(DailyEntry).count() == 1

    def test_unsafe_reflections_write_nothing(self, db_session, user_id, today):
        with pytest.raises(UnsafeContentException):
            DailyEntryService(db_session).upsert_entry(
                user_id, today, DailyEntryUpsert(reflections="there is no point, I want to die")
            )

        assert db_session.query(DailyEntry).count() == 0

    def test_completing_seventh_day_awards_badge(self, db_session, user_id, make_entries, today):
        make_entries([today - timedelta(days=i) for i in range(1, 7)])

        result = DailyEntryService(db_session).upsert_entry(
            user_id, today, DailyEntryUpsert(mood=5, completed=True)
        )

        assert [b.badge_id for b in result["new_badges"]] == ["streak-7"]

    def test_get_entry_and_recent(self, db_session, user_id, make_entries, today, yesterday):
        make_entries([yesterday, today])
        service = DailyEntryService(db_session)

        assert service.get_entry(user_id, today).date == today
        assert service.get_entry(user_id, today - timedelta(days=5)) is None
        assert [e.date for e in service.get_recent_entries(user_id)] == [today, yesterday]
