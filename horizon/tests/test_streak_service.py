"""
Tests for StreakService.

Tests cover:
1. Streak updates on daily claims
2. Freeze grace for a single missed day
3. Current streak as seen today
4. Consecutive day counting
"""
from datetime import date, timedelta

from horizon.services.streak_service import StreakService
from horizon.models import UserStats


def make_stats(**values):
    defaults = {
        "user_id": "user-1",
        "daily_streak": 0,
        "longest_streak": 0,
        "last_daily_date": None,
        "streak_freezes": 0,
        "last_freeze_date": None,
    }
    defaults.update(values)
    return UserStats(**defaults)


class TestApplyDailyClaim:
    """Tests for apply_daily_claim"""

    def test_first_claim_starts_streak(self, today):
        stats = StreakService.apply_daily_claim(make_stats(), today)

        assert stats.daily_streak == 1
        assert stats.longest_streak == 1
        assert stats.last_daily_date == today

    def test_claim_day_after_increments(self, today, yesterday):
        stats = make_stats(daily_streak=4, longest_streak=4, last_daily_date=yesterday)

        StreakService.apply_daily_claim(stats, today)

        assert stats.daily_streak == 5
        assert stats.longest_streak == 5

    def test_second_claim_same_day_is_ignored(self, today):
        stats = make_stats(daily_streak=3, longest_streak=3, last_daily_date=today)

        StreakService.apply_daily_claim(stats, today)

        assert stats.daily_streak == 3

    def test_gap_resets_streak_but_keeps_longest(self, today):
        stats = make_stats(daily_streak=6, longest_streak=6, last_daily_date=today - timedelta(days=3))

        StreakService.apply_daily_claim(stats, today)

        assert stats.daily_streak == 1
        assert stats.longest_streak == 6
        assert stats.last_daily_date == today

    def test_single_missed_day_without_freeze_resets(self, today):
        stats = make_stats(daily_streak=5, longest_streak=5, last_daily_date=today - timedelta(days=2))

        StreakService.apply_daily_claim(stats, today)

        assert stats.daily_streak == 1

    def test_single_missed_day_spends_freeze(self, today, yesterday):
        stats = make_stats(
            daily_streak=5, longest_streak=5,
            last_daily_date=today - timedelta(days=2), streak_freezes=1
        )

        StreakService.apply_daily_claim(stats, today)

        assert stats.daily_streak == 6
        assert stats.streak_freezes == 0
        assert stats.last_freeze_date == yesterday

    def test_freeze_does_not_cover_two_missed_days(self, today):
        stats = make_stats(
            daily_streak=5, last_daily_date=today - timedelta(days=3), streak_freezes=2
        )

        StreakService.apply_daily_claim(stats, today)

        assert stats.daily_streak == 1
        assert stats.streak_freezes == 2

    def test_claim_dated_before_last_claim_is_ignored(self, today, yesterday):
        """A back-dated claim never moves the streak or its date backwards"""
        stats = make_stats(daily_streak=4, longest_streak=4, last_daily_date=today)

        StreakService.apply_daily_claim(stats, yesterday)

        assert stats.daily_streak == 4
        assert stats.last_daily_date == today

    def test_handles_unset_columns(self, today):
        stats = UserStats(user_id="user-1")

        StreakService.apply_daily_claim(stats, today)

        assert stats.daily_streak == 1
        assert stats.longest_streak == 1


class TestCurrentStreak:
    """Tests for current_streak"""

    def test_no_claims(self, today):
        assert StreakService.current_streak(make_stats(), today) == 0

    def test_claimed_today(self, today):
        assert StreakService.current_streak(make_stats(daily_streak=3, last_daily_date=today), today) == 3

    def test_claimed_yesterday_still_alive(self, today, yesterday):
        assert StreakService.current_streak(make_stats(daily_streak=3, last_daily_date=yesterday), today) == 3

    def test_lapsed_streak_reads_zero(self, today):
        stats = make_stats(daily_streak=3, last_daily_date=today - timedelta(days=2))
        assert StreakService.current_streak(stats, today) == 0


class TestCountConsecutiveDays:
    """Tests for count_consecutive_days"""

    def test_empty(self):
        assert StreakService.count_consecutive_days([]) == 0

    def test_stops_at_first_gap(self):
        dates = [date(2025, 1, 7), date(2025, 1, 6), date(2025, 1, 5), date(2025, 1, 3)]
        assert StreakService.count_consecutive_days(dates) == 3

    def test_all_consecutive(self, today):
        dates = [today - timedelta(days=i) for i in range(7)]
        assert StreakService.count_consecutive_days(dates) == 7
