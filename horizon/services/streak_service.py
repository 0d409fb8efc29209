"""
Streak calculation service.
Maintains the daily streak stored on user stats. The streak counts days
with at least one claimed daily mission.
"""
from datetime import date, timedelta
from typing import Iterable

from horizon.models import UserStats


class StreakService:
    """Service for daily streak bookkeeping"""

    @staticmethod
    def apply_daily_claim(stats: UserStats, today: date) -> UserStats:
        """
        Update streak fields for a daily mission claimed on `today`.

        - First ever daily claim: streak = 1
        - Last claim yesterday: streak + 1
        - Last claim today or later: unchanged
        - Exactly one missed day and a freeze available: freeze is spent,
          streak + 1
        - Any other gap: streak resets to 1

        Mutates and returns stats; the caller commits.
        """
        last = stats.last_daily_date
        streak = stats.daily_streak or 0

        # Already counted, or a date from before the last claim
        if last is not None and last >= today:
            return stats

        if last is None:
            streak = 1
        elif last == today - timedelta(days=1):
            streak += 1
        elif last == today - timedelta(days=2) and (stats.streak_freezes or 0) > 0:
            stats.streak_freezes -= 1
            stats.last_freeze_date = today - timedelta(days=1)
            streak += 1
        else:
            streak = 1

        stats.daily_streak = streak
        stats.longest_streak = max(stats.longest_streak or 0, streak)
        stats.last_daily_date = today
        return stats

    @staticmethod
    def current_streak(stats: UserStats, today: date) -> int:
        """
        Streak as seen today. A streak whose last claim is older than
        yesterday is already broken even though the stored value is stale.
        """
        if not stats.last_daily_date:
            return 0
        if stats.last_daily_date >= today - timedelta(days=1):
            return stats.daily_streak or 0
        return 0

    @staticmethod
    def count_consecutive_days(dates: Iterable[date]) -> int:
        """
        Length of the consecutive run at the start of a newest-first date list.

        Example: [Jan 7, Jan 6, Jan 5, Jan 3] -> 3
        """
        count = 0
        previous = None
        for current in dates:
            if previous is not None and previous - current != timedelta(days=1):
                break
            count += 1
            previous = current
        return count
