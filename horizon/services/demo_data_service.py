"""
Demo data service.
Seeds a realistic data set for the calling admin and wipes it again.
Not available in production.
"""
import logging
from datetime import date, datetime, timedelta
from typing import Optional
from sqlalchemy.orm import Session

from horizon.models import (
    Mission, MissionInstance, MissionCompletion, Checkin, DailyEntry, MentorNote,
    UserStats, UserBadge
)
from horizon.services.profile_service import ProfileService
from horizon.services.period_service import PeriodService
from horizon.constants import (
    ENVIRONMENT, ENVIRONMENT_PRODUCTION, CHECKIN_XP,
    CADENCE_DAILY, CADENCE_WEEKLY
)
from horizon.exceptions import EnvironmentRestrictedException

logger = logging.getLogger("horizon.demo_data")

DEMO_MISSIONS = [
    {
        "title": "Morning Meditation",
        "type": "Mind",
        "intent": "Build a consistent mindfulness practice",
        "cadence": CADENCE_DAILY,
        "target_per_week": 7,
        "xp": 20,
        "coins": 5,
        "level_xp": 150,
        "level": 2,
    },
    {
        "title": "Exercise Routine",
        "type": "Body",
        "intent": "Stay physically active and healthy",
        "cadence": CADENCE_WEEKLY,
        "target_per_week": 3,
        "xp": 50,
        "coins": 10,
        "level_xp": 80,
        "level": 1,
    },
    {
        "title": "Creative Writing",
        "type": "Craft",
        "intent": "Develop writing skills and express creativity",
        "cadence": CADENCE_WEEKLY,
        "target_per_week": 5,
        "xp": 40,
        "coins": 10,
        "level_xp": 220,
        "level": 3,
    },
]

DEMO_MOODS = [3, 4, 5, 3, 4, 2, 4, 5, 3, 4]

DEMO_REFLECTIONS = [
    "Had a productive day today. Feeling motivated.",
    "Struggled a bit with focus but pushed through.",
    "Great day! Everything clicked into place.",
    "Feeling a bit overwhelmed but staying positive.",
    "Made good progress on my goals today.",
    "Had some challenges but learned from them.",
    "Feeling energized and ready for more.",
    "A calm and peaceful day overall.",
    "Busy day but managed to stay on track.",
    "Ending the day with gratitude.",
]

DEMO_MENTOR_NOTES = [
    ("User expressed interest in improving morning routine consistency", ["habits", "morning"]),
    ("Mentioned challenges with maintaining exercise motivation during busy periods", ["exercise", "motivation"]),
    ("Wants to develop a creative writing practice, interested in journaling techniques", ["writing", "creativity"]),
    ("Appreciates accountability check-ins and progress tracking features", ["feedback", "features"]),
    ("Asked about strategies for dealing with perfectionism", ["mindset", "growth"]),
]

DEMO_CHECKIN_COUNT = 20

# Children before parents so foreign keys hold
USER_TABLES = [
    MissionCompletion, Checkin, MissionInstance, DailyEntry, MentorNote,
    UserBadge, UserStats, Mission,
]


class DemoDataService:
    """Service for seeding and resetting a user's data"""

    def __init__(self, db: Session, environment: Optional[str] = None):
        self.db = db
        self.environment = environment or ENVIRONMENT
        self.profile_service = ProfileService(db)

    def _check_allowed(self, user_id: str) -> None:
        if self.environment == ENVIRONMENT_PRODUCTION:
            raise EnvironmentRestrictedException(self.environment)
        self.profile_service.require_admin(user_id)

    def _delete_user_rows(self, user_id: str) -> dict:
        deleted = {}
        for model in USER_TABLES:
            deleted[model.__tablename__] = self.db.query(model).filter(
                model.user_id == user_id
            ).delete(synchronize_session=False)
        return deleted

    def reset(self, user_id: str) -> dict:
        """
        Delete every row the user owns (profile and roles stay).

        Raises:
            EnvironmentRestrictedException: running in production
            AdminRequiredException: caller is not an admin
        """
        self._check_allowed(user_id)
        try:
            deleted = self._delete_user_rows(user_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Demo data reset for user={user_id}: {deleted}")
        return deleted

    def seed(self, user_id: str, today: Optional[date] = None) -> dict:
        """
        Replace the user's data with 3 missions, 10 consecutive completed
        daily entries ending today, 20 check-ins and 5 mentor notes.

        Returns:
            Counts of seeded rows per kind
        """
        self._check_allowed(user_id)
        today = today or PeriodService.today()
        now = datetime.combine(today, datetime.now().time())

        try:
            self._delete_user_rows(user_id)

            missions = [Mission(user_id=user_id, active=True, **data) for data in DEMO_MISSIONS]
            self.db.add_all(missions)
            self.db.flush()

            entries = [
                DailyEntry(
                    user_id=user_id,
                    date=today - timedelta(days=i),
                    mood=DEMO_MOODS[i],
                    reflections=DEMO_REFLECTIONS[i],
                    completed=True,
                    ai_prompt="What small win can you celebrate from today?",
                    ai_suggestion="Take 5 minutes to journal about your progress",
                )
                for i in range(len(DEMO_MOODS))
            ]
            self.db.add_all(entries)

            checkins = [
                Checkin(
                    user_id=user_id,
                    mission_id=missions[i % len(missions)].id,
                    occurred_at=now - timedelta(days=i // len(missions)),
                    xp_awarded=CHECKIN_XP,
                )
                for i in range(DEMO_CHECKIN_COUNT)
            ]
            self.db.add_all(checkins)

            notes = [
                MentorNote(user_id=user_id, note=text, tags=tags)
                for text, tags in DEMO_MENTOR_NOTES
            ]
            self.db.add_all(notes)

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        counts = {
            "missions": len(missions),
            "daily_entries": len(entries),
            "checkins": len(checkins),
            "mentor_notes": len(notes),
        }
        logger.info(f"Demo data seeded for user={user_id}: {counts}")
        return counts
