"""
Stats repository - Data access layer for user stats and badges.
"""
from datetime import datetime
from typing import List
from sqlalchemy.orm import Session

from horizon.database import insert_or_ignore
from horizon.models import UserStats, UserBadge


class UserStatsRepository:
    """Repository for UserStats data access"""

    @staticmethod
    def get(db: Session, user_id: str) -> UserStats:
        """Get stats (creates an empty row if not exists)"""
        stats = db.query(UserStats).filter(UserStats.user_id == user_id).first()
        if not stats:
            insert_or_ignore(db, UserStats, {"user_id": user_id}, ["user_id"])
            db.commit()
            stats = db.query(UserStats).filter(UserStats.user_id == user_id).first()
        return stats

    @staticmethod
    def get_for_update(db: Session, user_id: str) -> UserStats:
        """
        Get stats inside the caller's transaction, inserting the row if missing.
        Locks the row where the database supports it. Does not commit.
        """
        insert_or_ignore(db, UserStats, {"user_id": user_id}, ["user_id"])
        return db.query(UserStats).filter(
            UserStats.user_id == user_id
        ).with_for_update().populate_existing().one()


class BadgeRepository:
    """Repository for UserBadge data access"""

    @staticmethod
    def get_all(db: Session, user_id: str) -> List[UserBadge]:
        return db.query(UserBadge).filter(
            UserBadge.user_id == user_id
        ).order_by(UserBadge.earned_at, UserBadge.id).all()

    @staticmethod
    def get_badge_ids(db: Session, user_id: str) -> set:
        return {row.badge_id for row in db.query(UserBadge.badge_id).filter(UserBadge.user_id == user_id)}

    @staticmethod
    def award(db: Session, user_id: str, badge_id: str, name: str, description: str) -> bool:
        """
        Append a badge unless the user already has it. Does not commit.

        Returns:
            True if the badge was newly awarded
        """
        return insert_or_ignore(
            db,
            UserBadge,
            {
                "user_id": user_id,
                "badge_id": badge_id,
                "name": name,
                "description": description,
                "earned_at": datetime.now(),
            },
            ["user_id", "badge_id"],
        )

    @staticmethod
    def get_by_badge_ids(db: Session, user_id: str, badge_ids: List[str]) -> List[UserBadge]:
        if not badge_ids:
            return []
        return db.query(UserBadge).filter(
            UserBadge.user_id == user_id,
            UserBadge.badge_id.in_(badge_ids)
        ).order_by(UserBadge.id).all()
