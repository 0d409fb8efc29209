"""
Mission repository - Data access layer for missions, instances and completions.
Instance and completion writes only flush; the calling service owns the commit.
"""
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from horizon.database import insert_or_ignore
from horizon.models import Mission, MissionInstance, MissionCompletion
from horizon.constants import (
    INSTANCE_STATUS_AVAILABLE, INSTANCE_STATUS_COMPLETED, INSTANCE_STATUS_CLAIMED
)


class MissionRepository:
    """Repository for Mission data access"""

    @staticmethod
    def get_by_id(db: Session, user_id: str, mission_id: int) -> Optional[Mission]:
        """Get a mission owned by the user"""
        return db.query(Mission).filter(
            Mission.id == mission_id,
            Mission.user_id == user_id
        ).first()

    @staticmethod
    def get_all(db: Session, user_id: str, include_inactive: bool = False) -> List[Mission]:
        query = db.query(Mission).filter(Mission.user_id == user_id)
        if not include_inactive:
            query = query.filter(Mission.active == True)
        return query.order_by(Mission.created_at, Mission.id).all()

    @staticmethod
    def get_active_by_cadence(db: Session, user_id: str, cadence: str) -> List[Mission]:
        return db.query(Mission).filter(
            Mission.user_id == user_id,
            Mission.cadence == cadence,
            Mission.active == True
        ).order_by(Mission.id).all()

    @staticmethod
    def count_active(db: Session, user_id: str) -> int:
        return db.query(Mission).filter(
            Mission.user_id == user_id,
            Mission.active == True
        ).count()

    @staticmethod
    def create(db: Session, mission: Mission) -> Mission:
        db.add(mission)
        db.commit()
        db.refresh(mission)
        return mission

    @staticmethod
    def update(db: Session, mission: Mission) -> Mission:
        db.commit()
        db.refresh(mission)
        return mission


class MissionInstanceRepository:
    """Repository for MissionInstance data access"""

    @staticmethod
    def get_by_id(db: Session, user_id: str, instance_id: int) -> Optional[MissionInstance]:
        """Get an instance owned by the user"""
        return db.query(MissionInstance).filter(
            MissionInstance.id == instance_id,
            MissionInstance.user_id == user_id
        ).first()

    @staticmethod
    def get_for_period(db: Session, user_id: str, period_id: str) -> List[MissionInstance]:
        return db.query(MissionInstance).filter(
            MissionInstance.user_id == user_id,
            MissionInstance.period_id == period_id
        ).order_by(MissionInstance.id).all()

    @staticmethod
    def insert_available(db: Session, mission_id: int, user_id: str, period_id: str) -> bool:
        """
        Insert an available instance unless one exists for the same period.

        Returns:
            True if a new instance was created
        """
        return insert_or_ignore(
            db,
            MissionInstance,
            {
                "mission_id": mission_id,
                "user_id": user_id,
                "period_id": period_id,
                "status": INSTANCE_STATUS_AVAILABLE,
            },
            ["mission_id", "user_id", "period_id"],
        )

    @staticmethod
    def mark_completed(db: Session, user_id: str, instance_id: int, now: datetime) -> bool:
        """Move an available instance to completed. Returns False if no row matched."""
        updated = db.query(MissionInstance).filter(
            MissionInstance.id == instance_id,
            MissionInstance.user_id == user_id,
            MissionInstance.status == INSTANCE_STATUS_AVAILABLE
        ).update(
            {"status": INSTANCE_STATUS_COMPLETED, "completed_at": now},
            synchronize_session=False
        )
        return updated == 1

    @staticmethod
    def mark_claimed(db: Session, user_id: str, instance_id: int, now: datetime) -> bool:
        """
        Compare-and-swap completed -> claimed.

        Only one caller can win for a given instance, so rewards are granted
        at most once. Returns False if no row matched.
        """
        updated = db.query(MissionInstance).filter(
            MissionInstance.id == instance_id,
            MissionInstance.user_id == user_id,
            MissionInstance.status == INSTANCE_STATUS_COMPLETED
        ).update(
            {"status": INSTANCE_STATUS_CLAIMED, "claimed_at": now},
            synchronize_session=False
        )
        return updated == 1


class MissionCompletionRepository:
    """Repository for MissionCompletion data access"""

    @staticmethod
    def create(db: Session, completion: MissionCompletion) -> MissionCompletion:
        db.add(completion)
        db.flush()
        return completion

    @staticmethod
    def count_for_user(db: Session, user_id: str) -> int:
        return db.query(MissionCompletion).filter(MissionCompletion.user_id == user_id).count()
