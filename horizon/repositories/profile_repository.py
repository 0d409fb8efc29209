"""
Profile repository - Data access layer for profiles and roles.
"""
from typing import Optional
from sqlalchemy.orm import Session

from horizon.database import insert_or_ignore
from horizon.models import Profile, UserRole
from horizon.constants import PLAN_FREE


class ProfileRepository:
    """Repository for Profile data access"""

    @staticmethod
    def get(db: Session, user_id: str) -> Optional[Profile]:
        return db.query(Profile).filter(Profile.id == user_id).first()

    @staticmethod
    def get_or_create(db: Session, user_id: str) -> Profile:
        """
        Get profile (creates with defaults if not exists).

        Returns:
            Profile object
        """
        profile = db.query(Profile).filter(Profile.id == user_id).first()
        if profile:
            return profile

        insert_or_ignore(
            db, Profile, {"id": user_id, "subscription_plan": PLAN_FREE}, ["id"]
        )
        db.commit()
        return db.query(Profile).filter(Profile.id == user_id).first()

    @staticmethod
    def update(db: Session, profile: Profile) -> Profile:
        db.commit()
        db.refresh(profile)
        return profile

    @staticmethod
    def get_all_ids(db: Session) -> list:
        return [row.id for row in db.query(Profile.id).all()]


class UserRoleRepository:
    """Repository for UserRole data access"""

    @staticmethod
    def has_role(db: Session, user_id: str, role: str) -> bool:
        return db.query(UserRole).filter(
            UserRole.user_id == user_id,
            UserRole.role == role
        ).first() is not None

    @staticmethod
    def grant(db: Session, user_id: str, role: str) -> None:
        insert_or_ignore(db, UserRole, {"user_id": user_id, "role": role}, ["user_id", "role"])
        db.commit()
