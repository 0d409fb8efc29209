"""
Profile service.
Handles profiles, subscription plan limits and roles.
"""
from typing import Optional
from sqlalchemy.orm import Session

from horizon.models import Profile
from horizon.schemas import ProfileUpdate
from horizon.repositories.profile_repository import ProfileRepository, UserRoleRepository
from horizon.constants import PLAN_LIMITS, PLAN_FREE, ROLE_ADMIN
from horizon.exceptions import AdminRequiredException


class ProfileService:
    """Service for profile, plan and role lookups"""

    def __init__(self, db: Session):
        self.db = db
        self.profile_repo = ProfileRepository()
        self.role_repo = UserRoleRepository()

    def get_profile(self, user_id: str) -> Profile:
        return self.profile_repo.get_or_create(self.db, user_id)

    def update_profile(self, user_id: str, profile_update: ProfileUpdate) -> Profile:
        profile = self.get_profile(user_id)
        for field, value in profile_update.model_dump(exclude_unset=True).items():
            setattr(profile, field, value)
        return self.profile_repo.update(self.db, profile)

    def get_plan(self, user_id: str) -> str:
        """Subscription plan; unknown values fall back to free"""
        plan = self.get_profile(user_id).subscription_plan or PLAN_FREE
        return plan if plan in PLAN_LIMITS else PLAN_FREE

    def get_limit(self, user_id: str, limit_name: str) -> Optional[int]:
        """Plan limit value, None when unlimited"""
        return PLAN_LIMITS[self.get_plan(user_id)][limit_name]

    def is_admin(self, user_id: str) -> bool:
        return self.role_repo.has_role(self.db, user_id, ROLE_ADMIN)

    def require_admin(self, user_id: str) -> None:
        if not self.is_admin(user_id):
            raise AdminRequiredException()
