"""
Mission service.
Mission management, instance rolling and the complete/claim reward flow.
"""
import logging
from datetime import datetime, date
from typing import List, Optional
from sqlalchemy.orm import Session

from horizon.models import Mission, MissionInstance, MissionCompletion, UserStats, UserBadge
from horizon.schemas import MissionCreate, MissionUpdate
from horizon.repositories.mission_repository import (
    MissionRepository, MissionInstanceRepository, MissionCompletionRepository
)
from horizon.repositories.stats_repository import UserStatsRepository
from horizon.services.period_service import PeriodService
from horizon.services.profile_service import ProfileService
from horizon.services.streak_service import StreakService
from horizon.services.badge_service import BadgeService
from horizon.constants import CADENCE_DAILY, MAX_INSTANCES_PER_PERIOD
from horizon.exceptions import (
    MissionNotFoundException,
    InstanceNotFoundException,
    InvalidStateTransitionException,
    PlanLimitException,
)

logger = logging.getLogger("horizon.missions")


class ClaimResult:
    """Outcome of a successful claim"""

    def __init__(
        self,
        instance: MissionInstance,
        completion: MissionCompletion,
        stats: UserStats,
        new_badges: List[UserBadge]
    ):
        self.instance = instance
        self.completion = completion
        self.stats = stats
        self.new_badges = new_badges


class MissionService:
    """Service for missions and their per-period instances"""

    def __init__(self, db: Session):
        self.db = db
        self.mission_repo = MissionRepository()
        self.instance_repo = MissionInstanceRepository()
        self.completion_repo = MissionCompletionRepository()
        self.stats_repo = UserStatsRepository()
        self.profile_service = ProfileService(db)
        self.badge_service = BadgeService(db)

    # ===== MISSIONS =====

    def get_missions(self, user_id: str, include_inactive: bool = False) -> List[Mission]:
        return self.mission_repo.get_all(self.db, user_id, include_inactive)

    def get_mission(self, user_id: str, mission_id: int) -> Mission:
        mission = self.mission_repo.get_by_id(self.db, user_id, mission_id)
        if not mission:
            raise MissionNotFoundException(mission_id)
        return mission

    def can_create_mission(self, user_id: str) -> bool:
        max_missions = self.profile_service.get_limit(user_id, "max_missions")
        if max_missions is None:
            return True
        return self.mission_repo.count_active(self.db, user_id) < max_missions

    def create_mission(self, user_id: str, mission_data: MissionCreate) -> Mission:
        """
        Create a mission for the user.

        Raises:
            PlanLimitException: the plan's active mission limit is reached
        """
        self.profile_service.get_profile(user_id)
        if not self.can_create_mission(user_id):
            plan = self.profile_service.get_plan(user_id)
            raise PlanLimitException(
                plan, "active_missions", self.profile_service.get_limit(user_id, "max_missions")
            )

        mission = Mission(user_id=user_id, **mission_data.model_dump(mode="json"))
        mission = self.mission_repo.create(self.db, mission)
        logger.info(f"Mission created: user={user_id} mission={mission.id} cadence={mission.cadence}")
        return mission

    def update_mission(self, user_id: str, mission_id: int, mission_update: MissionUpdate) -> Mission:
        mission = self.get_mission(user_id, mission_id)
        for field, value in mission_update.model_dump(exclude_unset=True, mode="json").items():
            setattr(mission, field, value)
        return self.mission_repo.update(self.db, mission)

    def deactivate_mission(self, user_id: str, mission_id: int) -> Mission:
        """Soft delete: missions are never removed, only switched off"""
        mission = self.get_mission(user_id, mission_id)
        mission.active = False
        logger.info(f"Mission deactivated: user={user_id} mission={mission_id}")
        return self.mission_repo.update(self.db, mission)

    # ===== INSTANCES =====

    def get_instances(self, user_id: str, cadence: str, today: Optional[date] = None) -> List[MissionInstance]:
        """Instances for the user in the current period of a cadence"""
        period_id = PeriodService.get_period_key(cadence, today)
        return self.instance_repo.get_for_period(self.db, user_id, period_id)

    def roll_instances(self, user_id: str, cadence: str, today: Optional[date] = None) -> dict:
        """
        Make sure each active mission of the cadence has an instance for the
        current period.

        At most MAX_INSTANCES_PER_PERIOD instances exist per (user, period).
        The unique constraint on (mission, user, period) turns concurrent
        duplicate inserts into no-ops.

        Returns:
            {"period_id": ..., "created": number of new instances}
        """
        cadence = PeriodService.validate_cadence(cadence)
        period_id = PeriodService.get_period_key(cadence, today)
        logger.info(f"Rolling instances for {cadence} - user={user_id} period={period_id}")

        missions = self.mission_repo.get_active_by_cadence(self.db, user_id, cadence)
        existing = self.instance_repo.get_for_period(self.db, user_id, period_id)
        existing_mission_ids = {instance.mission_id for instance in existing}

        slots = MAX_INSTANCES_PER_PERIOD - len(existing)
        missing = [m for m in missions if m.id not in existing_mission_ids][:max(slots, 0)]

        created = 0
        try:
            for mission in missing:
                if self.instance_repo.insert_available(self.db, mission.id, user_id, period_id):
                    created += 1
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        if created:
            logger.info(f"Created {created} new instances for user={user_id} period={period_id}")
        return {"period_id": period_id, "created": created}

    def complete_instance(self, user_id: str, instance_id: int) -> MissionInstance:
        """
        Mark an available instance as completed.

        Raises:
            InstanceNotFoundException: no such instance for this user
            InvalidStateTransitionException: instance is not available
        """
        if not self.instance_repo.mark_completed(self.db, user_id, instance_id, datetime.now()):
            self.db.rollback()
            instance = self._get_instance(user_id, instance_id)
            raise InvalidStateTransitionException(
                instance_id, instance.status,
                f"Mission cannot be completed from status '{instance.status}'"
            )

        self.db.commit()
        return self._get_instance(user_id, instance_id)

    def claim_instance(self, user_id: str, instance_id: int, today: Optional[date] = None) -> ClaimResult:
        """
        Claim the rewards of a completed instance.

        The status flip, completion log and stats update commit together.
        The status flip is a compare-and-swap on 'completed', so a second
        claim of the same instance always fails. Badges are evaluated after
        the commit.

        Raises:
            InstanceNotFoundException: no such instance for this user
            InvalidStateTransitionException: instance is not completed
        """
        today = today or PeriodService.today()
        instance = self._get_instance(user_id, instance_id)
        mission = self.db.query(Mission).filter(Mission.id == instance.mission_id).one()

        try:
            if not self.instance_repo.mark_claimed(self.db, user_id, instance_id, datetime.now()):
                raise InvalidStateTransitionException(
                    instance_id, instance.status, "Mission not completed yet"
                )

            completion = self.completion_repo.create(
                self.db,
                MissionCompletion(
                    mission_instance_id=instance_id,
                    user_id=user_id,
                    xp_awarded=mission.xp or 0,
                    coins_awarded=mission.coins or 0,
                )
            )

            stats = self.stats_repo.get_for_update(self.db, user_id)
            stats.xp_total = (stats.xp_total or 0) + (mission.xp or 0)
            stats.coins_total = (stats.coins_total or 0) + (mission.coins or 0)
            if mission.cadence == CADENCE_DAILY:
                StreakService.apply_daily_claim(stats, today)

            self.db.commit()
        except InvalidStateTransitionException:
            self.db.rollback()
            self.db.refresh(instance)
            logger.warning(
                f"Claim rejected: user={user_id} instance={instance_id} status={instance.status}"
            )
            raise
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Claimed instance {instance_id}: user={user_id} "
            f"xp=+{completion.xp_awarded} coins=+{completion.coins_awarded}"
        )

        new_badges = self.badge_service.check_and_award_badges(user_id)
        self.db.refresh(instance)
        self.db.refresh(stats)
        return ClaimResult(instance, completion, stats, new_badges)

    def _get_instance(self, user_id: str, instance_id: int) -> MissionInstance:
        instance = self.instance_repo.get_by_id(self.db, user_id, instance_id)
        if not instance:
            raise InstanceNotFoundException(instance_id)
        return instance
