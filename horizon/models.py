from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Date, ForeignKey, JSON, UniqueConstraint
)
from datetime import datetime
from horizon.database import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String, primary_key=True, index=True)  # Authenticated user id
    display_name = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    timezone = Column(String, nullable=True)
    subscription_plan = Column(String, default="free")  # free, premium
    created_at = Column(DateTime, default=datetime.now)


class UserRole(Base):
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("profiles.id"), nullable=False, index=True)
    role = Column(String, nullable=False)  # admin
    created_at = Column(DateTime, default=datetime.now)


class Mission(Base):
    __tablename__ = "missions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("profiles.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    type = Column(String, nullable=False, default="Custom")
    intent = Column(String, nullable=True)
    cadence = Column(String, nullable=False, default="daily")  # daily, weekly, monthly, seasonal
    target_per_week = Column(Integer, default=7)

    # Reward granted on claim
    xp = Column(Integer, default=0)
    coins = Column(Integer, default=0)

    # Check-in progression: level = level_xp // 100 + 1
    level_xp = Column(Integer, default=0)
    level = Column(Integer, default=1)

    active = Column(Boolean, default=True)  # Soft delete flag
    created_at = Column(DateTime, default=datetime.now)


class MissionInstance(Base):
    __tablename__ = "mission_instances"
    __table_args__ = (
        UniqueConstraint("mission_id", "user_id", "period_id", name="uq_mission_instances_period"),
    )

    id = Column(Integer, primary_key=True, index=True)
    mission_id = Column(Integer, ForeignKey("missions.id"), nullable=False, index=True)
    user_id = Column(String, ForeignKey("profiles.id"), nullable=False, index=True)
    period_id = Column(String, nullable=False, index=True)  # 2025-01-06, 2025-W02, 2025-01, 2025-Q1
    status = Column(String, default="available")  # available, completed, claimed
    created_at = Column(DateTime, default=datetime.now)
    completed_at = Column(DateTime, nullable=True)
    claimed_at = Column(DateTime, nullable=True)


class MissionCompletion(Base):
    """Immutable reward log, one row per claimed instance"""
    __tablename__ = "mission_completions"

    id = Column(Integer, primary_key=True, index=True)
    mission_instance_id = Column(
        Integer, ForeignKey("mission_instances.id"), nullable=False, unique=True
    )
    user_id = Column(String, ForeignKey("profiles.id"), nullable=False, index=True)
    xp_awarded = Column(Integer, default=0)
    coins_awarded = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.now)


class Checkin(Base):
    __tablename__ = "checkins"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("profiles.id"), nullable=False, index=True)
    mission_id = Column(Integer, ForeignKey("missions.id"), nullable=False, index=True)
    entry_id = Column(Integer, ForeignKey("daily_entries.id"), nullable=True)
    note = Column(String, nullable=True)
    xp_awarded = Column(Integer, default=0)
    occurred_at = Column(DateTime, default=datetime.now)


class DailyEntry(Base):
    __tablename__ = "daily_entries"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_daily_entries_user_date"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("profiles.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    mood = Column(Integer, nullable=True)  # 1-5
    reflections = Column(String, nullable=True)
    ai_prompt = Column(String, nullable=True)
    ai_suggestion = Column(String, nullable=True)
    completed = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class MentorNote(Base):
    __tablename__ = "mentor_notes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("profiles.id"), nullable=False, index=True)
    note = Column(String, nullable=False)
    tags = Column(JSON, default=list)
    created_at = Column(DateTime, default=datetime.now)


class UserStats(Base):
    __tablename__ = "user_stats"

    user_id = Column(String, ForeignKey("profiles.id"), primary_key=True)
    xp_total = Column(Integer, default=0)
    coins_total = Column(Integer, default=0)

    # Daily streak (claims of daily missions)
    daily_streak = Column(Integer, default=0)
    longest_streak = Column(Integer, default=0)
    last_daily_date = Column(Date, nullable=True)

    # Freeze grace: one missed day is forgiven per available freeze
    streak_freezes = Column(Integer, default=0)
    last_freeze_date = Column(Date, nullable=True)

    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class UserBadge(Base):
    __tablename__ = "user_badges"
    __table_args__ = (UniqueConstraint("user_id", "badge_id", name="uq_user_badges_user_badge"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("profiles.id"), nullable=False, index=True)
    badge_id = Column(String, nullable=False)  # streak-7, checkins-30, first-levelup-{mission_id}
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    earned_at = Column(DateTime, default=datetime.now)
