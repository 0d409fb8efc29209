from pydantic import BaseModel, Field, field_validator
from datetime import datetime, date
from enum import Enum
from typing import List, Optional

from horizon.constants import (
    MAX_MISSION_TEXT_LENGTH, MAX_NOTE_LENGTH, MAX_TEXT_LENGTH, MOOD_MIN, MOOD_MAX
)


class Cadence(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    SEASONAL = "seasonal"


class MissionType(str, Enum):
    MIND = "Mind"
    BODY = "Body"
    CRAFT = "Craft"
    RELATIONSHIPS = "Relationships"
    FINANCE = "Finance"
    SPIRIT = "Spirit"
    CUSTOM = "Custom"
    CONNECT = "Connect"
    CREATE = "Create"
    LEARN = "Learn"
    EARN = "Earn"
    HOME = "Home"
    RESET = "Reset"
    REFLECT = "Reflect"


class SubscriptionPlan(str, Enum):
    FREE = "free"
    PREMIUM = "premium"


# Mission schemas
class MissionBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=MAX_MISSION_TEXT_LENGTH)
    type: MissionType = MissionType.CUSTOM
    intent: Optional[str] = Field(None, max_length=MAX_MISSION_TEXT_LENGTH)
    cadence: Cadence = Cadence.DAILY
    target_per_week: int = Field(default=7, ge=1, le=7)
    xp: int = Field(default=10, ge=0, le=10000)
    coins: int = Field(default=0, ge=0, le=10000)

    # Strip before the length checks so blank titles are rejected
    @field_validator("title", "intent", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


class MissionCreate(MissionBase):
    pass


class MissionUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=MAX_MISSION_TEXT_LENGTH)
    type: Optional[MissionType] = None
    intent: Optional[str] = Field(None, max_length=MAX_MISSION_TEXT_LENGTH)
    cadence: Optional[Cadence] = None
    target_per_week: Optional[int] = Field(None, ge=1, le=7)
    xp: Optional[int] = Field(None, ge=0, le=10000)
    coins: Optional[int] = Field(None, ge=0, le=10000)

    @field_validator("title", "intent", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("title", "type", "cadence", "target_per_week", "xp", "coins", mode="before")
    @classmethod
    def reject_null(cls, value):
        # Only intent may be cleared
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class MissionResponse(MissionBase):
    id: int
    user_id: str
    level: int = 1
    level_xp: int = 0
    active: bool
    created_at: datetime

    class Config:
        from_attributes = True


# Instance schemas
class RollRequest(BaseModel):
    cadence: Cadence


class RollResponse(BaseModel):
    success: bool = True
    period_id: str
    created: int


class MissionInstanceResponse(BaseModel):
    id: int
    mission_id: int
    user_id: str
    period_id: str
    status: str
    created_at: datetime
    completed_at: Optional[datetime] = None
    claimed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Stats & badges
class UserStatsResponse(BaseModel):
    user_id: str
    xp_total: int = 0
    coins_total: int = 0
    daily_streak: int = 0
    longest_streak: int = 0
    last_daily_date: Optional[date] = None
    streak_freezes: int = 0
    last_freeze_date: Optional[date] = None
    current_streak: int = 0  # 0 once the stored streak has lapsed

    class Config:
        from_attributes = True


class BadgeResponse(BaseModel):
    badge_id: str
    name: str
    description: Optional[str] = None
    earned_at: datetime

    class Config:
        from_attributes = True


class ClaimResponse(BaseModel):
    success: bool = True
    instance: MissionInstanceResponse
    xp_awarded: int
    coins_awarded: int
    stats: UserStatsResponse
    new_badges: List[BadgeResponse] = []


# Check-ins
class CheckinCreate(BaseModel):
    mission_id: int
    note: Optional[str] = Field(None, max_length=MAX_NOTE_LENGTH)


class CheckinResponse(BaseModel):
    id: int
    mission_id: int
    note: Optional[str] = None
    xp_awarded: int
    occurred_at: datetime

    class Config:
        from_attributes = True


class CheckinResult(BaseModel):
    checkin: CheckinResponse
    mission_level: int
    leveled_up: bool
    new_badges: List[BadgeResponse] = []


# Daily entries
class DailyEntryUpsert(BaseModel):
    mood: Optional[int] = Field(None, ge=MOOD_MIN, le=MOOD_MAX)
    reflections: Optional[str] = Field(None, max_length=MAX_TEXT_LENGTH)
    ai_prompt: Optional[str] = Field(None, max_length=MAX_TEXT_LENGTH)
    ai_suggestion: Optional[str] = Field(None, max_length=MAX_TEXT_LENGTH)
    completed: bool = False


class DailyEntryResponse(BaseModel):
    id: int
    date: date
    mood: Optional[int] = None
    reflections: Optional[str] = None
    ai_prompt: Optional[str] = None
    ai_suggestion: Optional[str] = None
    completed: bool = False
    created_at: datetime

    class Config:
        from_attributes = True


class DailyEntryResult(BaseModel):
    entry: DailyEntryResponse
    new_badges: List[BadgeResponse] = []


# Mentor notes
class MentorNoteCreate(BaseModel):
    note: str = Field(..., min_length=1, max_length=MAX_TEXT_LENGTH)
    tags: List[str] = []

    @field_validator("note")
    @classmethod
    def strip_note(cls, value):
        return value.strip()


class MentorNoteResponse(BaseModel):
    id: int
    note: str
    tags: List[str] = []
    created_at: datetime

    class Config:
        from_attributes = True


# Profile
class ProfileUpdate(BaseModel):
    display_name: Optional[str] = Field(None, max_length=100)
    avatar_url: Optional[str] = Field(None, max_length=500)
    timezone: Optional[str] = Field(None, max_length=64)


class ProfileResponse(BaseModel):
    id: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    timezone: Optional[str] = None
    subscription_plan: str = "free"
    created_at: datetime
    badges: List[BadgeResponse] = []

    class Config:
        from_attributes = True


# Text safety
class CrisisResource(BaseModel):
    name: str
    phone: str
    url: str
    description: str


class SafetyResult(BaseModel):
    valid: bool
    severity: Optional[str] = None  # low, medium, high, critical
    action: Optional[str] = None    # allow, block, redirect, escalate
    error: Optional[str] = None
    resources: List[CrisisResource] = []


# Demo data
class DemoDataResponse(BaseModel):
    success: bool = True
    message: str
    data: Optional[dict] = None
