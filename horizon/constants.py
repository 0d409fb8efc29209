"""
Application constants and environment configuration.
"""
import os

# ===== ENVIRONMENT =====

API_KEY = os.getenv("HORIZON_API_KEY", "your-secret-key-change-me")
DATABASE_URL = os.getenv("HORIZON_DATABASE_URL", "sqlite:///./horizon.db")
ENVIRONMENT = os.getenv("HORIZON_ENVIRONMENT", "development")
ENVIRONMENT_PRODUCTION = "production"

DEFAULT_LOG_DIRECTORY_PROD = "/var/log/horizon"
DEFAULT_LOG_DIRECTORY_DEV = "./logs"

CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "HORIZON_CORS_ORIGINS", "http://localhost:5173,http://localhost:8080"
    ).split(",")
    if origin.strip()
]

AUTO_ROLL_ENABLED = os.getenv("HORIZON_AUTO_ROLL_ENABLED", "false").lower() in ("1", "true", "yes")
AUTO_ROLL_TIME = os.getenv("HORIZON_AUTO_ROLL_TIME", "00:05")  # HH:MM, server-local

# ===== CADENCES =====

CADENCE_DAILY = "daily"
CADENCE_WEEKLY = "weekly"
CADENCE_MONTHLY = "monthly"
CADENCE_SEASONAL = "seasonal"
CADENCES = (CADENCE_DAILY, CADENCE_WEEKLY, CADENCE_MONTHLY, CADENCE_SEASONAL)

# ===== MISSION TYPES =====

MISSION_TYPES = (
    "Mind", "Body", "Craft", "Relationships", "Finance", "Spirit", "Custom",
    "Connect", "Create", "Learn", "Earn", "Home", "Reset", "Reflect",
)

# ===== INSTANCE STATUSES =====

INSTANCE_STATUS_AVAILABLE = "available"
INSTANCE_STATUS_COMPLETED = "completed"
INSTANCE_STATUS_CLAIMED = "claimed"

# Max instances per (user, cadence, period)
MAX_INSTANCES_PER_PERIOD = 5

# ===== CHECK-INS & LEVELS =====

CHECKIN_XP = 10
XP_PER_LEVEL = 100

# ===== BADGES =====

BADGE_STREAK_7 = "streak-7"
BADGE_CHECKINS_30 = "checkins-30"
BADGE_FIRST_LEVELUP_PREFIX = "first-levelup-"

STREAK_BADGE_DAYS = 7
COMPLETIONS_BADGE_COUNT = 30

BADGE_DEFINITIONS = {
    BADGE_STREAK_7: {
        "name": "Week Warrior",
        "description": "Seven days of showing up. That's a pattern.",
    },
    BADGE_CHECKINS_30: {
        "name": "Consistency Champion",
        "description": "Thirty actions logged. Momentum builds on itself.",
    },
}

# ===== PLANS =====

PLAN_FREE = "free"
PLAN_PREMIUM = "premium"

# None means unlimited
PLAN_LIMITS = {
    PLAN_FREE: {
        "max_missions": 3,
        "mentor_notes_per_day": 40,
    },
    PLAN_PREMIUM: {
        "max_missions": None,
        "mentor_notes_per_day": None,
    },
}

ROLE_ADMIN = "admin"

# ===== TEXT LIMITS =====

MAX_TEXT_LENGTH = 2000
MAX_MISSION_TEXT_LENGTH = 200
MAX_NOTE_LENGTH = 500

MOOD_MIN = 1
MOOD_MAX = 5
