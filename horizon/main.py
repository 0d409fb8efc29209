from fastapi import FastAPI, Depends, HTTPException, Query, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
import logging
import os
from pathlib import Path

from horizon.database import engine, get_db, Base
from horizon import models  # Import all models to register them with Base
from horizon.schemas import (
    Cadence,
    MissionCreate, MissionUpdate, MissionResponse,
    RollRequest, RollResponse, MissionInstanceResponse, ClaimResponse,
    UserStatsResponse, BadgeResponse,
    CheckinCreate, CheckinResponse, CheckinResult,
    DailyEntryUpsert, DailyEntryResponse, DailyEntryResult,
    MentorNoteCreate, MentorNoteResponse,
    ProfileUpdate, ProfileResponse,
    DemoDataResponse,
)
from horizon.auth import verify_api_key, get_current_user_id
from horizon.services.mission_service import MissionService
from horizon.services.checkin_service import CheckinService
from horizon.services.daily_entry_service import DailyEntryService
from horizon.services.mentor_note_service import MentorNoteService
from horizon.services.profile_service import ProfileService
from horizon.services.badge_service import BadgeService
from horizon.services.demo_data_service import DemoDataService
from horizon.services.period_service import PeriodService
from horizon.services.streak_service import StreakService
from horizon.services.scheduler_service import start_scheduler, stop_scheduler
from horizon.repositories.stats_repository import UserStatsRepository
from horizon.exceptions import (
    HorizonException,
    MissionNotFoundException,
    InstanceNotFoundException,
    InvalidStateTransitionException,
    PlanLimitException,
    AdminRequiredException,
    EnvironmentRestrictedException,
    UnsafeContentException,
    ValidationException,
)
from horizon.constants import (
    DEFAULT_LOG_DIRECTORY_PROD, DEFAULT_LOG_DIRECTORY_DEV, CORS_ALLOWED_ORIGINS
)

LOG_DIR = os.getenv("HORIZON_LOG_DIR", DEFAULT_LOG_DIRECTORY_PROD)
LOG_FILE = os.getenv("HORIZON_LOG_FILE", "app.log")

# Create log directory if it doesn't exist (for development)
try:
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE
except PermissionError:
    # Fallback to local directory if no permissions for /var/log
    LOG_DIR = DEFAULT_LOG_DIRECTORY_DEV
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_path),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger("horizon")

# Create database tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Horizon Missions API",
    description="Missions, daily pulse, streaks and badges",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    logger.info(f"Horizon Missions API started. Logging to: {log_path}")
    start_scheduler()


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Horizon Missions API")
    stop_scheduler()


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Something went wrong"})


def to_http_exception(e: HorizonException) -> HTTPException:
    """Map a domain exception to the HTTP error the client sees"""
    if isinstance(e, (MissionNotFoundException, InstanceNotFoundException)):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, UnsafeContentException):
        return HTTPException(status_code=400, detail={
            "message": e.message,
            "field": e.field,
            "severity": e.severity,
            "action": e.action,
            "resources": e.resources,
        })
    if isinstance(e, ValidationException):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, InvalidStateTransitionException):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, (PlanLimitException, AdminRequiredException, EnvironmentRestrictedException)):
        return HTTPException(status_code=403, detail=str(e))
    logger.error(f"Unmapped application error: {e}")
    return HTTPException(status_code=500, detail="Something went wrong")


def badge_list(badges) -> List[BadgeResponse]:
    return [BadgeResponse.model_validate(badge) for badge in badges]


# Health check (no auth required)
@app.get("/")
async def root():
    return {"message": "Horizon Missions API", "status": "active"}


# ===== PROFILE & STATS =====

@app.get("/api/profile", response_model=ProfileResponse, dependencies=[Depends(verify_api_key)])
def get_profile(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Get the caller's profile with earned badges"""
    profile = ProfileService(db).get_profile(user_id)
    response = ProfileResponse.model_validate(profile)
    response.badges = badge_list(BadgeService(db).get_badges(user_id))
    return response


@app.put("/api/profile", response_model=ProfileResponse, dependencies=[Depends(verify_api_key)])
def update_profile(
    profile_update: ProfileUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Update display data (plan is managed by billing, not here)"""
    profile = ProfileService(db).update_profile(user_id, profile_update)
    response = ProfileResponse.model_validate(profile)
    response.badges = badge_list(BadgeService(db).get_badges(user_id))
    return response


@app.get("/api/profile/badges", response_model=List[BadgeResponse], dependencies=[Depends(verify_api_key)])
def get_badges(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return badge_list(BadgeService(db).get_badges(user_id))


@app.get("/api/stats", response_model=UserStatsResponse, dependencies=[Depends(verify_api_key)])
def get_stats(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Get XP/coin totals and streak"""
    ProfileService(db).get_profile(user_id)
    stats = UserStatsRepository.get(db, user_id)
    response = UserStatsResponse.model_validate(stats)
    response.current_streak = StreakService.current_streak(stats, PeriodService.today())
    return response


# ===== MISSIONS =====

@app.get("/api/missions", response_model=List[MissionResponse], dependencies=[Depends(verify_api_key)])
def get_missions(
    include_inactive: bool = False,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get missions (active only unless include_inactive)"""
    return MissionService(db).get_missions(user_id, include_inactive)


@app.post("/api/missions", response_model=MissionResponse, status_code=status.HTTP_201_CREATED, dependencies=[Depends(verify_api_key)])
def create_mission(
    mission: MissionCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Create a new mission"""
    try:
        return MissionService(db).create_mission(user_id, mission)
    except HorizonException as e:
        raise to_http_exception(e)


@app.post("/api/missions/roll", response_model=RollResponse, dependencies=[Depends(verify_api_key)])
def roll_mission_instances(
    roll: RollRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Create this period's instances for every active mission of a cadence"""
    try:
        result = MissionService(db).roll_instances(user_id, roll.cadence.value)
    except HorizonException as e:
        raise to_http_exception(e)
    return {"success": True, **result}


@app.get("/api/missions/instances", response_model=List[MissionInstanceResponse], dependencies=[Depends(verify_api_key)])
def get_mission_instances(
    cadence: Cadence = Cadence.DAILY,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get the caller's instances for the current period of a cadence"""
    return MissionService(db).get_instances(user_id, cadence.value)


@app.post("/api/missions/instances/{instance_id}/complete", response_model=MissionInstanceResponse, dependencies=[Depends(verify_api_key)])
def complete_mission_instance(
    instance_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Mark an available instance as completed"""
    try:
        return MissionService(db).complete_instance(user_id, instance_id)
    except HorizonException as e:
        raise to_http_exception(e)


@app.post("/api/missions/instances/{instance_id}/claim", response_model=ClaimResponse, dependencies=[Depends(verify_api_key)])
def claim_mission_rewards(
    instance_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Claim XP and coins for a completed instance"""
    try:
        result = MissionService(db).claim_instance(user_id, instance_id)
    except HorizonException as e:
        raise to_http_exception(e)

    stats = UserStatsResponse.model_validate(result.stats)
    stats.current_streak = StreakService.current_streak(result.stats, PeriodService.today())
    return ClaimResponse(
        instance=MissionInstanceResponse.model_validate(result.instance),
        xp_awarded=result.completion.xp_awarded,
        coins_awarded=result.completion.coins_awarded,
        stats=stats,
        new_badges=badge_list(result.new_badges),
    )


@app.get("/api/missions/{mission_id}", response_model=MissionResponse, dependencies=[Depends(verify_api_key)])
def get_mission(
    mission_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    try:
        return MissionService(db).get_mission(user_id, mission_id)
    except HorizonException as e:
        raise to_http_exception(e)


@app.put("/api/missions/{mission_id}", response_model=MissionResponse, dependencies=[Depends(verify_api_key)])
def update_mission(
    mission_id: int,
    mission_update: MissionUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    try:
        return MissionService(db).update_mission(user_id, mission_id, mission_update)
    except HorizonException as e:
        raise to_http_exception(e)


@app.delete("/api/missions/{mission_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(verify_api_key)])
def deactivate_mission(
    mission_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Deactivate a mission (soft delete)"""
    try:
        MissionService(db).deactivate_mission(user_id, mission_id)
    except HorizonException as e:
        raise to_http_exception(e)


# ===== CHECK-INS =====

@app.get("/api/checkins", response_model=List[CheckinResponse], dependencies=[Depends(verify_api_key)])
def get_checkins(
    limit: int = Query(50, ge=1, le=500),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    return CheckinService(db).get_checkins(user_id, limit)


@app.post("/api/checkins", response_model=CheckinResult, status_code=status.HTTP_201_CREATED, dependencies=[Depends(verify_api_key)])
def log_checkin(
    checkin: CheckinCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Log a win against a mission"""
    try:
        result = CheckinService(db).log_checkin(user_id, checkin.mission_id, checkin.note)
    except HorizonException as e:
        raise to_http_exception(e)

    return CheckinResult(
        checkin=CheckinResponse.model_validate(result["checkin"]),
        mission_level=result["mission"].level,
        leveled_up=result["leveled_up"],
        new_badges=badge_list(result["new_badges"]),
    )


# ===== DAILY PULSE =====

@app.get("/api/daily-entries/today", response_model=Optional[DailyEntryResponse], dependencies=[Depends(verify_api_key)])
def get_today_entry(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Get today's daily pulse entry, if any"""
    return DailyEntryService(db).get_entry(user_id)


@app.get("/api/daily-entries", response_model=List[DailyEntryResponse], dependencies=[Depends(verify_api_key)])
def get_daily_entries(
    limit: int = Query(30, ge=1, le=365),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    return DailyEntryService(db).get_recent_entries(user_id, limit)


@app.put("/api/daily-entries/{target_date}", response_model=DailyEntryResult, dependencies=[Depends(verify_api_key)])
def upsert_daily_entry(
    target_date: date,
    entry: DailyEntryUpsert,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Create or update the daily pulse entry for a date (YYYY-MM-DD)"""
    ProfileService(db).get_profile(user_id)
    try:
        result = DailyEntryService(db).upsert_entry(user_id, target_date, entry)
    except HorizonException as e:
        raise to_http_exception(e)

    return DailyEntryResult(
        entry=DailyEntryResponse.model_validate(result["entry"]),
        new_badges=badge_list(result["new_badges"]),
    )


# ===== MENTOR NOTES =====

@app.get("/api/mentor-notes", response_model=List[MentorNoteResponse], dependencies=[Depends(verify_api_key)])
def get_mentor_notes(
    limit: int = Query(50, ge=1, le=500),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    return MentorNoteService(db).get_notes(user_id, limit)


@app.post("/api/mentor-notes", response_model=MentorNoteResponse, status_code=status.HTTP_201_CREATED, dependencies=[Depends(verify_api_key)])
def create_mentor_note(
    note: MentorNoteCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    try:
        return MentorNoteService(db).add_note(user_id, note.note, note.tags)
    except HorizonException as e:
        raise to_http_exception(e)


# ===== ADMIN: DEMO DATA =====

@app.post("/api/admin/seed-demo-data", response_model=DemoDataResponse, dependencies=[Depends(verify_api_key)])
def seed_demo_data(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Replace the caller's data with demo data (admin only, never in production)"""
    try:
        counts = DemoDataService(db).seed(user_id)
    except HorizonException as e:
        raise to_http_exception(e)
    return {"success": True, "message": "Demo data seeded successfully", "data": counts}


@app.post("/api/admin/reset-demo-data", response_model=DemoDataResponse, dependencies=[Depends(verify_api_key)])
def reset_demo_data(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Delete all of the caller's data (admin only, never in production)"""
    try:
        deleted = DemoDataService(db).reset(user_id)
    except HorizonException as e:
        raise to_http_exception(e)
    return {"success": True, "message": "All demo data has been reset", "data": deleted}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("horizon.main:app", host="0.0.0.0", port=8000, reload=False)
