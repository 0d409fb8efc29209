"""
Background scheduler.
Rolls mission instances for every user at a fixed time each day so new
periods have their instances before anyone opens the app.
"""
import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from horizon.database import SessionLocal
from horizon.repositories.profile_repository import ProfileRepository
from horizon.services.mission_service import MissionService
from horizon.constants import AUTO_ROLL_ENABLED, AUTO_ROLL_TIME, CADENCES

logger = logging.getLogger("horizon.scheduler")

scheduler = AsyncIOScheduler()


def parse_time(time_str: str) -> tuple[int, int]:
    """
    Parse "HH:MM" (or "HHMM") into (hour, minute).

    Raises:
        ValueError: the string is not a valid time
    """
    digits = (time_str or "").replace(":", "").zfill(4)
    hour, minute = int(digits[:2]), int(digits[2:])
    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise ValueError(f"Invalid time: {time_str}")
    return hour, minute


def roll_all_users(session_factory=SessionLocal) -> dict:
    """
    Roll every cadence for every profile.
    Each user gets its own session; one failure does not stop the rest.

    Returns:
        {"users": processed users, "created": instances created, "failed": failed users}
    """
    db = session_factory()
    try:
        user_ids = ProfileRepository.get_all_ids(db)
    finally:
        db.close()

    created = 0
    failed = 0
    for user_id in user_ids:
        db = session_factory()
        try:
            service = MissionService(db)
            for cadence in CADENCES:
                created += service.roll_instances(user_id, cadence)["created"]
        except Exception as e:
            failed += 1
            logger.error(f"Auto-roll failed for user={user_id}: {e}")
        finally:
            db.close()

    logger.info(f"Auto-roll finished: users={len(user_ids)} created={created} failed={failed}")
    return {"users": len(user_ids), "created": created, "failed": failed}


async def run_auto_roll():
    """Job: roll instances for all users"""
    try:
        roll_all_users()
    except Exception as e:
        logger.error(f"Scheduler Error (Auto-Roll): {e}")


def start_scheduler():
    """Start the scheduler if auto-roll is enabled"""
    if not AUTO_ROLL_ENABLED:
        logger.info("Auto-roll disabled, scheduler not started")
        return

    if not scheduler.running:
        hour, minute = parse_time(AUTO_ROLL_TIME)
        scheduler.add_job(
            run_auto_roll,
            CronTrigger(hour=hour, minute=minute),
            id="auto_roll",
            replace_existing=True
        )
        scheduler.start()
        logger.info(f"Scheduler started, auto-roll at {hour:02d}:{minute:02d}")


def stop_scheduler():
    if scheduler.running:
        scheduler.shutdown()
