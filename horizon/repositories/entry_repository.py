"""
Entry repository - Data access layer for daily entries, check-ins and mentor notes.
"""
from datetime import date, datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from horizon.database import insert_or_ignore
from horizon.models import DailyEntry, Checkin, MentorNote


class DailyEntryRepository:
    """Repository for DailyEntry data access"""

    @staticmethod
    def get_by_date(db: Session, user_id: str, target_date: date) -> Optional[DailyEntry]:
        return db.query(DailyEntry).filter(
            DailyEntry.user_id == user_id,
            DailyEntry.date == target_date
        ).first()

    @staticmethod
    def get_or_create(db: Session, user_id: str, target_date: date) -> DailyEntry:
        """Get the entry for a date, inserting an empty one if missing. Does not commit."""
        insert_or_ignore(
            db, DailyEntry, {"user_id": user_id, "date": target_date, "completed": False},
            ["user_id", "date"]
        )
        return db.query(DailyEntry).filter(
            DailyEntry.user_id == user_id,
            DailyEntry.date == target_date
        ).populate_existing().one()

    @staticmethod
    def get_recent(db: Session, user_id: str, limit: int = 30) -> List[DailyEntry]:
        return db.query(DailyEntry).filter(
            DailyEntry.user_id == user_id
        ).order_by(DailyEntry.date.desc()).limit(limit).all()

    @staticmethod
    def get_recent_completed_dates(db: Session, user_id: str, limit: int) -> List[date]:
        """Dates of the most recent completed entries, newest first"""
        rows = db.query(DailyEntry.date).filter(
            DailyEntry.user_id == user_id,
            DailyEntry.completed == True
        ).order_by(DailyEntry.date.desc()).limit(limit).all()
        return [row.date for row in rows]


class CheckinRepository:
    """Repository for Checkin data access"""

    @staticmethod
    def create(db: Session, checkin: Checkin) -> Checkin:
        db.add(checkin)
        db.flush()
        return checkin

    @staticmethod
    def get_recent(db: Session, user_id: str, limit: int = 50) -> List[Checkin]:
        return db.query(Checkin).filter(
            Checkin.user_id == user_id
        ).order_by(Checkin.occurred_at.desc(), Checkin.id.desc()).limit(limit).all()


class MentorNoteRepository:
    """Repository for MentorNote data access"""

    @staticmethod
    def create(db: Session, note: MentorNote) -> MentorNote:
        db.add(note)
        db.commit()
        db.refresh(note)
        return note

    @staticmethod
    def get_recent(db: Session, user_id: str, limit: int = 50) -> List[MentorNote]:
        return db.query(MentorNote).filter(
            MentorNote.user_id == user_id
        ).order_by(MentorNote.created_at.desc(), MentorNote.id.desc()).limit(limit).all()

    @staticmethod
    def count_in_range(db: Session, user_id: str, start: datetime, end: datetime) -> int:
        return db.query(MentorNote).filter(
            MentorNote.user_id == user_id,
            MentorNote.created_at >= start,
            MentorNote.created_at < end
        ).count()
