"""
Shared fixtures: an in-memory SQLite database per test and small builders.
"""
import os
import tempfile

os.environ["HORIZON_DATABASE_URL"] = "sqlite://"
os.environ["HORIZON_API_KEY"] = "test-api-key"
os.environ["HORIZON_ENVIRONMENT"] = "development"
os.environ["HORIZON_AUTO_ROLL_ENABLED"] = "false"
os.environ["HORIZON_LOG_DIR"] = tempfile.mkdtemp(prefix="horizon-logs-")

import pytest
from datetime import date, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from horizon.database import Base
from horizon import models  # noqa: F401  registers tables
from horizon.models import Mission, DailyEntry, Profile, UserRole
from horizon.constants import ROLE_ADMIN


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def today():
    # A Wednesday in ISO week 3
    return date(2025, 1, 15)


@pytest.fixture
def yesterday(today):
    return today - timedelta(days=1)


@pytest.fixture
def user_id():
    return "user-1"


@pytest.fixture
def other_user_id():
    return "user-2"


@pytest.fixture
def make_mission(db_session, user_id):
    """Factory: add a mission straight to the database"""
    def _make(**overrides):
        values = {
            "user_id": user_id,
            "title": "Morning run",
            "type": "Body",
            "cadence": "daily",
            "xp": 100,
            "coins": 20,
            "active": True,
        }
        values.update(overrides)
        mission = Mission(**values)
        db_session.add(mission)
        db_session.commit()
        db_session.refresh(mission)
        return mission
    return _make


@pytest.fixture
def make_entries(db_session, user_id):
    """Factory: add completed daily entries for the given dates"""
    def _make(dates, owner=None, completed=True):
        for day in dates:
            db_session.add(DailyEntry(user_id=owner or user_id, date=day, completed=completed))
        db_session.commit()
    return _make


@pytest.fixture
def premium_user(db_session, user_id):
    db_session.add(Profile(id=user_id, subscription_plan="premium"))
    db_session.commit()
    return user_id


@pytest.fixture
def admin_user(db_session, user_id):
    db_session.add(Profile(id=user_id))
    db_session.add(UserRole(user_id=user_id, role=ROLE_ADMIN))
    db_session.commit()
    return user_id
