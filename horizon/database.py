from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from horizon.constants import DATABASE_URL

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Yield a database session and close it when the request is done"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def insert_or_ignore(db, model, values: dict, index_elements: list) -> bool:
    """
    Insert one row, doing nothing if it collides with a unique constraint.

    Uses the dialect's ON CONFLICT DO NOTHING so concurrent inserts of the
    same key never raise. Does not commit.

    Returns:
        True if the row was inserted, False if it already existed
    """
    if db.get_bind().dialect.name == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    else:
        from sqlalchemy.dialects.sqlite import insert

    stmt = insert(model.__table__).values(**values).on_conflict_do_nothing(
        index_elements=index_elements
    )
    result = db.execute(stmt)
    return result.rowcount == 1
