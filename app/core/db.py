"""
Database engine, session factory and transaction helpers
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.core.config import settings

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db() -> Iterator[Session]:
    """FastAPI dependency yielding a database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

@contextmanager
def atomic(db: Session, timeout_seconds: Optional[int] = None) -> Iterator[Session]:
    """Run a block of writes as one unit, committing on success and rolling back on error.

    On PostgreSQL the timeout is applied with ``SET LOCAL statement_timeout`` so it
    only lasts for the enclosing transaction. Other dialects ignore it.
    """
    try:
        if timeout_seconds and db.get_bind().dialect.name == "postgresql":
            db.execute(text(f"SET LOCAL statement_timeout = {int(timeout_seconds) * 1000}"))
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
