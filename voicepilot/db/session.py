"""
Database session management - SQLAlchemy engine and session factory.
This module provides the database connection used by the durable key-value store.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from voicepilot.core.config import settings

# ---------------------------------------------------------------------------
# DATABASE ENGINE
# ---------------------------------------------------------------------------
# pool_pre_ping=True: check a pooled connection is alive before handing it out.
# SQLite needs check_same_thread=False because FastAPI may touch the store
# from a worker thread while the event loop owns the connection.
_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args,
)

# ---------------------------------------------------------------------------
# SESSION FACTORY
# ---------------------------------------------------------------------------
# SessionLocal is a class (factory), not an instance. Call SessionLocal() to get a session.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    """Create all tables that do not exist yet."""
    from voicepilot.db.base import Base
    from voicepilot.models import kv_entry  # noqa: F401  (registers the table)

    Base.metadata.create_all(bind=engine)
