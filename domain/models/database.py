"""
Database configuration and session management.
"""

import logging
import sqlite3
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import settings
from security.secret_source import SecretSource

logger = logging.getLogger("mealplanner.database")

# Create SQLAlchemy Base
Base = declarative_base()


def resolve_database_url(secrets: SecretSource = None) -> str:
    """DATABASE_URL (may carry credentials) wins over the non-secret local default."""
    secrets = secrets or SecretSource.from_environment(env_file=".env")
    return secrets.get("DATABASE_URL", required=False, default=settings.local_database_url)


def build_engine(url: str) -> Engine:
    """Create an engine; SQLite connections get foreign keys enabled."""
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=settings.db_echo, future=True, connect_args=connect_args)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # ON DELETE CASCADE is a no-op in SQLite unless enabled per connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Create engine
engine = build_engine(resolve_database_url())

# Create session factory
SessionLocal = sessionmaker(bind=engine, autoflush=False, future=True)


def init_database(bind: Engine = None):
    """Initialize database schema"""
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables created successfully")


def get_db_session():
    """Get database session (for FastAPI dependency injection)"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
