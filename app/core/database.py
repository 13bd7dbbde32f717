import sqlite3
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from app.core.config import settings

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using them
    pool_size=10,  # Connection pool size
    max_overflow=20  # Allow up to 20 connections beyond pool_size
)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()

# SQLSTATE codes for the constraint violations the CRUD layer translates
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
CHECK_VIOLATION = "23514"
NOT_NULL_VIOLATION = "23502"


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores REFERENCES / ON DELETE CASCADE unless asked per connection."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session):
    """
    Unit of work around a group of statements.

    Commits when the block finishes, rolls back and re-raises on any error,
    so multi-step writes (row + technology links) land together or not at all.

    Usage:
        with transaction(db):
            db.execute(text("DELETE FROM jobs_tech WHERE job_id = :id"), {"id": 1})
            db.execute(text("INSERT INTO jobs_tech ..."), params)
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def integrity_error_code(err: IntegrityError) -> Optional[str]:
    """
    Classify a constraint violation as a SQLSTATE code.

    psycopg2 exposes the code directly; SQLite only reports it in the message.
    Returns None when the violation is not one we translate.
    """
    orig = err.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code:
        return code

    message = str(orig).upper()
    if "UNIQUE CONSTRAINT" in message or "PRIMARY KEY" in message:
        return UNIQUE_VIOLATION
    if "FOREIGN KEY CONSTRAINT" in message:
        return FOREIGN_KEY_VIOLATION
    if "CHECK CONSTRAINT" in message:
        return CHECK_VIOLATION
    if "NOT NULL CONSTRAINT" in message:
        return NOT_NULL_VIOLATION
    return None


def init_db():
    """
    Initialize database.

    Imports the models so every table is registered on Base.metadata, then
    creates any missing tables when AUTO_CREATE_TABLES is enabled.
    """
    from app.models import company, job, technology, user  # Import models to register them
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
