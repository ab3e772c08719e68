"""Database Configuration and Connection Management Module

This module handles database connectivity, session management, and table operations
for the interview service. It provides a PostgreSQL connection with connection
pooling and falls back to a local SQLite file when no database is configured.

Dependencies:
- sqlalchemy: For database ORM and connection management.
- dotenv: For environment variable loading.
- loguru: For logging operations.
- app.models.career_models: For database model definitions.

Author: @kcaparas1630
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from dotenv import load_dotenv
import os
from loguru import logger
from app.models.career_models import Base
load_dotenv()

def _build_database_url() -> str:
    """Resolve the database URL from DATABASE_URL or the individual DB_* variables."""
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    required_vars = {
        "DB_USER": os.getenv("DB_USER"),
        "DB_PASSWORD": os.getenv("DB_PASSWORD"),
        "DB_HOST": os.getenv("DB_HOST"),
        "DB_PORT": os.getenv("DB_PORT"),
        "DB_NAME": os.getenv("DB_NAME"),
    }
    missing_vars = [var for var, value in required_vars.items() if not value]
    if missing_vars:
        logger.warning(f"Missing database environment variables ({', '.join(missing_vars)}); using local SQLite database")
        return "sqlite:///./career_assistant.db"

    return (
        f"postgresql+psycopg2://{required_vars['DB_USER']}:{required_vars['DB_PASSWORD']}"
        f"@{required_vars['DB_HOST']}:{required_vars['DB_PORT']}/{required_vars['DB_NAME']}?sslmode=require"
    )

DATABASE_URL = _build_database_url()

if DATABASE_URL.startswith("sqlite"):
    engine = create_engine(
        DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
    )
else:
    engine = create_engine(
        DATABASE_URL,
        echo=False, # Log SQL queries for debugging
        pool_pre_ping=True, # verify connections before using
        pool_recycle=300 # Recycle connections every 5 minutes
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db_session():
    """FastAPI dependency for database session management.

    Creates a new database session for each request and ensures proper
    cleanup after the request is completed.

    Yields:
        Session: SQLAlchemy database session

    Example:
        @app.get("/jobs")
        async def get_jobs(db: Session = Depends(get_db_session)):
            return db.query(Job).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_session_factory() -> sessionmaker:
    """FastAPI dependency returning the session factory (for components that open their own sessions)."""
    return SessionLocal

def create_tables():
    """Create all database tables defined in the models.

    Uses SQLAlchemy's metadata to create all tables that don't already exist.
    This is typically called during application startup.

    Raises:
        Exception: If table creation fails
    """
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating database table: {e}")
        raise
