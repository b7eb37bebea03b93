"""
Database configuration and session management.
"""

import logging
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from config.settings import get_settings

logger = logging.getLogger(__name__)

DATABASE_URL = get_settings().database_url
logger.info(f"Using database: {DATABASE_URL}")

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
    pool_pre_ping=True
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Dependency for FastAPI

def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db():
    """
    Initialize the database (create tables if not exist).
    """
    from models.database import Base
    Base.metadata.create_all(bind=engine)

def get_db_url() -> str:
    """
    Get the database URL.
    """
    return DATABASE_URL
