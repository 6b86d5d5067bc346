"""
Database connection settings for the hostel occupancy service.
Provides SQLAlchemy session management and connection pooling.
"""

import logging
from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from hostel_occupancy.config.settings import settings

logger = logging.getLogger(__name__)


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {
        "pool_pre_ping": True,  # Check connection before using it
        "echo": settings.DB_ECHO,
    }
    if settings.is_sqlite():
        options["connect_args"] = {"check_same_thread": False}
    else:
        options.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_POOL_OVERFLOW,
            pool_recycle=3600,  # Recycle connections after 1 hour
        )
    return options


# Configure database engine
engine = create_engine(settings.DATABASE_URL, **_engine_options())

# Create sessionmaker
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


def get_db_session() -> Generator[Session, None, None]:
    """Get database session with automatic cleanup"""
    session = SessionLocal()
    try:
        yield session
    except Exception as e:
        logger.error(f"Database session error: {str(e)}")
        session.rollback()
        raise
    finally:
        session.close()


def init_db() -> None:
    """Create all tables known to the ORM metadata"""
    from hostel_occupancy.models import Base

    Base.metadata.create_all(bind=engine)
    logger.info("Database schema initialized")
