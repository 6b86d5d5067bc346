"""
Configuration package for the hostel occupancy service.

This package contains the configuration modules for the application,
including environment settings, database connections and logging.
"""

from hostel_occupancy.config.settings import settings, get_settings
from hostel_occupancy.config.database import get_db_session, SessionLocal

__all__ = ['settings', 'get_settings', 'get_db_session', 'SessionLocal']
