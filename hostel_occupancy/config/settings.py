"""
Environment configuration for the hostel occupancy service.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

import json
from typing import List, Optional, Union
from pathlib import Path
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application configuration
    APP_NAME: str = "Hostel Occupancy Service"
    API_VERSION: str = "v1"
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    CORS_ORIGINS: List[str] = Field(default=["*"])

    # Database configuration
    DATABASE_URL: str = "sqlite:///./hostel_occupancy.db"
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 20
    DB_POOL_OVERFLOW: int = 10

    # Monitoring and logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"
    LOG_DIR: Optional[str] = None

    # Room allocation policy
    DEFAULT_CAPACITY_PER_ROOM: int = Field(default=3, ge=1)
    DEFAULT_NUMBER_OF_BLOCKS: int = Field(default=5, ge=1)
    ROOM_NUMBER_PAD_WIDTH: int = Field(default=2, ge=1)
    PLACEHOLDER_NAME: str = "To Be Alloted"
    PLACEHOLDER_MARKER: str = "-"
    # None keeps overflow unbounded; 2.0 would cap a room at twice its capacity
    ROOM_OVERFLOW_FACTOR: Optional[float] = Field(default=None, ge=1.0)

    # Cascade policy
    BATCH_LOG_CLEANUP_LIMIT: int = Field(default=50, ge=1)
    AUDIT_LEGACY_TEXT_MATCH: bool = True

    # Fees
    CHALLAN_PREFIX: str = "CH"
    CHALLAN_GRACE_DAYS: int = 20
    CHALLAN_CANCEL_AFTER_DAYS: int = 20
    DEFAULT_MAX_SEMESTERS: int = 8
    EXTENDED_MAX_SEMESTERS: int = 10
    EXTENDED_PROGRAM_PATTERN: str = r"doctor of veterinary medicine|dvm"

    # Validators
    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse CORS_ORIGINS from string to list"""
        if isinstance(v, str):
            # Handle JSON string format from .env
            if v.startswith('[') and v.endswith(']'):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator('LOG_FORMAT')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        value = v.lower()
        if value not in ("text", "json"):
            raise ValueError("LOG_FORMAT must be 'text' or 'json'")
        return value

    def is_sqlite(self) -> bool:
        """Check if the configured database is SQLite"""
        return self.DATABASE_URL.startswith("sqlite")

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT == "production"

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.ENVIRONMENT == "development"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
