# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration, all env-driven.
Single source of truth for every tunable parameter.
"""

import os
from pathlib import Path

_PACKAGE_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "card-draw-service")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "8005"))

    # Empty URL selects the in-memory assignment store.
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
    DB_MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    DB_POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "300"))

    DATA_DIR: Path = Path(os.getenv("DATA_DIR", str(_PACKAGE_DATA_DIR)))
    CARDS_FILE: str = os.getenv("CARDS_FILE", "cards.json")
    MEMBERS_FILE: str = os.getenv("MEMBERS_FILE", "members.json")
    RESTRICTIONS_FILE: str = os.getenv("RESTRICTIONS_FILE", "restrictions.json")

    MULTI_CAPACITY_ROLE_ID: str = os.getenv("MULTI_CAPACITY_ROLE_ID", "lanche")
    MULTI_CAPACITY: int = int(os.getenv("MULTI_CAPACITY", "3"))
    # 0=Monday .. 6=Sunday; empty means "same weekday as the requested date".
    # Parsed and range-checked by catalog.parse_reference_weekday at startup.
    REFERENCE_WEEKDAY: str = os.getenv("REFERENCE_WEEKDAY", "").strip()

    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "change-me")
    FACILITATOR: str = os.getenv("FACILITATOR", "Richard")
    MEETING_TIME: str = os.getenv("MEETING_TIME", "17:00")

    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def cards_path(self) -> Path:
        return self.DATA_DIR / self.CARDS_FILE

    @property
    def members_path(self) -> Path:
        return self.DATA_DIR / self.MEMBERS_FILE

    @property
    def restrictions_path(self) -> Path:
        return self.DATA_DIR / self.RESTRICTIONS_FILE


settings = Settings()
