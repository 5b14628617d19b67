"""
Double Assistant — Centralized configuration.

Loads all settings from .env and validates required keys.
Core modules take plain parameters and never import this module; only the
adapters and the chat front end read `settings`.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

# Load .env from project root (two levels up from double_assistant/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Telegram
    TELEGRAM_BOT_TOKEN: str

    # SQLite session store
    DATABASE_PATH: str = "data/double.db"

    # Security (empty → anyone may chat with the bot)
    ALLOWED_USER_IDS: list[int] = []

    # Conversation pacing
    REPLY_DELAY_SECONDS: float = 0.8        # "typing" pause before a reply
    FOLLOW_UP_DELAY_SECONDS: float = 1.5    # pause before follow-up messages

    # Tasks & reminders
    TASK_DUE_HOURS: int = 24
    REMINDER_OFFSET_SECONDS: int = 60       # placeholder fire time for new alarms

    # Daily check-ins
    MORNING_CHECKIN_HOUR: int = 8
    EVENING_CHECKIN_HOUR: int = 20
    TIMEZONE: str = "UTC"

    @field_validator("ALLOWED_USER_IDS", mode="before")
    @classmethod
    def parse_user_ids(cls, v: str | list[int]) -> list[int]:
        if isinstance(v, list):
            return v
        if isinstance(v, str) and v.strip():
            return [int(uid.strip()) for uid in v.split(",") if uid.strip()]
        return []

    @field_validator("MORNING_CHECKIN_HOUR", "EVENING_CHECKIN_HOUR", mode="before")
    @classmethod
    def parse_hour(cls, v: str | int) -> int:
        hour = int(v)
        if not 0 <= hour <= 23:
            raise ValueError(f"Hour out of range: {hour}")
        return hour


def _load_settings() -> Settings:
    """Load settings from environment, validating required keys."""
    token = os.getenv("TELEGRAM_BOT_TOKEN", "")

    if not token or token.startswith("your-"):
        print("ERROR: TELEGRAM_BOT_TOKEN is missing or not set in .env", file=sys.stderr)
        sys.exit(1)

    return Settings(
        TELEGRAM_BOT_TOKEN=token,
        DATABASE_PATH=os.getenv("DATABASE_PATH", "data/double.db"),
        ALLOWED_USER_IDS=os.getenv("ALLOWED_USER_IDS", ""),
        REPLY_DELAY_SECONDS=os.getenv("REPLY_DELAY_SECONDS", "0.8"),
        FOLLOW_UP_DELAY_SECONDS=os.getenv("FOLLOW_UP_DELAY_SECONDS", "1.5"),
        TASK_DUE_HOURS=os.getenv("TASK_DUE_HOURS", "24"),
        REMINDER_OFFSET_SECONDS=os.getenv("REMINDER_OFFSET_SECONDS", "60"),
        MORNING_CHECKIN_HOUR=os.getenv("MORNING_CHECKIN_HOUR", "8"),
        EVENING_CHECKIN_HOUR=os.getenv("EVENING_CHECKIN_HOUR", "20"),
        TIMEZONE=os.getenv("TIMEZONE", "UTC"),
    )


# Singleton — imported by adapters as:
#   from double_assistant.config import settings
settings = _load_settings()
