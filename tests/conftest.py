"""Shared test fixtures and configuration.

Sets up fake environment variables so double_assistant.config doesn't
sys.exit(), and provides common fixtures like a temp DB and a fixed clock.
"""

import os

# Patch env vars BEFORE any double_assistant imports
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "fake-token-for-tests")
os.environ.setdefault("ALLOWED_USER_IDS", "12345")
os.environ.setdefault("DATABASE_PATH", ":memory:")
os.environ.setdefault("REPLY_DELAY_SECONDS", "0")
os.environ.setdefault("FOLLOW_UP_DELAY_SECONDS", "0")

import pytest
from datetime import datetime, timezone


FIXED_NOW = datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)


def first_choice(options):
    """Deterministic stand-in for random.choice."""
    return options[0]


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def tmp_db_path(tmp_path):
    """Return a temporary SQLite DB path."""
    return str(tmp_path / "test_double.db")


@pytest.fixture
def session_db(tmp_db_path):
    """Return a SessionDB for chat key "12345" backed by a temp file."""
    from double_assistant.data.db import SessionDB
    return SessionDB("12345", db_path=tmp_db_path)


@pytest.fixture
def session():
    """An empty session that has not been through setup."""
    from double_assistant.data.models import Session
    return Session()


@pytest.fixture
def named_session():
    """A session whose setup is finished, in normal mode."""
    from double_assistant.data.models import ConversationMode, Session
    return Session(user_name="Sam", is_setup=True, mode=ConversationMode.NORMAL)


@pytest.fixture
def choose():
    """Chooser that always picks the first template variant."""
    return first_choice
