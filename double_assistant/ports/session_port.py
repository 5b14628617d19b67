"""Session store port — abstract load/save boundary.

Core modules depend on this protocol, never on a specific storage backend.
A failed save must not break the conversation: implementations report it by
returning False and the in-memory Session stays authoritative.
"""

from __future__ import annotations

from typing import Protocol

from double_assistant.data.models import Session


class SessionStorePort(Protocol):
    """Abstract persistence interface used by the Assistant."""

    def load(self) -> Session | None: ...

    def save(self, session: Session) -> bool: ...
