"""Abstract interface for protocol session persistence.

Only the token ledger talks to this interface; it owns the state machine
and decides which transitions are legal.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.auth.models import Session, SessionStatus


class SessionRepository(ABC):
    @abstractmethod
    async def insert(self, session: Session) -> None: ...

    @abstractmethod
    async def get(self, access_token: str) -> Session | None: ...

    @abstractmethod
    async def attach_profile(self, access_token: str, profile_id: str) -> bool:
        """Set the profile only if the session is VALID and has none yet."""

    @abstractmethod
    async def set_status(self, access_token: str, status: SessionStatus) -> bool: ...

    @abstractmethod
    async def set_status_for_account(self, account_id: str, status: SessionStatus) -> int: ...

    @abstractmethod
    async def demote_valid_for_profile(self, profile_id: str, status: SessionStatus) -> int:
        """Move every VALID session holding the profile to status. Return the count."""

    @abstractmethod
    async def delete_created_before(self, cutoff: float) -> int: ...
