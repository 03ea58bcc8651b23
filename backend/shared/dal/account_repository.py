"""Abstract interface for account persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.auth.models import Account


class AccountRepository(ABC):
    """Accounts keyed by id, unique by email."""

    @abstractmethod
    async def create_account(self, account: Account) -> None:
        """Insert an account. Raise ValueError if the id or email is taken."""

    @abstractmethod
    async def get_by_id(self, account_id: str) -> Account | None: ...

    @abstractmethod
    async def get_by_email(self, email: str) -> Account | None: ...

    @abstractmethod
    async def delete_account(self, account_id: str) -> bool:
        """Delete an account with its profiles and sessions. Return False if it did not exist."""
