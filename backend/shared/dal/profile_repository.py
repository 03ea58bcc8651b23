"""Abstract interface for profile persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.auth.models import Profile


class ProfileRepository(ABC):
    """Profiles keyed by id, unique by name, owned by an account.

    Mutators return False when no profile matched (or, for rename, when
    the new name is already taken).
    """

    @abstractmethod
    async def create_profile(self, profile: Profile) -> None:
        """Insert a profile. Raise ValueError if the id or name is taken."""

    @abstractmethod
    async def get_by_id(self, profile_id: str) -> Profile | None: ...

    @abstractmethod
    async def get_by_name(self, name: str) -> Profile | None: ...

    @abstractmethod
    async def list_for_account(self, account_id: str) -> list[Profile]: ...

    @abstractmethod
    async def rename(self, profile_id: str, name: str) -> bool: ...

    @abstractmethod
    async def set_skin(self, profile_id: str, skin_hash: str, *, slim: bool) -> bool: ...

    @abstractmethod
    async def set_cape(self, profile_id: str, cape_hash: str) -> bool: ...

    @abstractmethod
    async def delete_profile(self, profile_id: str) -> bool: ...
