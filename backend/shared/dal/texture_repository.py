"""Abstract interface for content-addressed texture storage."""

from abc import ABC, abstractmethod


class TextureRepository(ABC):
    @abstractmethod
    async def save(self, texture_hash: str, data: bytes) -> None:
        """Insert the blob unless a blob with this hash already exists."""

    @abstractmethod
    async def get(self, texture_hash: str) -> bytes | None: ...
