"""Data access layer: repository interfaces consumed by the protocol core and the portal."""

from shared.dal.account_repository import AccountRepository
from shared.dal.profile_repository import ProfileRepository
from shared.dal.session_repository import SessionRepository
from shared.dal.texture_repository import TextureRepository

__all__ = [
    "AccountRepository",
    "ProfileRepository",
    "SessionRepository",
    "TextureRepository",
]
