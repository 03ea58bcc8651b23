"""Account models, password hashing and portal sessions shared by both services."""

from shared.auth.models import Account, PortalSession, Profile, Session, SessionStatus, SkinModel, TextureKind
from shared.auth.password import PasswordHasher, get_hasher
from shared.auth.session_store import PortalSessionStore

__all__ = [
    "Account",
    "PasswordHasher",
    "PortalSession",
    "PortalSessionStore",
    "Profile",
    "Session",
    "SessionStatus",
    "SkinModel",
    "TextureKind",
    "get_hasher",
]
