"""Accounts, profiles and session records shared by the protocol server and the portal."""

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel

DEFAULT_LOCALE = "en_US"


class SessionStatus(StrEnum):
    """Lifecycle of a protocol session. Moves forward only."""

    VALID = "valid"
    TEMPORARILY_INVALID = "temporarily_invalid"
    INVALID = "invalid"


class TextureKind(StrEnum):
    SKIN = "skin"
    CAPE = "cape"


class SkinModel(StrEnum):
    DEFAULT = "default"
    SLIM = "slim"


class Account(BaseModel, frozen=True):
    """Login identity. Owns profiles and sessions; deleting it cascades to both."""

    account_id: str
    email: str
    password_hash: str
    locale: str = DEFAULT_LOCALE


class Profile(BaseModel, frozen=True):
    """In-game persona. The id never changes; the name is unique system-wide."""

    profile_id: str
    name: str
    account_id: str
    skin_hash: str = ""  # empty when no skin is set
    cape_hash: str = ""  # empty when no cape is set
    slim: bool = False

    @property
    def skin_model(self) -> SkinModel:
        return SkinModel.SLIM if self.slim else SkinModel.DEFAULT


@dataclass(frozen=True)
class Session:
    """Access/client token pair persisted by the token ledger."""

    access_token: str  # primary key, high-entropy secret
    client_token: str  # stable across refreshes
    account_id: str
    profile_id: str | None
    created_at: float  # time.time()
    status: SessionStatus


@dataclass(frozen=True)
class SessionView:
    """The part of a VALID session that protocol operations may act on."""

    access_token: str
    client_token: str
    account_id: str
    profile_id: str | None


@dataclass
class PortalSession:
    """Cookie session of a user signed in to the account portal."""

    session_id: str
    account_id: str
    email: str
    created_at: float
    expires_at: float
