"""Protocol core: token ledger, join tickets, profile signing, and the operation engine."""

from yggdrasil.core.engine import AuthProtocolEngine
from yggdrasil.core.errors import (
    IllegalArgument,
    InvalidCredentials,
    InvalidToken,
    ProtocolError,
    RateLimited,
    TooManyProfiles,
)
from yggdrasil.core.join_tickets import JoinTicketCache
from yggdrasil.core.rate_limit import CredentialRateLimiter
from yggdrasil.core.signing import ProfileSigner, load_signing_key
from yggdrasil.core.tokens import TokenLedger

__all__ = [
    "AuthProtocolEngine",
    "CredentialRateLimiter",
    "IllegalArgument",
    "InvalidCredentials",
    "InvalidToken",
    "JoinTicketCache",
    "ProfileSigner",
    "ProtocolError",
    "RateLimited",
    "TokenLedger",
    "TooManyProfiles",
    "load_signing_key",
]
