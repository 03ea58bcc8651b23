"""Portal authentication: cookie backend and user model."""

from portal.auth.backend import SESSION_COOKIE, SessionCookieBackend
from portal.auth.models import AuthenticatedAccount

__all__ = ["SESSION_COOKIE", "AuthenticatedAccount", "SessionCookieBackend"]
