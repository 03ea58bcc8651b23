"""Starlette AuthenticationBackend that validates the portal session cookie."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.authentication import AuthCredentials, AuthenticationBackend

from portal.auth.models import AuthenticatedAccount

if TYPE_CHECKING:
    from starlette.requests import HTTPConnection

    from portal.service import AccountService

SESSION_COOKIE = "session_id"


class SessionCookieBackend(AuthenticationBackend):
    def __init__(self, account_service: AccountService) -> None:
        self._account_service = account_service

    async def authenticate(
        self,
        conn: HTTPConnection,
    ) -> tuple[AuthCredentials, AuthenticatedAccount] | None:
        session = self._account_service.validate_session(conn.cookies.get(SESSION_COOKIE))
        if session is None:
            return None
        return AuthCredentials(["authenticated"]), AuthenticatedAccount(
            account_id=session.account_id,
            email=session.email,
            session_id=session.session_id,
        )
