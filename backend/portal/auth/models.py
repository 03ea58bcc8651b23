"""User model for Starlette AuthenticationMiddleware integration."""

from __future__ import annotations

from starlette.authentication import BaseUser


class AuthenticatedAccount(BaseUser):
    """Signed-in portal account, available as request.user."""

    def __init__(self, account_id: str, email: str, session_id: str) -> None:
        self._account_id = account_id
        self._email = email
        self._session_id = session_id

    @property
    def is_authenticated(self) -> bool:  # pragma: no cover
        return True

    @property
    def display_name(self) -> str:  # pragma: no cover
        return self._email

    @property
    def identity(self) -> str:  # pragma: no cover
        return self._account_id

    @property
    def account_id(self) -> str:
        return self._account_id

    @property
    def email(self) -> str:
        return self._email

    @property
    def session_id(self) -> str:
        return self._session_id
