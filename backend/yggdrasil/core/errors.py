"""Protocol-level failures and how they appear on the wire.

Every error carries the Yggdrasil ``error`` name, the ``errorMessage`` text
and the HTTP status it is answered with. Absence (unknown player, no join
ticket) is not an error: the engine returns None and the view answers 204.
"""

from http import HTTPStatus


class ProtocolError(Exception):
    error = "ForbiddenOperationException"
    message = ""
    status_code = HTTPStatus.FORBIDDEN

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_payload(self) -> dict[str, str]:
        return {"error": self.error, "errorMessage": self.message}


class InvalidCredentials(ProtocolError):
    message = "Invalid credentials. Invalid username or password."


class RateLimited(InvalidCredentials):
    """Too many failed attempts. Indistinguishable from bad credentials on the wire."""


class InvalidToken(ProtocolError):
    message = "Invalid token."


class IllegalArgument(ProtocolError):
    error = "IllegalArgumentException"
    status_code = HTTPStatus.BAD_REQUEST


class TooManyProfiles(ProtocolError):
    error = "Forbidden"
    message = "The players requested are too many."
