"""Failed-credential counter keyed by the login address."""

import structlog

from shared.cache import ExpiringCache

DEFAULT_MAX_FAILURES = 4
DEFAULT_WINDOW_SECONDS = 60

logger = structlog.get_logger()


class CredentialRateLimiter:
    """Blocks a login key after max_failures rejected attempts.

    Every rejected attempt, including one refused because the key is
    already blocked, bumps the counter and re-arms the window, so a key
    unblocks only after window_seconds without further attempts.
    Successful logins leave the counter alone.
    """

    def __init__(
        self,
        max_failures: int = DEFAULT_MAX_FAILURES,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
    ) -> None:
        self._max_failures = max_failures
        self._window_seconds = window_seconds
        self._failures = ExpiringCache()

    def is_blocked(self, key: str) -> bool:
        return self.failures(key) >= self._max_failures

    def failures(self, key: str) -> int:
        return self._failures.get(key) or 0

    def record_failure(self, key: str) -> None:
        count = self.failures(key) + 1
        self._failures.set(key, count, self._window_seconds)
        if count == self._max_failures:
            logger.info("credential key blocked", failures=count, window_seconds=self._window_seconds)
