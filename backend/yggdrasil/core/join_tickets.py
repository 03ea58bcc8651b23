"""Short-lived join tickets bridging the join and hasJoined handshake phases.

The client calls join with its access token and the server hash; the game
server then asks hasJoined with the player name and the same hash. A ticket
is not consumed by a match: the game server may ask several times during a
connection attempt, and every ask within the TTL succeeds.
"""

from shared.cache import ExpiringCache

DEFAULT_JOIN_TICKET_TTL_SECONDS = 30


class JoinTicketCache:
    def __init__(self, ttl_seconds: float = DEFAULT_JOIN_TICKET_TTL_SECONDS) -> None:
        self._ttl_seconds = ttl_seconds
        self._tickets = ExpiringCache()

    def put(self, profile_id: str, server_id: str) -> None:
        """Record that the profile is joining server_id, replacing any earlier ticket."""
        self._tickets.set(profile_id, server_id, self._ttl_seconds)

    def match(self, profile_id: str, server_id: str) -> bool:
        """True if a live ticket for the profile names server_id."""
        return self._tickets.get(profile_id) == server_id
