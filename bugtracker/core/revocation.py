"""In-process registry of revoked (logged-out) session tokens.

Tokens are otherwise stateless; this set is the only server-side session
state. Entries are never evicted on natural expiry, so the set grows until the
process restarts. With more than one worker process this must be replaced by a
shared key-value store whose entry TTL equals the token lifetime.
"""

import threading


class RevocationRegistry:
    """Thread-safe set of raw token strings."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._revoked: set[str] = set()

    def revoke(self, token: str) -> None:
        """Add a token to the set. Idempotent."""
        with self._lock:
            self._revoked.add(token)

    def is_revoked(self, token: str) -> bool:
        with self._lock:
            return token in self._revoked

    def clear(self) -> None:
        """Forget every revocation (tests and operational reset)."""
        with self._lock:
            self._revoked.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._revoked)


revocation_registry = RevocationRegistry()


def get_revocation_registry() -> RevocationRegistry:
    """Dependency returning the process-wide registry."""
    return revocation_registry
