import time
from threading import Lock


class TokenRevocationList:
    """Token ids revoked before their natural expiry.

    Entries are dropped once the token they refer to would have expired,
    so the list only ever holds live tokens. The list is per process.
    """

    def __init__(self) -> None:
        self._revoked: dict[str, float] = {}
        self._lock = Lock()

    def revoke(self, jti: str, expires_at: float) -> None:
        with self._lock:
            self._prune(time.time())
            self._revoked[jti] = expires_at

    def is_revoked(self, jti: str) -> bool:
        with self._lock:
            expires_at = self._revoked.get(jti)
            if expires_at is None:
                return False
            if expires_at <= time.time():
                del self._revoked[jti]
                return False
            return True

    def clear(self) -> None:
        with self._lock:
            self._revoked.clear()

    def _prune(self, now: float) -> None:
        expired = [jti for jti, expires_at in self._revoked.items() if expires_at <= now]
        for jti in expired:
            del self._revoked[jti]


revoked_tokens = TokenRevocationList()
