"""
OAuth token cache
Holds a single bearer token and the moment it should stop being used.
"""

import threading
import time
from typing import Callable, Optional


class TokenCache:
    """Single-slot access token cache owned by one provider instance."""

    def __init__(self, safety_margin: int = 300, clock: Callable[[], float] = time.time):
        self.safety_margin = safety_margin
        self.lock = threading.Lock()
        self._clock = clock
        self._token: Optional[str] = None
        self._expires_at: float = 0.0

    def get(self) -> Optional[str]:
        """Return the cached token, or None when empty or past its renewal point."""
        if self._token and self._clock() < self._expires_at:
            return self._token
        return None

    def store(self, token: str, expires_in: int) -> None:
        """Cache token, renewing safety_margin seconds before the reported expiry."""
        self._token = token
        self._expires_at = self._clock() + expires_in - self.safety_margin

    def clear(self) -> None:
        self._token = None
        self._expires_at = 0.0

    @property
    def expires_at(self) -> float:
        return self._expires_at
