"""
Access Token Cache
Process-wide single-slot cache for the Daraja bearer token
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from stkgateway.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AccessToken:
    value: str
    expires_at: float  # epoch seconds


class AccessTokenCache:
    """
    Caches one bearer token and refreshes it when it is missing or close to expiry.

    The lock is held across the refresh, so concurrent callers wait for a
    single in-flight request instead of issuing their own.
    """

    DEFAULT_MARGIN = 5

    def __init__(
            self,
            fetcher: Callable[[], Tuple[str, int]],
            margin: float = DEFAULT_MARGIN,
            clock: Callable[[], float] = time.time
    ):
        """
        Args:
            fetcher: Callable returning (token, expires_in_seconds); raises on failure
            margin: Seconds before expiry at which the token is treated as expired
            clock: Time source, epoch seconds
        """
        self._fetcher = fetcher
        self._margin = margin
        self._clock = clock
        self._token: Optional[AccessToken] = None
        self._lock = threading.Lock()

    def _is_valid(self, token: Optional[AccessToken]) -> bool:
        return token is not None and self._clock() + self._margin < token.expires_at

    def get_token(self) -> str:
        """Return a valid bearer token, fetching a new one if needed."""
        with self._lock:
            if self._is_valid(self._token):
                return self._token.value

            value, expires_in = self._fetcher()
            self._token = AccessToken(value=value, expires_at=self._clock() + expires_in)
            logger.info('Access token refreshed (expires in %ss)', expires_in)
            return value

    def invalidate(self) -> None:
        with self._lock:
            self._token = None

    def snapshot(self) -> dict:
        """Cache state for health reporting; never exposes the token itself."""
        token = self._token
        if token is None:
            return {'cached': False, 'expires_in': None}
        return {
            'cached': self._is_valid(token),
            'expires_in': max(0, int(token.expires_at - self._clock()))
        }
