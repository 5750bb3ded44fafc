"""
Spotify Token Manager Module
Owns the client-credentials access token: caching, expiry, refresh and
coalescing of concurrent refreshes.
"""

import base64
import logging
import threading
import time
from concurrent.futures import Future
from typing import Callable, Optional

import requests

from ..core.config import SPOTIFY_CONFIG, TOKEN_CONFIG, ERROR_MESSAGES
from ..core.exceptions import AuthFailure
from ..models.records import Credential

logger = logging.getLogger(__name__)


class TokenManager:
    """
    Client-credentials token cache for the Spotify accounts service.

    States: Absent (no credential), Valid, Expired (credential past
    ``expires_at - skew``) and Refreshing (an exchange is in flight). While
    Refreshing, every caller of ``get_token`` waits on the same exchange, so
    at most one token request is ever in flight.
    """

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        session: Optional[requests.Session] = None,
        auth_url: Optional[str] = None,
        timeout: Optional[int] = None,
        skew: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_delay: Optional[float] = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client_id = client_id if client_id is not None else SPOTIFY_CONFIG["CLIENT_ID"]
        self.client_secret = client_secret if client_secret is not None else SPOTIFY_CONFIG["CLIENT_SECRET"]
        self.session = session or requests.Session()
        self.auth_url = auth_url or SPOTIFY_CONFIG["AUTH_URL"]
        self.timeout = timeout or SPOTIFY_CONFIG["TIMEOUT"]
        self.skew = TOKEN_CONFIG["SKEW_SECONDS"] if skew is None else skew
        self.max_retries = TOKEN_CONFIG["MAX_RETRIES"] if max_retries is None else max_retries
        self.retry_delay = TOKEN_CONFIG["RETRY_DELAY"] if retry_delay is None else retry_delay
        self._clock = clock
        self._sleep = sleep

        self._lock = threading.Lock()
        self._credential: Optional[Credential] = None
        self._refresh: Optional[Future] = None

    @property
    def state(self) -> str:
        """Current credential state, for diagnostics."""
        with self._lock:
            if self._refresh is not None:
                return "refreshing"
            if self._credential is None:
                return "absent"
            if self._credential.is_valid(self._clock(), self.skew):
                return "valid"
            return "expired"

    def get_token(self) -> str:
        """
        Return a valid access token, exchanging credentials if needed.

        Raises:
            AuthFailure: If the exchange failed on every attempt
        """
        with self._lock:
            credential = self._credential
            if credential is not None and credential.is_valid(self._clock(), self.skew):
                return credential.access_token

            refresh = self._refresh
            is_leader = refresh is None
            if is_leader:
                refresh = Future()
                self._refresh = refresh

        if not is_leader:
            logger.debug("Waiting on in-flight token refresh")
            return refresh.result()

        try:
            credential = self._exchange_with_retry()
        except Exception as e:
            # Waiters must be released whatever went wrong
            with self._lock:
                self._credential = None
                self._refresh = None
            refresh.set_exception(e)
            raise

        with self._lock:
            self._credential = credential
            self._refresh = None
        refresh.set_result(credential.access_token)
        return credential.access_token

    def invalidate(self, token: Optional[str] = None):
        """
        Drop the cached credential.

        Args:
            token: Only drop the credential if it still holds this token, so a
                token refreshed by another caller in the meantime survives
        """
        with self._lock:
            if self._credential is None:
                return
            if token is None or self._credential.access_token == token:
                logger.debug("Invalidating cached Spotify token")
                self._credential = None

    def _exchange_with_retry(self) -> Credential:
        """Run the token exchange, retrying with linear backoff."""
        attempts = self.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return self._exchange()
            except (requests.exceptions.RequestException, ValueError, KeyError, TypeError) as e:
                logger.warning(f"Spotify token request failed (attempt {attempt}/{attempts}): {e}")
                if attempt < attempts:
                    self._sleep(attempt * self.retry_delay)
        raise AuthFailure(ERROR_MESSAGES["AUTH_FAILED"].format(attempts=attempts))

    def _exchange(self) -> Credential:
        """Perform one client-credentials exchange."""
        if not self.client_id or not self.client_secret:
            raise ValueError("client id and secret are required")

        credentials = f"{self.client_id}:{self.client_secret}"
        encoded_credentials = base64.b64encode(credentials.encode()).decode()

        headers = {
            "Authorization": f"Basic {encoded_credentials}",
            "Content-Type": "application/x-www-form-urlencoded"
        }
        data = {"grant_type": "client_credentials"}

        response = self.session.post(
            self.auth_url,
            headers=headers,
            data=data,
            timeout=self.timeout
        )
        if response.status_code != 200:
            raise ValueError(f"token endpoint returned {response.status_code}")

        token_data = response.json()
        access_token = token_data["access_token"]
        if not access_token:
            raise ValueError("token endpoint returned an empty access token")
        expires_in = float(token_data.get("expires_in", 3600))

        logger.debug(f"Obtained Spotify token valid for {expires_in:.0f}s")
        return Credential(access_token=access_token, expires_at=self._clock() + expires_in)
