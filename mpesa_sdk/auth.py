from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import httpx

from mpesa_sdk.errors import AuthenticationError, DecodeError, TransportError, TransportTimeoutError
from mpesa_sdk.urls import construct_url

logger = logging.getLogger("mpesa_sdk.auth")

TOKEN_PATH = "/v1/token/generate?grant_type=client_credentials"
# tokens are dropped this many seconds before the authority says they expire
TOKEN_SAFETY_BUFFER_S = 10


class AuthType(str, Enum):
    NONE = ""
    BASIC = "Basic"
    BEARER = "Bearer"


@dataclass(frozen=True)
class CachedToken:
    token: str
    created_at: float
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


class AuthToken:
    """Fetches an access token with the consumer credentials and reuses it until expiry.

    The lock only covers reading and publishing the cached snapshot, never the
    network fetch. Two callers racing on an expired token may both fetch; the
    last one to finish wins.
    """

    def __init__(self, consumer_key: str, consumer_secret: str, client: Optional[httpx.Client] = None):
        self._consumer_key = consumer_key
        self._consumer_secret = consumer_secret
        self._client = client or httpx.Client()
        self._lock = threading.Lock()
        self._cached: Optional[CachedToken] = None

    @property
    def cached(self) -> Optional[CachedToken]:
        with self._lock:
            return self._cached

    def get_user_credentials(self) -> tuple[str, str]:
        return self._consumer_key, self._consumer_secret

    def get_token(self, env: str) -> str:
        with self._lock:
            cached = self._cached
        if cached is not None and cached.is_valid(time.time()):
            return cached.token

        fresh = self._fetch_auth_token(env)
        with self._lock:
            self._cached = fresh
        return fresh.token

    def _fetch_auth_token(self, env: str) -> CachedToken:
        url = construct_url(env, TOKEN_PATH)
        try:
            resp = self._client.get(
                url,
                headers={"Content-Type": "application/json"},
                auth=(self._consumer_key, self._consumer_secret),
            )
        except httpx.TimeoutException as exc:
            logger.warning("token fetch timed out env=%s err=%s", env, exc)
            raise TransportTimeoutError(f"token request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.warning("token fetch failed env=%s err=%s", env, exc)
            raise TransportError(f"token request failed: {exc}") from exc

        try:
            payload = resp.json()
        except ValueError as exc:
            raise DecodeError(f"token response is not valid JSON (http {resp.status_code})") from exc
        if not isinstance(payload, dict):
            raise DecodeError(f"unexpected token response (http {resp.status_code})")

        result_code = payload.get("resultCode")
        if result_code not in (None, ""):
            raise AuthenticationError(f"error occured due to: {payload.get('resultDesc') or ''}")

        access_token = payload.get("access_token")
        if not access_token:
            raise AuthenticationError(f"token response missing access_token (http {resp.status_code})")

        return _build_token(
            token_type=str(payload.get("token_type") or ""),
            access_token=str(access_token),
            expires_in=_parse_expires_in(payload.get("expires_in")),
        )


def _build_token(*, token_type: str, access_token: str, expires_in: int) -> CachedToken:
    now = time.time()
    return CachedToken(
        token=f"{token_type} {access_token}",
        created_at=now,
        expires_at=now + (expires_in - TOKEN_SAFETY_BUFFER_S),
    )


def _parse_expires_in(value: Any) -> int:
    # the auth endpoint sends a string ("3599"); anything unparsable is treated as expired
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
