from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from mpesa_sdk.auth import AuthToken, AuthType
from mpesa_sdk.config import ClientConfig
from mpesa_sdk.errors import TransportError, TransportTimeoutError
from mpesa_sdk.redaction import mask_endpoint, redact_dict, redact_headers
from mpesa_sdk.urls import construct_url

logger = logging.getLogger("mpesa_sdk.http")


@dataclass
class HttpResponse:
    status_code: int
    json: Optional[Any]
    text: str


class HttpClient:
    def __init__(
        self,
        cfg: ClientConfig,
        client: Optional[httpx.Client] = None,
        token: Optional[AuthToken] = None,
    ):
        self.max_retries = max(0, cfg.max_retries)
        self.timeout = cfg.timeout
        self.max_conn = cfg.max_concurrent_conn
        self._client = client or httpx.Client(
            timeout=float(cfg.timeout),
            limits=httpx.Limits(
                max_connections=cfg.max_concurrent_conn,
                max_keepalive_connections=cfg.max_concurrent_conn,
            ),
        )
        self.token = token or AuthToken(cfg.consumer_key, cfg.consumer_secret, client=self._client)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def api_request(
        self,
        env: str,
        endpoint: str,
        method: str,
        payload: Optional[dict[str, Any]],
        auth_type: AuthType | str,
    ) -> HttpResponse:
        url = construct_url(env, endpoint)

        attempts = self.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return self._make_request(url, method, payload, auth_type, env)
            except httpx.TimeoutException as exc:
                logger.info(
                    "request timed out attempt=%s/%s url=%s err=%s",
                    attempt,
                    attempts,
                    mask_endpoint(url),
                    exc,
                )
                if attempt == attempts:
                    raise TransportTimeoutError(
                        f"request timed out after {attempts} attempt(s): {exc}"
                    ) from exc
                # linear backoff: 1s, 2s, 3s, ...
                time.sleep(attempt)
            except httpx.HTTPError as exc:
                raise TransportError(f"request failed: {exc}") from exc

        # unreachable, the loop either returns or raises
        raise TransportError("request was never attempted")

    def _make_request(
        self,
        url: str,
        method: str,
        payload: Optional[dict[str, Any]],
        auth_type: AuthType | str,
        env: str,
    ) -> HttpResponse:
        headers = {"Content-Type": "application/json"}
        auth: Optional[tuple[str, str]] = None

        if auth_type == AuthType.BEARER:
            # token errors are not timeouts of this call and are never retried
            headers["Authorization"] = self.token.get_token(env)
        elif auth_type == AuthType.BASIC:
            auth = self.token.get_user_credentials()
        elif auth_type != AuthType.NONE:
            logger.debug("unknown auth type %r, sending without credentials", auth_type)

        r = self._client.request(method, url, headers=headers, json=payload, auth=auth)
        if logger.isEnabledFor(logging.DEBUG):
            self._debug_dump(method, url, headers, payload, r)
        return self._wrap(r)

    @staticmethod
    def _wrap(r: httpx.Response) -> HttpResponse:
        try:
            payload = r.json()
        except ValueError:
            payload = None
        return HttpResponse(status_code=r.status_code, json=payload, text=r.text)

    @staticmethod
    def _debug_dump(
        method: str,
        url: str,
        headers: dict[str, str],
        json_body: Optional[dict[str, Any]],
        r: httpx.Response,
    ) -> None:
        logger.debug("%s %s headers=%s", method, mask_endpoint(url), redact_headers(headers))
        if json_body is not None:
            logger.debug("json=%s", redact_dict(json_body))
        logger.debug("-> status=%s text=%s", r.status_code, r.text[:300])

