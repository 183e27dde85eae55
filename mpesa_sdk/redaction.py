from __future__ import annotations

import re
from typing import Any, Mapping

# Everything that reaches a log line goes through here first. The consumer key
# travels in the register-url query string, credentials and passwords travel in
# request bodies, and bearer tokens travel in headers.

API_KEY_MASK = "apikey=*****************"
REDACTED = "[REDACTED]"

_API_KEY_RE = re.compile(r"apikey=[A-Za-z0-9]+")
_MSISDN_RE = re.compile(r"\b\+?\d{9,15}\b")

_SECRET_MARKERS = ("token", "authorization", "secret", "credential", "password")
_MSISDN_FIELDS = frozenset({"phonenumber", "msisdn"})


def mask_endpoint(endpoint: str) -> str:
    return _API_KEY_RE.sub(API_KEY_MASK, endpoint)


def mask_msisdn(number: str) -> str:
    """251700404709 -> 251700****09; short values are left as they are."""
    if len(number) <= 8:
        return number
    return number[:6] + "****" + number[-2:]


def redact_text(value: str) -> str:
    return _MSISDN_RE.sub(lambda m: mask_msisdn(m.group(0)), mask_endpoint(value))


def _field_rule(name: str) -> str:
    lowered = str(name or "").lower()
    if any(marker in lowered for marker in _SECRET_MARKERS):
        return "secret"
    if lowered in _MSISDN_FIELDS:
        return "msisdn"
    return ""


def _scrub(value: Any) -> Any:
    if isinstance(value, Mapping):
        return redact_dict(value)
    if isinstance(value, (list, tuple)):
        return [_scrub(item) for item in value]
    if isinstance(value, str):
        return redact_text(value)
    return value


def redact_dict(payload: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for name, value in payload.items():
        rule = _field_rule(name)
        if rule == "secret":
            out[name] = REDACTED
        elif rule == "msisdn" and isinstance(value, str):
            out[name] = mask_msisdn(value)
        else:
            out[name] = _scrub(value)
    return out


def redact_headers(headers: Mapping[str, str] | None) -> dict[str, str]:
    return {
        name: REDACTED if _field_rule(name) == "secret" else value
        for name, value in (headers or {}).items()
    }
