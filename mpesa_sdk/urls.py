from __future__ import annotations

PRODUCTION_URL = "https://api.safaricom.et"
SANDBOX_URL = "https://apisandbox.safaricom.et"


def base_url(env: str) -> str:
    # anything that is not PRODUCTION talks to the sandbox
    if env == "PRODUCTION":
        return PRODUCTION_URL
    return SANDBOX_URL


def construct_url(env: str, endpoint: str) -> str:
    return base_url(env) + endpoint
