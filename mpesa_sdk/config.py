from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from mpesa_sdk.errors import ConfigurationError

logger = logging.getLogger("mpesa_sdk.config")

DEFAULT_MAX_CONCURRENT_CONN = 1000
DEFAULT_MAX_RETRIES = 3
DEFAULT_TIMEOUT_S = 5


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    # -----------------------
    # HTTP
    # -----------------------
    MAX_CONCURRENT_CONN: int = DEFAULT_MAX_CONCURRENT_CONN
    MAX_RETRIES: int = DEFAULT_MAX_RETRIES
    TIMEOUT: int = DEFAULT_TIMEOUT_S

    # -----------------------
    # Credentials
    # -----------------------
    CONSUMER_KEY: str = ""
    CONSUMER_SECRET: str = ""

    LOG_LEVEL: str = "DEBUG"
    # older deployments spell it ENVIROMENT
    ENVIRONMENT: str = Field(
        default="SANDBOX",
        validation_alias=AliasChoices("ENVIRONMENT", "ENVIROMENT"),
    )


@dataclass(frozen=True)
class ClientConfig:
    consumer_key: str
    consumer_secret: str
    log_level: str = "DEBUG"
    environment: str = "SANDBOX"  # "SANDBOX" | "PRODUCTION"
    timeout: int = DEFAULT_TIMEOUT_S
    max_retries: int = DEFAULT_MAX_RETRIES
    max_concurrent_conn: int = DEFAULT_MAX_CONCURRENT_CONN

    def __post_init__(self) -> None:
        object.__setattr__(self, "environment", (self.environment or "SANDBOX").strip().upper())
        object.__setattr__(self, "log_level", (self.log_level or "DEBUG").strip().upper())


def validate_config(cfg: ClientConfig) -> None:
    missing: list[str] = []
    if not (cfg.consumer_key or "").strip():
        missing.append("CONSUMER_KEY")
    if not (cfg.consumer_secret or "").strip():
        missing.append("CONSUMER_SECRET")
    if missing:
        raise ConfigurationError(
            "M-Pesa client configuration failed. "
            "Missing required credentials: " + ", ".join(missing)
        )

    if cfg.timeout <= 0:
        raise ConfigurationError(
            "M-Pesa client configuration failed. "
            f"Invalid TIMEOUT={cfg.timeout!r}. It has to be greater than 0"
        )

    if cfg.environment not in ("SANDBOX", "PRODUCTION"):
        logger.warning("unknown environment %r, requests will go to the sandbox", cfg.environment)


def config_from_env(settings: Settings | None = None) -> ClientConfig:
    s = settings or Settings()
    cfg = ClientConfig(
        consumer_key=s.CONSUMER_KEY.strip(),
        consumer_secret=s.CONSUMER_SECRET.strip(),
        log_level=s.LOG_LEVEL,
        environment=s.ENVIRONMENT,
        timeout=s.TIMEOUT,
        max_retries=s.MAX_RETRIES,
        max_concurrent_conn=s.MAX_CONCURRENT_CONN,
    )
    validate_config(cfg)
    return cfg
