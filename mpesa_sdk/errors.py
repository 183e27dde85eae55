from __future__ import annotations

from typing import Any, Optional


class MpesaError(Exception):
    """Base class for everything this package raises."""


class ConfigurationError(MpesaError):
    pass


class ValidationError(MpesaError):
    """A request failed its field constraints. ``errors`` holds every violation."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("request validation failed: " + "; ".join(self.errors))


class AuthenticationError(MpesaError):
    pass


class TransportError(MpesaError):
    pass


class TransportTimeoutError(TransportError):
    pass


class DecodeError(MpesaError):
    pass


class ApiError(MpesaError):
    """The remote API answered with a well-formed failure."""

    def __init__(self, request_id: str = "", error_code: str = "", error_message: str = ""):
        self.request_id = request_id
        self.error_code = error_code
        self.error_message = error_message
        super().__init__(str(self))

    def __str__(self) -> str:
        return (
            f"request with id={self.request_id} failed with code={self.error_code}, "
            f"due to {self.error_message}"
        )

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> "ApiError":
        return cls(
            request_id=text(payload.get("requestId")),
            error_code=text(payload.get("errorCode")),
            error_message=text(payload.get("errorMessage")),
        )


def text(value: Optional[Any]) -> str:
    """Wire values as strings; a missing value is the empty string."""
    if value is None:
        return ""
    return str(value)
