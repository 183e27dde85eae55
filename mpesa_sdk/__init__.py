from __future__ import annotations

import logging

from mpesa_sdk.account import AccountBalanceRequest, AccountBalanceResponse
from mpesa_sdk.auth import AuthToken, AuthType
from mpesa_sdk.b2c import B2CRequest, B2CResponse
from mpesa_sdk.c2b import (
    ReferenceData,
    RegisterC2BURLRequest,
    RegisterURLResponse,
    SimulateCustomerInitiatedPayment,
    SimulatePaymentResponse,
    USSDPaymentRequest,
    USSDSuccessResponse,
)
from mpesa_sdk.client import MpesaClient
from mpesa_sdk.config import ClientConfig, Settings, config_from_env
from mpesa_sdk.errors import (
    ApiError,
    AuthenticationError,
    ConfigurationError,
    DecodeError,
    MpesaError,
    TransportError,
    TransportTimeoutError,
    ValidationError,
)
from mpesa_sdk.logger import configure_logging
from mpesa_sdk.transaction import (
    TransactionReversalRequest,
    TransactionReversalResponse,
    TransactionStatusRequest,
    TransactionStatusResponse,
)
from mpesa_sdk.types import CommandId, IdentifierType, ResponseType, TransactionType

logging.getLogger("mpesa_sdk").addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "AccountBalanceRequest",
    "AccountBalanceResponse",
    "ApiError",
    "AuthToken",
    "AuthType",
    "AuthenticationError",
    "B2CRequest",
    "B2CResponse",
    "ClientConfig",
    "CommandId",
    "ConfigurationError",
    "DecodeError",
    "IdentifierType",
    "MpesaClient",
    "MpesaError",
    "ReferenceData",
    "RegisterC2BURLRequest",
    "RegisterURLResponse",
    "ResponseType",
    "Settings",
    "SimulateCustomerInitiatedPayment",
    "SimulatePaymentResponse",
    "TransactionReversalRequest",
    "TransactionReversalResponse",
    "TransactionStatusRequest",
    "TransactionStatusResponse",
    "TransactionType",
    "TransportError",
    "TransportTimeoutError",
    "USSDPaymentRequest",
    "USSDSuccessResponse",
    "ValidationError",
    "config_from_env",
    "configure_logging",
]
