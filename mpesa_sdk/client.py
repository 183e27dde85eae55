from __future__ import annotations

from typing import Any, Optional, TypeVar

from mpesa_sdk.account import AccountBalanceRequest, AccountBalanceResponse
from mpesa_sdk.auth import AuthType
from mpesa_sdk.b2c import B2CRequest, B2CResponse
from mpesa_sdk.c2b import (
    RegisterC2BURLRequest,
    RegisterURLResponse,
    SimulateCustomerInitiatedPayment,
    SimulatePaymentResponse,
    USSDPaymentRequest,
    USSDSuccessResponse,
)
from mpesa_sdk.config import ClientConfig, validate_config
from mpesa_sdk.errors import MpesaError
from mpesa_sdk.http import HttpClient
from mpesa_sdk.logger import get_logger
from mpesa_sdk.redaction import mask_endpoint
from mpesa_sdk.transaction import (
    TransactionReversalRequest,
    TransactionReversalResponse,
    TransactionStatusRequest,
    TransactionStatusResponse,
)
from mpesa_sdk.types import MpesaRequest

T = TypeVar("T")

METHOD_POST = "POST"


class MpesaClient:
    """Entry point for the M-Pesa API.

    Every operation goes through ``execute``: validate the request, fill its
    fixed fields, send it, and decode the reply into the operation's success
    type. Failures are raised as ``mpesa_sdk.errors`` exceptions; an
    ``ApiError`` means the remote side rejected the request.

    ``cfg.log_level`` is applied to the shared ``mpesa_sdk`` logger, so with
    several clients in one process the last one constructed sets the level.

        cfg = ClientConfig(consumer_key="...", consumer_secret="...")
        with MpesaClient(cfg) as mpesa:
            res = mpesa.make_account_balance_query(AccountBalanceRequest(...))
    """

    def __init__(self, cfg: ClientConfig, http: Optional[HttpClient] = None):
        validate_config(cfg)
        self.cfg = cfg
        self.logger = get_logger(cfg.log_level)
        self.http = http or HttpClient(cfg)

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "MpesaClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def execute(
        self,
        req: MpesaRequest,
        success_type: type[T],
        endpoint: str,
        method: str,
        auth_type: AuthType | str,
    ) -> T:
        masked = mask_endpoint(endpoint)
        self.logger.info("making request method=%s endpoint=%s", method, masked)

        try:
            req.validate()
        except MpesaError as exc:
            self.logger.info("validation failed error=%s", exc)
            raise

        req.fill_defaults()

        try:
            response = self.http.api_request(self.cfg.environment, endpoint, method, req.to_payload(), auth_type)
        except MpesaError as exc:
            self.logger.info("request failed error=%s", exc)
            raise

        try:
            res = req.decode_response(response)
        except MpesaError as exc:
            self.logger.info("request failed error=%s", exc)
            raise

        if not isinstance(res, success_type):
            self.logger.info("unable to decode the response into %s", success_type.__name__)
            raise MpesaError("unable to decode success message")

        self.logger.info("request succeeded method=%s endpoint=%s", method, masked)
        return res

    # -----------------------
    # Account
    # -----------------------
    def make_account_balance_query(self, req: AccountBalanceRequest) -> AccountBalanceResponse:
        endpoint = "/mpesa/accountbalance/v1/query"
        return self.execute(req, AccountBalanceResponse, endpoint, METHOD_POST, AuthType.BEARER)

    # -----------------------
    # B2C
    # -----------------------
    def make_b2c_payment_request(self, req: B2CRequest) -> B2CResponse:
        endpoint = "/mpesa/b2c/v2/paymentrequest"
        return self.execute(req, B2CResponse, endpoint, METHOD_POST, AuthType.BEARER)

    # -----------------------
    # Transactions
    # -----------------------
    def make_transaction_reversal_request(self, req: TransactionReversalRequest) -> TransactionReversalResponse:
        endpoint = "/mpesa/reversal/v1/request"
        return self.execute(req, TransactionReversalResponse, endpoint, METHOD_POST, AuthType.BEARER)

    def make_transaction_status_query(self, req: TransactionStatusRequest) -> TransactionStatusResponse:
        endpoint = "/mpesa/transactionstatus/v1/query"
        return self.execute(req, TransactionStatusResponse, endpoint, METHOD_POST, AuthType.BEARER)

    # -----------------------
    # C2B
    # -----------------------
    def ussd_payment_request(self, req: USSDPaymentRequest) -> USSDSuccessResponse:
        endpoint = "/mpesa/stkpush/v3/processrequest"
        return self.execute(req, USSDSuccessResponse, endpoint, METHOD_POST, AuthType.BEARER)

    def simulate_customer_initiated_payment(self, req: SimulateCustomerInitiatedPayment) -> SimulatePaymentResponse:
        endpoint = "/mpesa/b2c/simulatetransaction/v1/request"
        return self.execute(req, SimulatePaymentResponse, endpoint, METHOD_POST, AuthType.BEARER)

    def register_new_url(self, req: RegisterC2BURLRequest) -> RegisterURLResponse:
        # this endpoint takes the consumer key as a query parameter instead of a token
        endpoint = "/v1/c2b-register-url/register?apikey=" + self.cfg.consumer_key
        return self.execute(req, RegisterURLResponse, endpoint, METHOD_POST, AuthType.NONE)
