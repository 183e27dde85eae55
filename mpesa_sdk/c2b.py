from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, BeforeValidator, Field

from mpesa_sdk.errors import ApiError, DecodeError, text
from mpesa_sdk.types import (
    CommandId,
    MpesaCommonResponse,
    MpesaRequest,
    PositiveInt,
    RequiredStr,
    ResponseType,
    Timestamp,
    TransactionType,
    Url,
    decode_common,
    error_from_body,
    json_body,
    required,
    wire_value,
)

logger = logging.getLogger("mpesa_sdk.c2b")

SIMULATE_COMMANDS = (
    CommandId.CUSTOMER_PAY_BILL_ONLINE,
    CommandId.CUSTOMER_BUY_GOODS_ONLINE,
)


def _simulate_command(value: CommandId) -> CommandId:
    if value not in SIMULATE_COMMANDS:
        allowed = ", ".join(c.value for c in SIMULATE_COMMANDS)
        raise ValueError(f"unknown CommandID {wire_value(value)!r}, expected one of: {allowed}")
    return value


# -----------------------
# URL registration
# -----------------------
@dataclass
class RegisterURLResponse(MpesaCommonResponse):
    pass


@dataclass
class RegisterC2BURLRequest(MpesaRequest):
    short_code: Annotated[str, Field(min_length=5, max_length=20)] = ""
    response_type: Annotated[Optional[ResponseType], AfterValidator(required)] = None
    confirmation_url: Url = ""
    validation_url: Url = ""
    command_id: CommandId = CommandId.REGISTER_URL

    def fill_defaults(self) -> None:
        self.command_id = CommandId.REGISTER_URL

    def to_payload(self) -> dict[str, Any]:
        return {
            "ShortCode": self.short_code,
            "ResponseType": wire_value(self.response_type),
            "CommandID": wire_value(self.command_id),
            "ConfirmationURL": self.confirmation_url,
            "ValidationURL": self.validation_url,
        }

    def decode_response(self, res: Any) -> RegisterURLResponse:
        payload = json_body(res)
        header = payload.get("header")
        if not isinstance(header, dict):
            header = {}

        raw_code = header.get("responseCode")
        try:
            code = int(raw_code or 0)
        except (TypeError, ValueError):
            raise DecodeError(f"unexpected header.responseCode {raw_code!r}") from None

        if code == 200:
            return RegisterURLResponse(
                response_code=str(code),
                response_description=text(header.get("responseMessage")),
            )
        if code == 500:
            logger.info("register url rejected by server: %s", (getattr(res, "text", "") or "")[:300])
            raise ApiError.from_json(payload)

        raise ApiError(
            error_code=str(code),
            error_message=text(header.get("responseMessage")),
        )


# -----------------------
# USSD (STK) push
# -----------------------
@dataclass
class ReferenceData:
    key: Annotated[str, Field(min_length=1, max_length=50)] = ""
    value: Annotated[str, Field(min_length=1, max_length=100)] = ""


def _reference_items(items: Any) -> Any:
    if not isinstance(items, (list, tuple)):
        return items
    for item in items:
        if not isinstance(item, ReferenceData):
            raise ValueError(f"items must be ReferenceData, got {type(item).__name__}")
    return [asdict(item) for item in items]


@dataclass
class USSDSuccessResponse:
    merchant_request_id: str = ""
    checkout_request_id: str = ""
    response_code: str = ""
    customer_message: str = ""
    response_description: str = ""

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> "USSDSuccessResponse":
        return cls(
            merchant_request_id=text(payload.get("MerchantRequestID")),
            checkout_request_id=text(payload.get("CheckoutRequestID")),
            response_code=text(payload.get("ResponseCode")),
            customer_message=text(payload.get("CustomerMessage")),
            response_description=text(payload.get("ResponseDescription")),
        )


@dataclass
class USSDPaymentRequest(MpesaRequest):
    """Push a payment prompt to the payer's phone.

    ``password`` is the base64 of shortcode + passkey + timestamp, exactly as
    issued by the portal; it is passed through untouched.
    """

    merchant_request_id: Annotated[str, Field(min_length=1, max_length=50)] = ""
    business_short_code: RequiredStr = ""
    transaction_type: Annotated[Optional[TransactionType], AfterValidator(required)] = None
    password: Annotated[str, Field(min_length=8, max_length=100)] = ""
    timestamp: Timestamp = ""
    amount: PositiveInt = 0
    party_a: Annotated[str, Field(min_length=1, max_length=20)] = ""
    party_b: Annotated[str, Field(min_length=1, max_length=20)] = ""
    phone_number: RequiredStr = ""
    call_back_url: Url = ""
    account_reference: Annotated[str, Field(min_length=1, max_length=20)] = ""
    transaction_desc: Annotated[str, Field(min_length=1, max_length=100)] = ""
    reference_data: Annotated[list[ReferenceData], BeforeValidator(_reference_items)] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return {
            "MerchantRequestID": self.merchant_request_id,
            "BusinessShortCode": self.business_short_code,
            "Password": self.password,
            "Timestamp": self.timestamp,
            "TransactionType": wire_value(self.transaction_type),
            "Amount": self.amount,
            "PartyA": self.party_a,
            "PartyB": self.party_b,
            "PhoneNumber": self.phone_number,
            "CallBackURL": self.call_back_url,
            "AccountReference": self.account_reference,
            "TransactionDesc": self.transaction_desc,
            "ReferenceData": [{"Key": r.key, "Value": r.value} for r in self.reference_data],
        }

    def decode_response(self, res: Any) -> USSDSuccessResponse:
        payload = json_body(res)
        data = USSDSuccessResponse.from_json(payload)

        if data.response_code == "0":
            return data
        if data.response_code == "":
            # no ResponseCode at all: the body is an error document
            raise error_from_body(payload)

        raise ApiError(
            request_id=data.merchant_request_id,
            error_code=data.response_code,
            error_message=data.response_description,
        )


# -----------------------
# Simulated C2B payment
# -----------------------
@dataclass
class SimulatePaymentResponse(MpesaCommonResponse):
    pass


@dataclass
class SimulateCustomerInitiatedPayment(MpesaRequest):
    amount: PositiveInt = 0
    msisdn: Annotated[str, Field(pattern=r"^\d{12}$")] = ""
    bill_ref_number: Annotated[str, Field(min_length=6, max_length=20)] = ""
    short_code: Annotated[str, Field(pattern=r"^\d{1,20}$")] = ""
    command_id: Annotated[CommandId, AfterValidator(_simulate_command)] = CommandId.CUSTOMER_PAY_BILL_ONLINE

    def to_payload(self) -> dict[str, Any]:
        return {
            "CommandID": wire_value(self.command_id),
            "Amount": self.amount,
            "Msisdn": self.msisdn,
            "BillRefNumber": self.bill_ref_number,
            "ShortCode": self.short_code,
        }

    def decode_response(self, res: Any) -> SimulatePaymentResponse:
        return decode_common(res, SimulatePaymentResponse)
