from __future__ import annotations

import dataclasses
import functools
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, AnyHttpUrl, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from mpesa_sdk.errors import ApiError, DecodeError, ValidationError, text


class CommandId(str, Enum):
    CUSTOMER_PAY_BILL_ONLINE = "CustomerPayBillOnline"
    ACCOUNT_BALANCE = "AccountBalance"
    CUSTOMER_BUY_GOODS_ONLINE = "CustomerBuyGoodsOnline"
    BUSINESS_PAYMENT = "BusinessPayment"
    SALARY_PAYMENT = "SalaryPayment"
    PROMOTION_PAYMENT = "PromotionPayment"
    REGISTER_URL = "RegisterURL"
    TRANSACTION_STATUS = "TransactionStatusQuery"
    TRANSACTION_REVERSAL = "TransactionReversal"


class IdentifierType(str, Enum):
    MSISDN = "1"
    TILL_NUMBER = "2"
    SHORT_CODE = "4"


class ResponseType(str, Enum):
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class TransactionType(str, Enum):
    CUSTOMER_PAY_BILL_ONLINE = "CustomerPayBillOnline"
    CUSTOMER_BUY_GOODS_ONLINE = "CustomerBuyGoodsOnline"


# -----------------------
# Field constraints
# -----------------------
_URL_ADAPTER = TypeAdapter(AnyHttpUrl)
TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def required(value: Any) -> Any:
    if value is None:
        raise ValueError("field is required")
    return value


def _check_url(value: str) -> str:
    try:
        _URL_ADAPTER.validate_python(value)
    except PydanticValidationError:
        raise ValueError("must be a valid http(s) URL") from None
    return value


def _check_timestamp(value: str) -> str:
    try:
        datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError:
        raise ValueError("must be formatted as YYYYMMDDHHMMSS") from None
    return value


RequiredStr = Annotated[str, Field(min_length=1)]
# strict: "15", 15.0 and True are rejected instead of being sent as-is
PositiveInt = Annotated[int, Field(ge=1, strict=True)]
Url = Annotated[str, Field(min_length=1), AfterValidator(_check_url)]
Timestamp = Annotated[str, Field(min_length=1), AfterValidator(_check_timestamp)]
RequiredIdentifier = Annotated[Optional[IdentifierType], AfterValidator(required)]


@functools.lru_cache(maxsize=None)
def _adapter(cls: type) -> TypeAdapter:
    return TypeAdapter(cls)


def wire_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def _field_values(obj: Any) -> dict[str, Any]:
    # nested dataclasses stay instances
    return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}


class MpesaRequest:
    """Capability set shared by every request: validate, fill defaults, decode.

    Subclasses are plain dataclasses whose field annotations carry the
    constraints; nothing is checked until ``validate`` runs.
    """

    def validate(self) -> None:
        try:
            _adapter(type(self)).validate_python(_field_values(self))
        except PydanticValidationError as exc:
            raise ValidationError(_format_errors(exc)) from None

    def fill_defaults(self) -> None:
        return None

    def to_payload(self) -> dict[str, Any]:
        raise NotImplementedError

    def decode_response(self, res: Any) -> Any:
        raise NotImplementedError


def _format_errors(exc: PydanticValidationError) -> list[str]:
    out: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "request"
        out.append(f"{loc}: {err.get('msg')}")
    return out


# -----------------------
# Responses
# -----------------------
@dataclass
class MpesaCommonResponse:
    conversation_id: str = ""
    originator_conversation_id: str = ""
    response_description: str = ""
    response_code: str = ""

    @classmethod
    def from_json(cls, payload: dict[str, Any]):
        return cls(
            conversation_id=text(payload.get("ConversationID")),
            originator_conversation_id=text(payload.get("OriginatorConversationID")),
            response_description=text(payload.get("ResponseDescription")),
            response_code=text(payload.get("ResponseCode")),
        )


def json_body(res: Any) -> dict[str, Any]:
    payload = getattr(res, "json", None)
    if not isinstance(payload, dict):
        snippet = (getattr(res, "text", "") or "")[:200]
        raise DecodeError(
            f"unable to decode response (http {getattr(res, 'status_code', '?')}): {snippet!r}"
        )
    return payload


def error_from_body(payload: dict[str, Any]) -> ApiError:
    err = ApiError.from_json(payload)
    if not (err.error_code or err.error_message):
        # some failures only carry the common fields
        err = ApiError(
            request_id=err.request_id or text(payload.get("OriginatorConversationID")),
            error_code=text(payload.get("ResponseCode")),
            error_message=text(payload.get("ResponseDescription")),
        )
    return err


def decode_common(res: Any, response_cls: type):
    payload = json_body(res)
    data = response_cls.from_json(payload)
    if data.response_code != "0":
        raise error_from_body(payload)
    return data
