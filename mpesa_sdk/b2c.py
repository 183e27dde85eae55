from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, Field

from mpesa_sdk.types import (
    CommandId,
    MpesaCommonResponse,
    MpesaRequest,
    PositiveInt,
    RequiredStr,
    Url,
    decode_common,
    wire_value,
)

B2C_COMMANDS = (
    CommandId.BUSINESS_PAYMENT,
    CommandId.SALARY_PAYMENT,
    CommandId.PROMOTION_PAYMENT,
)


def _b2c_command(value: Optional[CommandId]) -> CommandId:
    if value not in B2C_COMMANDS:
        allowed = ", ".join(c.value for c in B2C_COMMANDS)
        raise ValueError(f"unknown CommandID {wire_value(value)!r}, expected one of: {allowed}")
    return value


@dataclass
class B2CResponse(MpesaCommonResponse):
    pass


@dataclass
class B2CRequest(MpesaRequest):
    """Business-to-customer payout.

    The command is caller-chosen (business, salary or promotion payment) so
    there is nothing to default.
    """

    initiator_name: RequiredStr = ""
    security_credential: RequiredStr = ""
    command_id: Annotated[Optional[CommandId], AfterValidator(_b2c_command)] = None
    amount: PositiveInt = 0
    party_a: PositiveInt = 0
    party_b: PositiveInt = 0
    remarks: Annotated[str, Field(min_length=1, max_length=200)] = ""
    queue_timeout_url: Url = ""
    result_url: Url = ""
    occasion: RequiredStr = ""
    originator_conversation_id: RequiredStr = ""

    def to_payload(self) -> dict[str, Any]:
        return {
            "InitiatorName": self.initiator_name,
            "SecurityCredential": self.security_credential,
            "CommandID": wire_value(self.command_id),
            "Amount": self.amount,
            "PartyA": self.party_a,
            "PartyB": self.party_b,
            "Remarks": self.remarks,
            "QueueTimeOutURL": self.queue_timeout_url,
            "ResultURL": self.result_url,
            "Occasion": self.occasion,
            "OriginatorConversationID": self.originator_conversation_id,
        }

    def decode_response(self, res: Any) -> B2CResponse:
        return decode_common(res, B2CResponse)
