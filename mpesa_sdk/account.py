from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any

from pydantic import Field

from mpesa_sdk.types import (
    CommandId,
    MpesaCommonResponse,
    MpesaRequest,
    PositiveInt,
    RequiredIdentifier,
    RequiredStr,
    Url,
    decode_common,
    wire_value,
)


@dataclass
class AccountBalanceResponse(MpesaCommonResponse):
    pass


@dataclass
class AccountBalanceRequest(MpesaRequest):
    identifier_type: RequiredIdentifier = None
    initiator: Annotated[str, Field(min_length=1, max_length=255)] = ""
    party_a: PositiveInt = 0
    queue_timeout_url: Url = ""
    result_url: Url = ""
    security_credential: Annotated[str, Field(min_length=8)] = ""
    originator_conversation_id: RequiredStr = ""
    remarks: Annotated[str, Field(max_length=500)] = ""
    command_id: CommandId = CommandId.ACCOUNT_BALANCE

    def fill_defaults(self) -> None:
        self.command_id = CommandId.ACCOUNT_BALANCE

    def to_payload(self) -> dict[str, Any]:
        return {
            "CommandID": wire_value(self.command_id),
            "IdentifierType": wire_value(self.identifier_type),
            "Initiator": self.initiator,
            "PartyA": self.party_a,
            "QueueTimeOutURL": self.queue_timeout_url,
            "Remarks": self.remarks,
            "ResultURL": self.result_url,
            "SecurityCredential": self.security_credential,
            "OriginatorConversationID": self.originator_conversation_id,
        }

    def decode_response(self, res: Any) -> AccountBalanceResponse:
        return decode_common(res, AccountBalanceResponse)
