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
class TransactionReversalResponse(MpesaCommonResponse):
    pass


@dataclass
class TransactionStatusResponse(MpesaCommonResponse):
    pass


@dataclass
class TransactionReversalRequest(MpesaRequest):
    initiator: Annotated[str, Field(min_length=3, max_length=50)] = ""
    security_credential: RequiredStr = ""
    transaction_id: Annotated[str, Field(min_length=10, max_length=100)] = ""
    amount: PositiveInt = 0
    receiver_party: Annotated[str, Field(min_length=3, max_length=50)] = ""
    receiver_identifier_type: RequiredIdentifier = None
    queue_timeout_url: Url = ""
    result_url: Url = ""
    originator_conversation_id: RequiredStr = ""
    remarks: Annotated[str, Field(max_length=200)] = ""
    occasion: Annotated[str, Field(max_length=100)] = ""
    command_id: CommandId = CommandId.TRANSACTION_REVERSAL

    def fill_defaults(self) -> None:
        self.command_id = CommandId.TRANSACTION_REVERSAL

    def to_payload(self) -> dict[str, Any]:
        return {
            "Initiator": self.initiator,
            "SecurityCredential": self.security_credential,
            "CommandID": wire_value(self.command_id),
            "TransactionID": self.transaction_id,
            "Amount": self.amount,
            "ReceiverParty": self.receiver_party,
            # the remote API spells it this way
            "RecieverIdentifierType": wire_value(self.receiver_identifier_type),
            "QueueTimeOutURL": self.queue_timeout_url,
            "ResultURL": self.result_url,
            "Remarks": self.remarks,
            "Occasion": self.occasion,
            "OriginatorConversationID": self.originator_conversation_id,
        }

    def decode_response(self, res: Any) -> TransactionReversalResponse:
        return decode_common(res, TransactionReversalResponse)


@dataclass
class TransactionStatusRequest(MpesaRequest):
    identifier_type: RequiredIdentifier = None
    initiator: Annotated[str, Field(min_length=1, max_length=255)] = ""
    occasion: Annotated[str, Field(min_length=1, max_length=255)] = ""
    party_a: Annotated[str, Field(min_length=1, max_length=255)] = ""
    queue_timeout_url: Url = ""
    result_url: Url = ""
    security_credential: Annotated[str, Field(min_length=8)] = ""
    transaction_id: Annotated[str, Field(min_length=1, max_length=255)] = ""
    originator_conversation_id: Annotated[str, Field(max_length=255)] = ""
    remarks: Annotated[str, Field(max_length=500)] = ""
    command_id: CommandId = CommandId.TRANSACTION_STATUS

    def fill_defaults(self) -> None:
        self.command_id = CommandId.TRANSACTION_STATUS

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "CommandID": wire_value(self.command_id),
            "IdentifierType": wire_value(self.identifier_type),
            "Initiator": self.initiator,
            "Occasion": self.occasion,
            "PartyA": self.party_a,
            "QueueTimeOutURL": self.queue_timeout_url,
            "Remarks": self.remarks,
            "ResultURL": self.result_url,
            "SecurityCredential": self.security_credential,
            "TransactionID": self.transaction_id,
        }
        if self.originator_conversation_id:
            payload["OriginatorConversationID"] = self.originator_conversation_id
        return payload

    def decode_response(self, res: Any) -> TransactionStatusResponse:
        return decode_common(res, TransactionStatusResponse)
