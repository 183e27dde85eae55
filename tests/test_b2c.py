from __future__ import annotations

from dataclasses import replace

import pytest

from mpesa_sdk.b2c import B2CRequest, B2CResponse
from mpesa_sdk.errors import ApiError, ValidationError
from mpesa_sdk.types import CommandId
from tests.conftest import fake_response


VALID = B2CRequest(
    initiator_name="testapi",
    security_credential="iSHJEgQYt3xidNVJ7lbCnnJg",
    command_id=CommandId.BUSINESS_PAYMENT,
    amount=10,
    party_a=101010,
    party_b=251700100150,
    remarks="Test B2C",
    queue_timeout_url="https://mydomain.com/b2c/timeout",
    result_url="https://mydomain.com/b2c/result",
    occasion="Disbursement",
    originator_conversation_id="b2c-0001",
)


def test_valid_request_passes():
    VALID.validate()


@pytest.mark.parametrize("command", [CommandId.SALARY_PAYMENT, CommandId.PROMOTION_PAYMENT, "BusinessPayment"])
def test_payout_commands_accepted(command):
    replace(VALID, command_id=command).validate()


@pytest.mark.parametrize(
    "field,value",
    [
        ("initiator_name", ""),
        ("security_credential", ""),
        ("command_id", None),
        ("command_id", CommandId.ACCOUNT_BALANCE),
        ("command_id", "Refund"),
        ("amount", 0),
        ("party_a", 0),
        ("party_b", 0),
        ("remarks", ""),
        ("remarks", "r" * 201),
        ("queue_timeout_url", "ftp//nope"),
        ("result_url", ""),
        ("occasion", ""),
        ("originator_conversation_id", ""),
    ],
)
def test_invalid_field_is_rejected(field, value):
    with pytest.raises(ValidationError) as exc:
        replace(VALID, **{field: value}).validate()
    assert any(e.startswith(field) for e in exc.value.errors)


@pytest.mark.parametrize("field", ["amount", "party_a", "party_b"])
@pytest.mark.parametrize("value", ["15", 10.0, True])
def test_numeric_fields_reject_non_int_values(field, value):
    with pytest.raises(ValidationError) as exc:
        replace(VALID, **{field: value}).validate()
    assert any(e.startswith(field) for e in exc.value.errors)


def test_fill_defaults_keeps_caller_command():
    req = replace(VALID, command_id=CommandId.SALARY_PAYMENT)
    req.fill_defaults()
    req.fill_defaults()
    assert req.to_payload()["CommandID"] == "SalaryPayment"


def test_payload_shape():
    payload = VALID.to_payload()
    assert payload["InitiatorName"] == "testapi"
    assert payload["CommandID"] == "BusinessPayment"
    assert payload["PartyB"] == 251700100150
    assert set(payload) == {
        "InitiatorName",
        "SecurityCredential",
        "CommandID",
        "Amount",
        "PartyA",
        "PartyB",
        "Remarks",
        "QueueTimeOutURL",
        "ResultURL",
        "Occasion",
        "OriginatorConversationID",
    }


def test_decode_success_and_failure():
    ok = VALID.decode_response(fake_response({"ConversationID": "AG_9", "ResponseCode": "0"}))
    assert isinstance(ok, B2CResponse)
    assert ok.conversation_id == "AG_9"

    with pytest.raises(ApiError) as exc:
        VALID.decode_response(
            fake_response({"requestId": "r-9", "errorCode": "400.002.02", "errorMessage": "Bad Request - Invalid Amount"})
        )
    assert exc.value.error_message == "Bad Request - Invalid Amount"
