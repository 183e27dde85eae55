import logging

from mpesa_sdk.redaction import mask_endpoint, mask_msisdn, redact_dict, redact_headers, redact_text


def test_mask_endpoint_hides_api_key():
    masked = mask_endpoint("/v1/c2b-register-url/register?apikey=abcDEF123")
    assert masked == "/v1/c2b-register-url/register?apikey=*****************"
    assert "abcDEF123" not in masked


def test_mask_endpoint_leaves_other_endpoints_alone():
    assert mask_endpoint("/mpesa/accountbalance/v1/query") == "/mpesa/accountbalance/v1/query"


def test_redact_dict_masks_credentials_and_phones():
    payload = {
        "SecurityCredential": "secret-cred",
        "Password": "pw-123456",
        "PhoneNumber": "251700404709",
        "Msisdn": "251711223344",
        "Amount": 20,
        "ReferenceData": [{"Key": "ThirdPartyReference", "Value": "Ref-12345"}],
    }
    redacted = redact_dict(payload)
    assert redacted["SecurityCredential"] == "[REDACTED]"
    assert redacted["Password"] == "[REDACTED]"
    assert redacted["PhoneNumber"] == "251700****09"
    assert redacted["Msisdn"] == "251711****44"
    assert redacted["Amount"] == 20
    assert redacted["ReferenceData"] == [{"Key": "ThirdPartyReference", "Value": "Ref-12345"}]


def test_redact_text_masks_api_key_and_msisdn():
    text = redact_text("POST /register?apikey=abc123 for +251700404709")
    assert "abc123" not in text
    assert "+251700404709" not in text


def test_redact_headers_hides_authorization():
    headers = {"Authorization": "Bearer token-123", "Content-Type": "application/json"}
    safe = redact_headers(headers)
    assert safe["Authorization"] == "[REDACTED]"
    assert safe["Content-Type"] == "application/json"
    # original is untouched
    assert headers["Authorization"] == "Bearer token-123"


def test_log_line_uses_redaction_helper(caplog):
    logger = logging.getLogger("redaction-test")
    caplog.set_level(logging.INFO)
    logger.info("payload=%s", redact_dict({"SecurityCredential": "super-secret"}))
    assert "super-secret" not in caplog.text


def test_mask_msisdn_keeps_short_values():
    assert mask_msisdn("2517") == "2517"
    assert mask_msisdn("251700404709") == "251700****09"
