"""
Tests for TC3-HMAC-SHA256 request signing.
"""

import hashlib
import hmac
import re

import pytest

from vidlens.providers.hunyuan_providers.signing import (
    CONTENT_TYPE,
    SIGNED_HEADERS,
    build_signed_request,
    derive_signing_key,
    sign,
    utc_date,
)
from vidlens.tests.conftest import FIXED_TIMESTAMP, SECRET_ID, SECRET_KEY

PAYLOAD = b'{"Model":"hunyuan-lite","Messages":[{"Role":"user","Content":"hi"}],"Stream":false}'
BASE = dict(
    payload=PAYLOAD,
    secret_id=SECRET_ID,
    secret_key=SECRET_KEY,
    timestamp=FIXED_TIMESTAMP,
    service="hunyuan",
    host="hunyuan.tencentcloudapi.com",
    action="ChatCompletions",
    version="2023-09-01",
    content_type=CONTENT_TYPE,
)


def test_utc_date_uses_utc_calendar_day():
    assert utc_date(FIXED_TIMESTAMP) == "2023-11-14"
    assert utc_date(0) == "1970-01-01"


def test_canonical_request_exact_form():
    request = build_signed_request(
        PAYLOAD, FIXED_TIMESTAMP, "hunyuan", "hunyuan.tencentcloudapi.com", "ChatCompletions", "2023-09-01"
    )
    expected = (
        "POST\n"
        "/\n"
        "\n"
        "content-type:application/json; charset=utf-8\n"
        "host:hunyuan.tencentcloudapi.com\n"
        "x-tc-action:chatcompletions\n"
        f"x-tc-timestamp:{FIXED_TIMESTAMP}\n"
        "x-tc-version:2023-09-01\n"
        "\n"
        f"{SIGNED_HEADERS}\n"
        f"{hashlib.sha256(PAYLOAD).hexdigest()}"
    )
    assert request.canonical_request() == expected
    assert request.credential_scope == "2023-11-14/hunyuan/tc3_request"


def test_string_to_sign_layout():
    request = build_signed_request(
        PAYLOAD, FIXED_TIMESTAMP, "hunyuan", "hunyuan.tencentcloudapi.com", "ChatCompletions", "2023-09-01"
    )
    lines = request.string_to_sign().split("\n")
    assert lines[0] == "TC3-HMAC-SHA256"
    assert lines[1] == str(FIXED_TIMESTAMP)
    assert lines[2] == "2023-11-14/hunyuan/tc3_request"
    assert lines[3] == hashlib.sha256(request.canonical_request().encode("utf-8")).hexdigest()


def test_signature_matches_independent_derivation():
    request = build_signed_request(
        PAYLOAD, FIXED_TIMESTAMP, "hunyuan", "hunyuan.tencentcloudapi.com", "ChatCompletions", "2023-09-01"
    )
    k_date = hmac.new(f"TC3{SECRET_KEY}".encode(), b"2023-11-14", hashlib.sha256).digest()
    k_service = hmac.new(k_date, b"hunyuan", hashlib.sha256).digest()
    k_signing = hmac.new(k_service, b"tc3_request", hashlib.sha256).digest()
    assert derive_signing_key(SECRET_KEY, "2023-11-14", "hunyuan") == k_signing

    expected = hmac.new(k_signing, request.string_to_sign().encode(), hashlib.sha256).hexdigest()
    authorization = sign(**BASE)
    assert authorization.endswith(f"Signature={expected}")


def test_authorization_header_structure():
    authorization = sign(**BASE)
    pattern = (
        r"^TC3-HMAC-SHA256 Credential=(?P<id>[^/]+)/2023-11-14/hunyuan/tc3_request, "
        r"SignedHeaders=content-type;host;x-tc-action;x-tc-timestamp;x-tc-version, "
        r"Signature=(?P<sig>[0-9a-f]{64})$"
    )
    match = re.match(pattern, authorization)
    assert match is not None
    assert match.group("id") == SECRET_ID
    assert SECRET_KEY not in authorization


def test_signing_is_deterministic():
    assert sign(**BASE) == sign(**BASE)


@pytest.mark.parametrize(
    "field,value",
    [
        ("payload", PAYLOAD + b" "),
        ("secret_key", SECRET_KEY + "x"),
        ("timestamp", FIXED_TIMESTAMP + 1),
        ("host", "hunyuan.ap-guangzhou.tencentcloudapi.com"),
        ("action", "GetEmbedding"),
        ("version", "2023-09-02"),
        ("content_type", "application/json"),
        ("service", "cvm"),
    ],
)
def test_changing_any_input_changes_signature(field, value):
    original = sign(**BASE).split("Signature=")[1]
    changed = sign(**{**BASE, field: value}).split("Signature=")[1]
    assert original != changed


def test_action_is_lower_cased_for_signing():
    assert sign(**BASE) == sign(**{**BASE, "action": "chatcompletions"})
