"""
TC3-HMAC-SHA256 request signing for Tencent Cloud APIs.

Header order, casing and line breaks are part of the signature; any change
to the canonical form produces an AuthFailure.SignatureFailure upstream.
"""

import hashlib
import hmac
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Tuple, Union

ALGORITHM = "TC3-HMAC-SHA256"
TERMINATOR = "tc3_request"
CONTENT_TYPE = "application/json; charset=utf-8"
SIGNED_HEADERS = "content-type;host;x-tc-action;x-tc-timestamp;x-tc-version"


def utc_date(timestamp: int) -> str:
    """UTC calendar date (YYYY-MM-DD) of a unix timestamp."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d")


def sha256_hex(data: Union[str, bytes]) -> str:
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def _hmac_sha256(key: bytes, message: str) -> bytes:
    return hmac.new(key, message.encode("utf-8"), hashlib.sha256).digest()


@dataclass(frozen=True)
class SignedRequest:
    """Canonical pieces of one signed call. Built per request, never reused."""

    canonical_headers: Tuple[Tuple[str, str], ...]
    payload: bytes
    timestamp: int
    service: str
    method: str = "POST"
    canonical_uri: str = "/"
    canonical_query_string: str = ""
    signed_headers: str = SIGNED_HEADERS

    @property
    def date(self) -> str:
        return utc_date(self.timestamp)

    @property
    def credential_scope(self) -> str:
        return f"{self.date}/{self.service}/{TERMINATOR}"

    def canonical_request(self) -> str:
        header_block = "".join(f"{name}:{value}\n" for name, value in self.canonical_headers)
        return (
            f"{self.method}\n"
            f"{self.canonical_uri}\n"
            f"{self.canonical_query_string}\n"
            f"{header_block}\n"
            f"{self.signed_headers}\n"
            f"{sha256_hex(self.payload)}"
        )

    def string_to_sign(self) -> str:
        return (
            f"{ALGORITHM}\n"
            f"{self.timestamp}\n"
            f"{self.credential_scope}\n"
            f"{sha256_hex(self.canonical_request())}"
        )


def build_signed_request(
    payload: bytes,
    timestamp: int,
    service: str,
    host: str,
    action: str,
    version: str,
    content_type: str = CONTENT_TYPE,
) -> SignedRequest:
    canonical_headers = (
        ("content-type", content_type),
        ("host", host),
        ("x-tc-action", action.lower()),
        ("x-tc-timestamp", str(timestamp)),
        ("x-tc-version", version),
    )
    return SignedRequest(
        canonical_headers=canonical_headers,
        payload=payload,
        timestamp=timestamp,
        service=service,
    )


def derive_signing_key(secret_key: str, date: str, service: str) -> bytes:
    secret_date = _hmac_sha256(f"TC3{secret_key}".encode("utf-8"), date)
    secret_service = _hmac_sha256(secret_date, service)
    return _hmac_sha256(secret_service, TERMINATOR)


def authorization_for(request: SignedRequest, secret_id: str, secret_key: str) -> str:
    """Authorization header value for an already-built canonical request."""
    signing_key = derive_signing_key(secret_key, request.date, request.service)
    signature = hmac.new(
        signing_key, request.string_to_sign().encode("utf-8"), hashlib.sha256
    ).hexdigest()
    return (
        f"{ALGORITHM} Credential={secret_id}/{request.credential_scope}, "
        f"SignedHeaders={request.signed_headers}, Signature={signature}"
    )


def sign(
    payload: bytes,
    secret_id: str,
    secret_key: str,
    timestamp: int,
    service: str,
    host: str,
    action: str,
    version: str,
    content_type: str = CONTENT_TYPE,
) -> str:
    """
    Compute the TC3-HMAC-SHA256 Authorization header value.

    Args:
        payload: Exact request body bytes that will be sent.
        secret_id: Tencent Cloud SecretId.
        secret_key: Tencent Cloud SecretKey.
        timestamp: Unix seconds; must match the X-TC-Timestamp header.
        service: Service name used in the credential scope (e.g. "hunyuan").
        host: Endpoint host, e.g. "hunyuan.tencentcloudapi.com".
        action: API action, e.g. "ChatCompletions" (lower-cased when signed).
        version: API version, e.g. "2023-09-01".
        content_type: Content-Type header value.

    Returns:
        The Authorization header value.
    """
    request = build_signed_request(payload, timestamp, service, host, action, version, content_type)
    return authorization_for(request, secret_id, secret_key)
