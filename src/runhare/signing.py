"""Time-bounded HMAC-SHA256 signing and verification of event payloads."""

import base64
import hashlib
import hmac
import json
import re
import time
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from loguru import logger

from .models import FailureReason


# Wire header names
AUTH_HEADER = "x-runhare-auth"
AUTH_EXPIRY_HEADER = "x-runhare-auth-expiry"
EVENT_HEADER = "x-runhare-event"
CONTENT_TYPE_HEADER = "content-type"
CONTENT_TYPE_JSON = "application/json"

DEFAULT_TTL_MS = 2000

_DECIMAL_RE = re.compile(r"-?[0-9]+")


@dataclass
class SignedEnvelope:
    """Signed headers plus the exact serialized body they were computed over."""

    headers: dict[str, str]
    payload: str


@dataclass
class VerificationResult:
    """Outcome of verify_payload(). Failures carry a FailureReason."""

    ok: bool
    reason: Optional[FailureReason] = field(default=None)

    @classmethod
    def verified(cls) -> "VerificationResult":
        return cls(ok=True)

    @classmethod
    def failed(cls, reason: FailureReason) -> "VerificationResult":
        return cls(ok=False, reason=reason)

    def __bool__(self) -> bool:
        return self.ok


def current_time_millis() -> int:
    """Milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def serialize_payload(payload: Any, sort_keys: bool = False) -> str:
    """
    Serialize a payload to its canonical signing form.

    Compact separators and unescaped unicode reproduce JavaScript's
    JSON.stringify output for strings, integers, booleans, null and
    containers of those, so a signature computed here matches one computed
    by a JS producer over the same object. Floats are not covered: Python
    writes 1.0 and 1e+21 where JS writes 1 and 1e21. NaN and Infinity are
    not JSON and raise ValueError instead of being signed.
    Key order is the payload's own insertion order unless sort_keys is set.

    Args:
        payload: Any JSON-serializable value
        sort_keys: Emit object keys sorted instead of in insertion order

    Returns:
        Canonical JSON string
    """
    return json.dumps(
        payload,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
        sort_keys=sort_keys,
    )


def compute_digest(secret: Optional[str], expiry: int, message: str) -> str:
    """
    Compute Base64(HMAC-SHA256(secret, str(expiry) + message)).

    Args:
        secret: Shared secret (None is treated as an empty key)
        expiry: Expiry timestamp in milliseconds
        message: Serialized payload

    Returns:
        Base64-encoded digest
    """
    mac = hmac.new(
        (secret or "").encode("utf-8"),
        f"{expiry}{message}".encode("utf-8"),
        hashlib.sha256,
    )
    return base64.b64encode(mac.digest()).decode("ascii")


def sign_payload(
    payload: Any,
    secret: Optional[str],
    ttl: int = DEFAULT_TTL_MS,
) -> SignedEnvelope:
    """
    Sign a payload for transmission.

    Args:
        payload: JSON-serializable event payload
        secret: Shared secret (None or "" signs with an empty key)
        ttl: Signature lifetime in milliseconds (negative values produce
            an already-expired signature)

    Returns:
        SignedEnvelope with auth headers and the serialized body
    """
    message = serialize_payload(payload)
    expiry = current_time_millis() + ttl
    digest = compute_digest(secret, expiry, message)

    logger.debug(f"Signed payload ({len(message)} chars), expiry={expiry}")

    return SignedEnvelope(
        headers={
            AUTH_HEADER: digest,
            AUTH_EXPIRY_HEADER: str(expiry),
            CONTENT_TYPE_HEADER: CONTENT_TYPE_JSON,
        },
        payload=message,
    )


def get_header(headers: Optional[Mapping[str, Any]], name: str) -> Optional[Any]:
    """Case-insensitive header lookup."""
    if not headers:
        return None
    if name in headers:
        return headers[name]
    lowered = name.lower()
    for key, value in headers.items():
        if isinstance(key, str) and key.lower() == lowered:
            return value
    return None


def _parse_expiry(value: Any) -> Optional[int]:
    # Plain ASCII decimal only; "1_700", "+17" and non-ASCII digits are rejected
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    text = str(value).strip()
    if not _DECIMAL_RE.fullmatch(text):
        return None
    return int(text)


def verify_payload(
    secret: Optional[str],
    payload: Any,
    headers: Optional[Mapping[str, Any]],
    raw_body: Optional[Union[str, bytes]] = None,
) -> VerificationResult:
    """
    Verify the signature headers of an inbound payload.

    Checks, first failure wins:
    1. Signature and a parseable integer expiry are present
    2. Recomputed digest matches the signature
    3. Expiry has not passed

    Args:
        secret: Shared secret (None is treated as an empty key)
        payload: Decoded inbound payload
        headers: Inbound request headers
        raw_body: Exact request body as received; when given it is
            checked verbatim instead of re-serializing payload

    Returns:
        VerificationResult; never raises for untrusted input
    """
    signature = get_header(headers, AUTH_HEADER)
    expiry = _parse_expiry(get_header(headers, AUTH_EXPIRY_HEADER))

    if not signature or expiry is None:
        logger.warning("Payload verification failed: missing signature")
        return VerificationResult.failed(FailureReason.MISSING_SIGNATURE)

    if raw_body is None:
        try:
            message = serialize_payload(payload)
        except (TypeError, ValueError) as e:
            # No JSON form (e.g. NaN), so no signature can match it
            logger.warning(f"Payload verification failed: unserializable payload ({e})")
            return VerificationResult.failed(FailureReason.BAD_SIGNATURE)
    elif isinstance(raw_body, bytes):
        message = raw_body.decode("utf-8", errors="replace")
    else:
        message = raw_body

    expected = compute_digest(secret, expiry, message)
    if not hmac.compare_digest(expected.encode("ascii"), str(signature).encode("utf-8")):
        logger.warning("Payload verification failed: bad signature")
        return VerificationResult.failed(FailureReason.BAD_SIGNATURE)

    now = current_time_millis()
    if expiry < now:
        logger.warning(
            f"Payload verification failed: signature expired "
            f"(expiry={expiry}, now={now})"
        )
        return VerificationResult.failed(FailureReason.EXPIRED_SIGNATURE)

    return VerificationResult.verified()
