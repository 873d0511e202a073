"""
Security utilities for DocRouter webhook verification.
"""

import hashlib
import hmac
import math
import re
from typing import Any

SIGNATURE_HEADER = "X-DocRouter-Signature"
SIGNATURE_PREFIX = "sha256="

# Signed events older than this are rejected as possible replays
REPLAY_WINDOW_SECONDS = 300

_LEADING_INTEGER = re.compile(r"\s*[+-]?\d+")


class WebhookVerificationError(Exception):
    """Base class for webhook requests that must be rejected"""


class MissingSignatureError(WebhookVerificationError):
    def __init__(self):
        super().__init__(
            f"Missing {SIGNATURE_HEADER} header. Enable HMAC in DocRouter webhook settings"
        )


class InvalidSignatureError(WebhookVerificationError):
    def __init__(self):
        super().__init__("Webhook signature verification failed. Check your webhook secret")


class StaleTimestampError(WebhookVerificationError):
    def __init__(self, age: float):
        self.age = age
        super().__init__("Webhook timestamp too old (replay?). Rejecting request")


def _timestamp_text(timestamp: Any) -> str:
    if timestamp is None:
        return ""
    return str(timestamp)


def compute_signature(secret: str, raw_body: bytes | str, timestamp: Any) -> str:
    """
    Compute the signature DocRouter sends for a webhook delivery.

    Args:
        secret: The shared webhook secret
        raw_body: Request body exactly as received
        timestamp: The "timestamp" field of the payload

    Returns:
        Header value in the form "sha256=<hex digest>"
    """
    if isinstance(raw_body, str):
        raw_body = raw_body.encode("utf-8")

    message = _timestamp_text(timestamp).encode("utf-8") + b"." + raw_body
    digest = hmac.new(
        key=secret.encode("utf-8"),
        msg=message,
        digestmod=hashlib.sha256,
    ).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def _parse_timestamp(timestamp: Any) -> float | None:
    """Read Unix seconds from a number, or from the leading integer of a string"""
    if isinstance(timestamp, bool):
        return None
    if isinstance(timestamp, int):
        return timestamp
    if isinstance(timestamp, float):
        return timestamp if math.isfinite(timestamp) else None
    match = _LEADING_INTEGER.match(_timestamp_text(timestamp))
    if match is None:
        return None
    return int(match.group(0))


def verify_webhook_signature(
    secret: str | None,
    raw_body: bytes | str,
    timestamp: Any,
    signature: str | None,
    now: float,
) -> None:
    """
    Verify a DocRouter webhook delivery against the shared secret.

    The check depends only on its arguments; an empty secret disables it.

    Args:
        secret: The shared webhook secret
        raw_body: Raw request body as received, never a re-serialized payload
        timestamp: The "timestamp" field of the parsed payload (Unix seconds)
        signature: The X-DocRouter-Signature header value ("sha256=<hex>")
        now: Current Unix time in seconds

    Raises:
        MissingSignatureError: No signature header was sent
        InvalidSignatureError: The signature does not match
        StaleTimestampError: The event is older than the replay window
    """
    if not secret:
        return

    if not signature or not isinstance(signature, str):
        raise MissingSignatureError()

    expected_signature = compute_signature(secret, raw_body, timestamp)

    # Compare signatures using constant-time comparison
    if not hmac.compare_digest(expected_signature.encode("utf-8"), signature.encode("utf-8")):
        raise InvalidSignatureError()

    # A timestamp without leading digits skips the freshness check
    ts = _parse_timestamp(timestamp)
    if ts is not None and now - ts > REPLAY_WINDOW_SECONDS:
        raise StaleTimestampError(age=now - ts)
