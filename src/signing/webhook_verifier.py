"""Verification of gateway webhook notifications.

A notification is accepted when the HMAC over
``{data, nonce, notifyType, timestamp}`` matches the supplied signature and
the timestamp lies within ``tolerance_seconds`` of the local clock. The
signature and timestamp are taken from the caller (usually request headers),
not from the decoded body.
"""

import dataclasses
import json
import logging
import re
import time
from collections.abc import Mapping
from enum import Enum
from typing import Callable

from src.exceptions import MalformedInput
from src.models.webhook import CollectWebhookData, OrderWebhookData, WebhookEvent
from src.utils.canonical import canonicalize
from src.utils.crypto import sign, signatures_match

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE_SECONDS = 30

SIGNATURE_HEADER = "X-Signature"
TIMESTAMP_HEADER = "X-Timestamp"

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1
_TIMESTAMP_RE = re.compile(r"-?[0-9]+")


class VerificationResult(Enum):
    VERIFIED = "VERIFIED"
    FAILED = "FAILED"
    MALFORMED = "MALFORMED"


def decode_event(raw_body: bytes | str) -> WebhookEvent:
    """Decode a raw webhook body. Raises MalformedInput on any shape problem."""
    try:
        body = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as exc:
        raise MalformedInput(f"webhook body is not valid JSON: {exc}") from exc
    if not isinstance(body, dict):
        raise MalformedInput("webhook body must be a JSON object")
    try:
        event = WebhookEvent.from_dict(body)
    except KeyError as exc:
        raise MalformedInput(f"missing or unknown notifyType: {exc}") from exc
    except TypeError as exc:
        raise MalformedInput(f"invalid notifyType: {exc}") from exc
    if event.data is not None and not isinstance(event.data, Mapping):
        raise MalformedInput("webhook data must be a JSON object")
    if event.nonce is not None and not isinstance(event.nonce, str):
        raise MalformedInput("webhook nonce must be a string")
    return event


def parse_timestamp(timestamp: str | int) -> int:
    """Parse a plain signed decimal that fits in 64 bits, nothing else."""
    if isinstance(timestamp, int) and not isinstance(timestamp, bool):
        value = timestamp
    elif isinstance(timestamp, str) and _TIMESTAMP_RE.fullmatch(timestamp):
        value = int(timestamp)
    else:
        raise MalformedInput(f"timestamp is not an integer: {timestamp!r}")
    if not INT64_MIN <= value <= INT64_MAX:
        raise MalformedInput(f"timestamp out of range: {timestamp!r}")
    return value


def notification_signature(event: WebhookEvent, timestamp: int, secret: str) -> str:
    params = {
        "data": event.data if event.data is not None else {},
        "nonce": event.nonce,
        "notifyType": event.notify_type.name,
        "timestamp": timestamp,
    }
    return sign(canonicalize(params), secret)


def project_data(event: WebhookEvent) -> WebhookEvent:
    """Replace the generic ``data`` tree with the payload type its notifyType implies."""
    data = event.data or {}
    if event.notify_type.is_order:
        return dataclasses.replace(event, data=OrderWebhookData.from_dict(data))
    if event.notify_type.is_collect:
        return dataclasses.replace(event, data=CollectWebhookData.from_dict(data))
    return event


class WebhookVerifier:
    """Verifies and parses webhook notifications signed with the merchant secret."""

    def __init__(
        self,
        secret: str,
        clock: Callable[[], float] = time.time,
        tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
    ):
        self._secret = secret
        self._clock = clock
        self.tolerance_seconds = tolerance_seconds

    def verify(self, raw_body: bytes | str, signature: str, timestamp: str | int) -> bool:
        event = decode_event(raw_body)
        return self._verify_event(event, signature, parse_timestamp(timestamp))

    def check(self, raw_body: bytes | str, signature: str, timestamp: str | int) -> VerificationResult:
        """Like verify() but reports malformed input as a result instead of raising."""
        try:
            ok = self.verify(raw_body, signature, timestamp)
        except MalformedInput as exc:
            logger.info("Rejected malformed webhook: %s", exc)
            return VerificationResult.MALFORMED
        return VerificationResult.VERIFIED if ok else VerificationResult.FAILED

    def parse(self, raw_body: bytes | str, signature: str, timestamp: str | int) -> WebhookEvent | None:
        """Verified event with typed ``data``, or None when verification fails."""
        event = decode_event(raw_body)
        if not self._verify_event(event, signature, parse_timestamp(timestamp)):
            return None
        try:
            return project_data(event)
        except (ValueError, AttributeError) as exc:
            raise MalformedInput(f"webhook data does not match {event.notify_type.name}: {exc}") from exc

    def _verify_event(self, event: WebhookEvent, signature: str, timestamp: int) -> bool:
        expected = notification_signature(event, timestamp, self._secret)

        delta = abs(int(self._clock()) - timestamp)
        if delta > self.tolerance_seconds:
            logger.info(
                "Webhook timestamp outside window: delta=%ds tolerance=%ds nonce=%s",
                delta, self.tolerance_seconds, event.nonce,
            )
            return False

        if not signatures_match(expected, signature):
            logger.info("Webhook signature mismatch: notifyType=%s nonce=%s",
                        event.notify_type.name, event.nonce)
            return False
        return True
