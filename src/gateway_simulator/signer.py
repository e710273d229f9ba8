import dataclasses
import time
from typing import Any, Callable

from src.models.enums import WebhookNotifyType
from src.models.webhook import WebhookEvent
from src.signing.webhook_verifier import notification_signature
from src.utils.crypto import generate_nonce


class NotificationSigner:
    """Signs webhook notifications the way the gateway does before pushing them."""

    def __init__(
        self,
        secret: str,
        clock: Callable[[], float] = time.time,
        nonce_source: Callable[[], str] = generate_nonce,
    ):
        self.secret = secret
        self._clock = clock
        self._nonce_source = nonce_source

    def sign(self, event: WebhookEvent, timestamp: int | None = None) -> str:
        if timestamp is None:
            timestamp = event.timestamp
        return notification_signature(event, timestamp, self.secret)

    def build(self, notify_type: WebhookNotifyType | str, data: dict[str, Any] | None) -> WebhookEvent:
        """Create a freshly timestamped, signed notification."""
        if isinstance(notify_type, str):
            notify_type = WebhookNotifyType[notify_type]
        event = WebhookEvent(
            notify_type=notify_type,
            nonce=self._nonce_source(),
            timestamp=int(self._clock()),
            data=data,
        )
        return dataclasses.replace(event, sign=self.sign(event))
