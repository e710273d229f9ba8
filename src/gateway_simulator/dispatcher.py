import json
import logging
import time
import uuid
from datetime import datetime, timezone

import requests

from src.gateway_simulator.logger import DeliveryLogger
from src.models.delivery import DeliveryAttempt
from src.models.webhook import WebhookEvent
from src.signing.webhook_verifier import SIGNATURE_HEADER, TIMESTAMP_HEADER

logger = logging.getLogger(__name__)

NOTIFY_TYPE_HEADER = "X-Notify-Type"


class WebhookDispatcher:
    """Posts signed notifications to merchant endpoints. One attempt per call."""

    def __init__(self, delivery_logger: DeliveryLogger, timeout_seconds: float = 30):
        self.delivery_logger = delivery_logger
        self.timeout_seconds = timeout_seconds

    def deliver(self, event: WebhookEvent, url: str) -> DeliveryAttempt:
        """Deliver a signed event. Signature and timestamp also travel as headers."""
        headers = {
            "Content-Type": "application/json",
            SIGNATURE_HEADER: event.sign or "",
            TIMESTAMP_HEADER: str(event.timestamp),
            NOTIFY_TYPE_HEADER: event.notify_type.name,
        }

        start = time.monotonic()
        status_code = None
        error = None

        try:
            resp = requests.post(
                url,
                data=json.dumps(event.to_dict()),
                headers=headers,
                timeout=self.timeout_seconds,
            )
            status_code = resp.status_code
        except requests.exceptions.Timeout:
            error = "timeout"
        except requests.exceptions.ConnectionError:
            error = "connection_error"
        except requests.exceptions.RequestException as e:
            error = str(e)

        elapsed_ms = (time.monotonic() - start) * 1000

        attempt = DeliveryAttempt(
            attempt_id=f"att_{uuid.uuid4().hex[:16]}",
            nonce=event.nonce or "",
            notify_type=event.notify_type.name,
            url=url,
            status_code=status_code,
            timestamp=datetime.now(timezone.utc),
            response_time_ms=elapsed_ms,
            error=error,
        )
        if not attempt.succeeded:
            logger.warning(
                "Webhook delivery failed: notifyType=%s status=%s error=%s",
                attempt.notify_type, status_code, error,
            )
        self.delivery_logger.log(attempt)
        return attempt
