import threading
from collections import Counter

from src.models.delivery import DeliveryAttempt
from src.models.enums import WebhookNotifyType


class DeliveryLogger:
    """Thread-safe delivery history, keyed by notification nonce."""

    def __init__(self):
        self._by_nonce: dict[str, list[DeliveryAttempt]] = {}
        self._order: list[DeliveryAttempt] = []
        self._lock = threading.Lock()

    def log(self, attempt: DeliveryAttempt) -> None:
        with self._lock:
            self._by_nonce.setdefault(attempt.nonce, []).append(attempt)
            self._order.append(attempt)

    def get_attempts(
        self,
        nonce: str | None = None,
        notify_type: WebhookNotifyType | str | None = None,
    ) -> list[DeliveryAttempt]:
        if isinstance(notify_type, WebhookNotifyType):
            notify_type = notify_type.name
        with self._lock:
            attempts = self._order if nonce is None else self._by_nonce.get(nonce, [])
            return [a for a in attempts if notify_type is None or a.notify_type == notify_type]

    def get_failed_attempts(self) -> list[DeliveryAttempt]:
        with self._lock:
            return [a for a in self._order if not a.succeeded]

    def last_attempt(self, nonce: str) -> DeliveryAttempt | None:
        with self._lock:
            attempts = self._by_nonce.get(nonce)
            return attempts[-1] if attempts else None

    def undelivered_nonces(self) -> list[str]:
        """Nonces with no successful attempt yet, in first-seen order."""
        with self._lock:
            return [
                nonce for nonce, attempts in self._by_nonce.items()
                if not any(a.succeeded for a in attempts)
            ]

    def count_by_notify_type(self) -> dict[str, int]:
        with self._lock:
            return dict(Counter(a.notify_type for a in self._order))

    def clear(self) -> None:
        with self._lock:
            self._by_nonce.clear()
            self._order.clear()
