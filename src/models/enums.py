from enum import Enum


class OrderStatus(Enum):
    PENDING = "PENDING"
    PENDING_CONFIRMATION = "PENDING_CONFIRMATION"
    SUCCESS = "SUCCESS"
    EXPIRED = "EXPIRED"
    FAILED = "FAILED"


class WebhookNotifyType(Enum):
    ORDER_PENDING = "ORDER_PENDING"
    ORDER_PENDING_CONFIRMATION = "ORDER_PENDING_CONFIRMATION"
    ORDER_SUCCESS = "ORDER_SUCCESS"
    ORDER_FAILED = "ORDER_FAILED"
    ORDER_EXPIRED = "ORDER_EXPIRED"
    COLLECT_PENDING = "COLLECT_PENDING"
    COLLECT_SUCCESS = "COLLECT_SUCCESS"
    COLLECT_FAILED = "COLLECT_FAILED"

    @property
    def is_order(self) -> bool:
        return self.name.startswith("ORDER_")

    @property
    def is_collect(self) -> bool:
        return self.name.startswith("COLLECT_")

    @property
    def order_status(self) -> OrderStatus | None:
        """Status an ORDER_* notification reports; None for COLLECT_*."""
        if not self.is_order:
            return None
        return OrderStatus[self.name[len("ORDER_"):]]
