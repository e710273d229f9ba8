from dataclasses import dataclass
from typing import Any

from src.models.enums import OrderStatus, WebhookNotifyType


@dataclass(frozen=True)
class WebhookTransaction:
    chain: str | None = None
    symbol: str | None = None
    block_num: int | None = None
    txid: str | None = None
    contract_address: str | None = None
    from_address: str | None = None
    to_address: str | None = None
    amount: float | None = None
    timestamp: int | None = None
    tx_gas: float | None = None
    confirmed_num: int | None = None
    status: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "WebhookTransaction":
        return cls(
            chain=data.get("chain"),
            symbol=data.get("symbol"),
            block_num=data.get("blockNum"),
            txid=data.get("txid"),
            contract_address=data.get("contractAddress"),
            from_address=data.get("from"),
            to_address=data.get("to"),
            amount=data.get("amount"),
            timestamp=data.get("timestamp"),
            tx_gas=data.get("txGas"),
            confirmed_num=data.get("confirmedNum"),
            status=data.get("status"),
        )


def _transaction(data: dict) -> WebhookTransaction | None:
    tx = data.get("transaction")
    return WebhookTransaction.from_dict(tx) if tx else None


@dataclass(frozen=True)
class OrderWebhookData:
    order_id: str | None = None
    order_type: str | None = None
    status: OrderStatus | None = None
    reason: str | None = None
    transaction: WebhookTransaction | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "OrderWebhookData":
        status = data.get("status")
        return cls(
            order_id=data.get("orderId"),
            order_type=data.get("orderType"),
            status=OrderStatus(status) if status is not None else None,
            reason=data.get("reason"),
            transaction=_transaction(data),
        )


@dataclass(frozen=True)
class CollectWebhookData:
    collect_amount: float | None = None
    fee: float | None = None
    fee_ratio: float | None = None
    reason: str | None = None
    transaction: WebhookTransaction | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "CollectWebhookData":
        return cls(
            collect_amount=data.get("collectAmount"),
            fee=data.get("fee"),
            fee_ratio=data.get("feeRatio"),
            reason=data.get("reason"),
            transaction=_transaction(data),
        )


@dataclass(frozen=True)
class WebhookEvent:
    """Notification pushed by the gateway to the merchant."""

    notify_type: WebhookNotifyType
    nonce: str | None = None
    timestamp: int | None = None
    sign: str | None = None
    data: Any = None

    @classmethod
    def from_dict(cls, body: dict) -> "WebhookEvent":
        """Decode a webhook body. Unknown fields are ignored.

        Raises KeyError/ValueError for a missing or unknown ``notifyType``;
        callers translate those into their own error type.
        """
        return cls(
            notify_type=WebhookNotifyType[body["notifyType"]],
            nonce=body.get("nonce"),
            timestamp=body.get("timestamp"),
            sign=body.get("sign"),
            data=body.get("data"),
        )

    def to_dict(self) -> dict:
        return {
            "sign": self.sign,
            "timestamp": self.timestamp,
            "nonce": self.nonce,
            "notifyType": self.notify_type.name,
            "data": self.data,
        }
