from dataclasses import dataclass
from typing import Any

from src.models.value import Value


def _drop_none(fields: dict[str, Any]) -> dict[str, Value]:
    return {k: v for k, v in fields.items() if v is not None}


@dataclass(frozen=True)
class PayoutRequest:
    """Merchant sends crypto to a user wallet."""

    amount: float | None = None
    symbol: str | None = None
    chain: str | None = None
    order_id: str | None = None
    uid: str | None = None
    receive_address: str | None = None

    def to_value(self) -> dict[str, Value]:
        return _drop_none({
            "amount": self.amount,
            "symbol": self.symbol,
            "chain": self.chain,
            "orderId": self.order_id,
            "uid": self.uid,
            "receiveAddress": self.receive_address,
        })


@dataclass(frozen=True)
class CollectionRequest:
    """Merchant receives crypto from a user."""

    amount: float | None = None
    symbol: str | None = None
    chain: str | None = None
    order_id: str | None = None
    uid: str | None = None

    def to_value(self) -> dict[str, Value]:
        return _drop_none({
            "amount": self.amount,
            "symbol": self.symbol,
            "chain": self.chain,
            "orderId": self.order_id,
            "uid": self.uid,
        })


@dataclass(frozen=True)
class SignedRequest:
    """Envelope sent to the gateway. ``data`` is the caller's original object."""

    sign: str
    timestamp: int
    nonce: str
    data: Any

    def to_dict(self) -> dict[str, Value]:
        data = self.data
        if data is not None and hasattr(data, "to_value"):
            data = data.to_value()
        return {
            "sign": self.sign,
            "timestamp": self.timestamp,
            "nonce": self.nonce,
            "data": data,
        }
