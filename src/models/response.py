from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from src.models.enums import OrderStatus

T = TypeVar("T")


def _status(value: str | None) -> OrderStatus | None:
    return OrderStatus(value) if value is not None else None


@dataclass(frozen=True)
class OrderTransaction:
    chain: str | None = None
    symbol: str | None = None
    block_num: int | None = None
    txid: str | None = None
    contract_address: str | None = None
    from_address: str | None = None
    to_address: str | None = None
    amount: str | None = None
    timestamp: int | None = None
    tx_gas: str | None = None
    confirmed_num: int | None = None
    status: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "OrderTransaction":
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


@dataclass(frozen=True)
class OrderDetails:
    order_id: str | None = None
    order_type: str | None = None
    status: OrderStatus | None = None
    reason: str | None = None
    transaction: OrderTransaction | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "OrderDetails":
        tx = data.get("transaction")
        return cls(
            order_id=data.get("orderId"),
            order_type=data.get("orderType"),
            status=_status(data.get("status")),
            reason=data.get("reason"),
            transaction=OrderTransaction.from_dict(tx) if tx else None,
        )


@dataclass(frozen=True)
class PayoutData:
    order_id: str | None = None
    status: OrderStatus | None = None
    amount: str | None = None
    symbol: str | None = None
    chain: str | None = None
    uid: str | None = None
    receive_address: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "PayoutData":
        return cls(
            order_id=data.get("orderId"),
            status=_status(data.get("status")),
            amount=data.get("amount"),
            symbol=data.get("symbol"),
            chain=data.get("chain"),
            uid=data.get("uid"),
            receive_address=data.get("receiveAddress"),
        )


@dataclass(frozen=True)
class CollectionData:
    address: str | None = None
    amount: str | None = None
    symbol: str | None = None
    chain: str | None = None
    uid: str | None = None
    order_id: str | None = None
    expired_time: int | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "CollectionData":
        return cls(
            address=data.get("address"),
            amount=data.get("amount"),
            symbol=data.get("symbol"),
            chain=data.get("chain"),
            uid=data.get("uid"),
            order_id=data.get("orderId"),
            expired_time=data.get("expiredTime"),
        )


@dataclass(frozen=True)
class SupportedSymbol:
    symbol: str | None = None
    chain: str | None = None
    decimals: int | None = None
    contract: str | None = None
    min_amount: float | None = None
    max_amount: float | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "SupportedSymbol":
        # The gateway has sent the contract under both names.
        contract = data.get("contract")
        if contract is None:
            contract = data.get("contractAddress")
        return cls(
            symbol=data.get("symbol"),
            chain=data.get("chain"),
            decimals=data.get("decimals"),
            contract=contract,
            min_amount=data.get("minAmount"),
            max_amount=data.get("maxAmount"),
        )


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    code: int | None = None
    msg: str | None = None
    data: T | None = None

    @classmethod
    def from_dict(cls, body: dict, decode_data: Callable[[Any], T] | None = None) -> "ApiResponse[T]":
        data = body.get("data")
        if data is not None and decode_data is not None:
            data = decode_data(data)
        return cls(code=body.get("code"), msg=body.get("msg"), data=data)
