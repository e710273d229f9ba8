import time
import uuid

from src.models.enums import WebhookNotifyType
from src.models.request import CollectionRequest, PayoutRequest
from src.models.webhook import WebhookEvent


class RequestFactory:
    """Factory for order requests with sensible defaults."""

    @staticmethod
    def payout(**overrides) -> PayoutRequest:
        defaults = {
            "amount": 100.0,
            "symbol": "USDT",
            "chain": "TRON",
            "order_id": f"order-{uuid.uuid4().hex[:16]}",
            "uid": f"user_{uuid.uuid4().hex[:8]}",
            "receive_address": "TXmVthgn6yT1kANGJHTHcbEGEKYDLLGJGp",
        }
        defaults.update(overrides)
        return PayoutRequest(**defaults)

    @staticmethod
    def collection(**overrides) -> CollectionRequest:
        defaults = {
            "amount": 100.0,
            "symbol": "USDT",
            "chain": "TRON",
            "order_id": f"order-{uuid.uuid4().hex[:16]}",
            "uid": f"user_{uuid.uuid4().hex[:8]}",
        }
        defaults.update(overrides)
        return CollectionRequest(**defaults)


class WebhookFactory:
    """Factory for unsigned WebhookEvent instances; sign them with NotificationSigner."""

    @staticmethod
    def create_event(notify_type: WebhookNotifyType | str = WebhookNotifyType.ORDER_SUCCESS, **overrides) -> WebhookEvent:
        if isinstance(notify_type, str):
            notify_type = WebhookNotifyType[notify_type]

        data = WebhookFactory._build_data(notify_type, **overrides)
        data_overrides = overrides.pop("data", None)
        if data_overrides:
            data.update(data_overrides)

        defaults = {
            "notify_type": notify_type,
            "nonce": uuid.uuid4().hex,
            "timestamp": int(time.time()),
            "sign": None,
            "data": data,
        }
        for key in list(overrides):
            if key in defaults:
                defaults[key] = overrides.pop(key)

        return WebhookEvent(**defaults)

    @staticmethod
    def _build_data(notify_type: WebhookNotifyType, **kwargs) -> dict:
        transaction = {
            "chain": kwargs.get("chain", "TRON"),
            "symbol": kwargs.get("symbol", "USDT"),
            "blockNum": 73645120,
            "txid": uuid.uuid4().hex + uuid.uuid4().hex,
            "from": "TUser1111111111111111111111111111",
            "to": "TXmVthgn6yT1kANGJHTHcbEGEKYDLLGJGp",
            "amount": kwargs.get("amount", 100.0),
            "confirmedNum": 20,
            "status": "SUCCESS",
        }

        if notify_type.is_order:
            return {
                "orderId": kwargs.get("order_id", f"order-{uuid.uuid4().hex[:16]}"),
                "orderType": kwargs.get("order_type", "PAYOUT"),
                "status": notify_type.order_status.value,
                "reason": kwargs.get("reason"),
                "transaction": transaction,
            }
        return {
            "collectAmount": kwargs.get("amount", 100.0),
            "fee": kwargs.get("fee", 0.5),
            "feeRatio": kwargs.get("fee_ratio", 0.005),
            "reason": kwargs.get("reason"),
            "transaction": transaction,
        }
