from .enums import OrderStatus, WebhookNotifyType
from .value import Value, normalize
from .request import PayoutRequest, CollectionRequest, SignedRequest
from .response import (
    ApiResponse,
    CollectionData,
    OrderDetails,
    OrderTransaction,
    PayoutData,
    SupportedSymbol,
)
from .webhook import (
    CollectWebhookData,
    OrderWebhookData,
    WebhookEvent,
    WebhookTransaction,
)
from .delivery import DeliveryAttempt

__all__ = [
    "OrderStatus", "WebhookNotifyType",
    "Value", "normalize",
    "PayoutRequest", "CollectionRequest", "SignedRequest",
    "ApiResponse", "CollectionData", "OrderDetails", "OrderTransaction",
    "PayoutData", "SupportedSymbol",
    "CollectWebhookData", "OrderWebhookData", "WebhookEvent", "WebhookTransaction",
    "DeliveryAttempt",
]
