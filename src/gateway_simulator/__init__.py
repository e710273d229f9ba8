from .dispatcher import WebhookDispatcher
from .logger import DeliveryLogger
from .server import MockGatewayServer
from .signer import NotificationSigner

__all__ = [
    "WebhookDispatcher",
    "DeliveryLogger",
    "MockGatewayServer",
    "NotificationSigner",
]
