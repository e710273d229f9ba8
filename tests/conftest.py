import pytest

from src.client.config import XPayConfig
from src.client.xpay import XPay
from src.gateway_simulator.dispatcher import WebhookDispatcher
from src.gateway_simulator.logger import DeliveryLogger
from src.gateway_simulator.server import MockGatewayServer
from src.gateway_simulator.signer import NotificationSigner
from src.merchant_receiver.server import MerchantWebhookServer
from src.signing.request_signer import RequestSigner
from src.signing.webhook_verifier import WebhookVerifier
from src.utils.factories import RequestFactory, WebhookFactory


API_SECRET = "test_secret_key"
API_KEY = "test-api-key"

# Fixed "now" for deterministic signing tests (2025-07-25T13:53:11Z)
FIXED_NOW = 1753451591


class FakeClock:
    """Settable clock returning unix seconds."""

    def __init__(self, now: float = FIXED_NOW):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def api_secret():
    return API_SECRET


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def request_signer(clock):
    return RequestSigner(API_SECRET, clock=clock, nonce_source=lambda: "0123456789abcdef0123456789abcdef")


@pytest.fixture
def verifier(clock):
    return WebhookVerifier(API_SECRET, clock=clock)


@pytest.fixture
def notification_signer(clock):
    return NotificationSigner(API_SECRET, clock=clock)


@pytest.fixture
def delivery_logger():
    return DeliveryLogger()


@pytest.fixture
def dispatcher(delivery_logger):
    return WebhookDispatcher(delivery_logger, timeout_seconds=5)


@pytest.fixture
def merchant_server():
    server = MerchantWebhookServer(secret=API_SECRET)
    server.start()
    yield server
    server.stop()


@pytest.fixture
def gateway_server():
    server = MockGatewayServer(secret=API_SECRET, api_key=API_KEY)
    server.start()
    yield server
    server.stop()


@pytest.fixture
def xpay(gateway_server):
    config = XPayConfig(
        api_key=API_KEY,
        api_secret=API_SECRET,
        base_url=gateway_server.base_url,
        connect_timeout=5,
        read_timeout=5,
    )
    return XPay(config)


@pytest.fixture
def request_factory():
    return RequestFactory


@pytest.fixture
def webhook_factory():
    return WebhookFactory
