"""Integration tests for signed webhook delivery to the merchant receiver."""

import pytest

from src.gateway_simulator.dispatcher import WebhookDispatcher
from src.gateway_simulator.signer import NotificationSigner
from src.models.webhook import CollectWebhookData, OrderWebhookData
from src.utils.factories import WebhookFactory


pytestmark = pytest.mark.integration


API_SECRET = "test_secret_key"


@pytest.fixture
def live_signer():
    """Gateway-side signer on the real clock, matching the merchant server."""
    return NotificationSigner(API_SECRET)


class TestDeliverySuccess:
    """Happy-path delivery."""

    def test_signed_order_notification_accepted(self, dispatcher, merchant_server, live_signer):
        event = live_signer.build("ORDER_SUCCESS", WebhookFactory.create_event("ORDER_SUCCESS").data)
        attempt = dispatcher.deliver(event, merchant_server.url)

        assert attempt.status_code == 200
        assert attempt.error is None
        assert attempt.succeeded

        received = merchant_server.get_received_events()
        assert len(received) == 1
        assert received[0]["notify_type"] == "ORDER_SUCCESS"
        assert isinstance(received[0]["event"].data, OrderWebhookData)

    def test_collect_notification_projected(self, dispatcher, merchant_server, live_signer):
        event = live_signer.build("COLLECT_SUCCESS", {"collectAmount": 99.5, "fee": 0.5, "feeRatio": 0.005})
        dispatcher.deliver(event, merchant_server.url)

        data = merchant_server.get_received_events()[0]["event"].data
        assert isinstance(data, CollectWebhookData)
        assert data.collect_amount == 99.5
        assert data.transaction is None

    def test_delivery_headers(self, dispatcher, merchant_server, live_signer):
        event = live_signer.build("ORDER_PENDING", {"orderId": "order-1", "status": "PENDING"})
        dispatcher.deliver(event, merchant_server.url)

        headers = merchant_server.get_received_events()[0]["headers"]
        assert headers["Content-Type"] == "application/json"
        assert headers["X-Signature"] == event.sign
        assert headers["X-Timestamp"] == str(event.timestamp)
        assert headers["X-Notify-Type"] == "ORDER_PENDING"

    @pytest.mark.parametrize("code", [200, 201, 204])
    def test_2xx_responses_count_as_delivered(self, dispatcher, merchant_server, live_signer, code):
        merchant_server.set_response_code(code)
        attempt = dispatcher.deliver(live_signer.build("ORDER_PENDING", {}), merchant_server.url)
        assert attempt.status_code == code
        assert attempt.succeeded


class TestDeliveryFailures:
    """Rejected and unreachable deliveries are logged."""

    def test_wrong_secret_rejected_and_logged(self, dispatcher, delivery_logger, merchant_server):
        event = NotificationSigner("wrong-secret").build("ORDER_SUCCESS", {"orderId": "order-1"})
        attempt = dispatcher.deliver(event, merchant_server.url)

        assert attempt.status_code == 401
        assert not attempt.succeeded
        assert delivery_logger.get_failed_attempts() == [attempt]
        assert merchant_server.get_processed_count() == 0

    def test_merchant_500_is_a_failed_attempt(self, dispatcher, delivery_logger, merchant_server, live_signer):
        merchant_server.set_response_code(500)
        attempt = dispatcher.deliver(live_signer.build("ORDER_FAILED", {}), merchant_server.url)
        assert attempt.status_code == 500
        assert delivery_logger.get_failed_attempts() == [attempt]

    def test_unreachable_endpoint(self, dispatcher, live_signer):
        attempt = dispatcher.deliver(live_signer.build("ORDER_FAILED", {}), "http://127.0.0.1:9/webhook")
        assert attempt.status_code is None
        assert attempt.error == "connection_error"

    def test_timeout(self, delivery_logger, merchant_server, live_signer):
        merchant_server.set_response_delay(1.0)
        dispatcher = WebhookDispatcher(delivery_logger, timeout_seconds=0.2)
        attempt = dispatcher.deliver(live_signer.build("ORDER_PENDING", {}), merchant_server.url)
        assert attempt.status_code is None
        assert attempt.error == "timeout"


class TestDeliveryLogging:
    """DeliveryLogger bookkeeping."""

    def test_attempts_recorded_by_nonce(self, dispatcher, delivery_logger, merchant_server, live_signer):
        first = live_signer.build("ORDER_PENDING", {})
        second = live_signer.build("ORDER_SUCCESS", {})
        dispatcher.deliver(first, merchant_server.url)
        dispatcher.deliver(second, merchant_server.url)
        dispatcher.deliver(first, merchant_server.url)

        assert len(delivery_logger.get_attempts()) == 3
        assert len(delivery_logger.get_attempts(first.nonce)) == 2
        assert delivery_logger.get_attempts(second.nonce)[0].notify_type == "ORDER_SUCCESS"

    def test_clear(self, dispatcher, delivery_logger, merchant_server, live_signer):
        dispatcher.deliver(live_signer.build("ORDER_PENDING", {}), merchant_server.url)
        delivery_logger.clear()
        assert delivery_logger.get_attempts() == []

    def test_response_time_recorded(self, dispatcher, merchant_server, live_signer):
        attempt = dispatcher.deliver(live_signer.build("ORDER_PENDING", {}), merchant_server.url)
        assert attempt.response_time_ms >= 0
        assert attempt.attempt_id.startswith("att_")
