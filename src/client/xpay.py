import time
from typing import Callable

from src.client.api_client import ApiClient
from src.client.config import XPayConfig
from src.models.request import CollectionRequest, PayoutRequest
from src.models.response import (
    ApiResponse,
    CollectionData,
    OrderDetails,
    PayoutData,
    SupportedSymbol,
)
from src.models.webhook import WebhookEvent
from src.signing.request_signer import RequestSigner
from src.signing.webhook_verifier import WebhookVerifier
from src.utils.crypto import generate_nonce


class XPay:
    """Entry point for merchants: signed order calls and webhook verification."""

    def __init__(
        self,
        config: XPayConfig,
        clock: Callable[[], float] = time.time,
        nonce_source: Callable[[], str] = generate_nonce,
    ):
        self.config = config
        self.api_client = ApiClient(config)
        secret = config.api_secret.get_secret_value()
        self.signer = RequestSigner(secret, clock=clock, nonce_source=nonce_source)
        self.verifier = WebhookVerifier(secret, clock=clock)

    def create_payout(self, request: PayoutRequest) -> ApiResponse[PayoutData]:
        signed = self.signer.sign_request(request)
        return self.api_client.post(
            "/v1/order/createPayout",
            signed.to_dict(),
            lambda body: ApiResponse.from_dict(body, PayoutData.from_dict),
        )

    def create_collection(self, request: CollectionRequest) -> ApiResponse[CollectionData]:
        signed = self.signer.sign_request(request)
        return self.api_client.post(
            "/v1/order/createCollection",
            signed.to_dict(),
            lambda body: ApiResponse.from_dict(body, CollectionData.from_dict),
        )

    def get_order_status(self, order_id: str) -> ApiResponse[OrderDetails]:
        return self.api_client.get(
            f"/v1/order/status/{order_id}",
            decode=lambda body: ApiResponse.from_dict(body, OrderDetails.from_dict),
        )

    def get_supported_symbols(
        self, chain: str | None = None, symbol: str | None = None,
    ) -> ApiResponse[list[SupportedSymbol]]:
        return self.api_client.get(
            "/v1/symbol/supportSymbols",
            {"chain": chain, "symbol": symbol},
            lambda body: ApiResponse.from_dict(
                body, lambda items: [SupportedSymbol.from_dict(i) for i in items]
            ),
        )

    def verify_webhook(self, body: bytes | str, signature: str, timestamp: str) -> bool:
        return self.verifier.verify(body, signature, timestamp)

    def parse_webhook(self, body: bytes | str, signature: str, timestamp: str) -> WebhookEvent | None:
        return self.verifier.parse(body, signature, timestamp)
