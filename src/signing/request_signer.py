import logging
import time
from collections.abc import Mapping
from typing import Any, Callable

from src.models.request import SignedRequest
from src.models.value import normalize
from src.utils.canonical import canonicalize
from src.utils.crypto import generate_nonce, sign, signatures_match

logger = logging.getLogger(__name__)


class RequestSigner:
    """Wraps outbound API payloads in a signed ``{sign, timestamp, nonce, data}`` envelope."""

    def __init__(
        self,
        secret: str,
        clock: Callable[[], float] = time.time,
        nonce_source: Callable[[], str] = generate_nonce,
    ):
        self._secret = secret
        self._clock = clock
        self._nonce_source = nonce_source

    def sign_request(self, data: Any) -> SignedRequest:
        timestamp = int(self._clock())
        nonce = self._nonce_source()
        signature = self.compute_signature(data, nonce, timestamp)
        return SignedRequest(sign=signature, timestamp=timestamp, nonce=nonce, data=data)

    def compute_signature(self, data: Any, nonce: str | None, timestamp: int | None) -> str:
        params = {
            "data": normalize(data),
            "nonce": nonce,
            "timestamp": timestamp,
        }
        return sign(canonicalize(params), self._secret)

    def verify_envelope(self, body: Mapping) -> bool:
        """Check a decoded envelope the way the gateway does on receipt."""
        try:
            expected = self.compute_signature(body.get("data"), body.get("nonce"), body.get("timestamp"))
        except TypeError:
            logger.info("Envelope data is not an object")
            return False
        return signatures_match(expected, body.get("sign"))
