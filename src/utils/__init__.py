from .canonical import canonicalize, plain_string
from .crypto import generate_nonce, sign, signatures_match
from .factories import RequestFactory, WebhookFactory

__all__ = [
    "canonicalize", "plain_string",
    "generate_nonce", "sign", "signatures_match",
    "RequestFactory", "WebhookFactory",
]
