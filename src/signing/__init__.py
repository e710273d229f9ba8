from .request_signer import RequestSigner
from .webhook_verifier import VerificationResult, WebhookVerifier

__all__ = [
    "RequestSigner",
    "VerificationResult",
    "WebhookVerifier",
]
