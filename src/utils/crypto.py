import hashlib
import hmac
import uuid

from src.exceptions import SigningFailure


def sign(message: str, secret: str) -> str:
    """HMAC-SHA256 of ``message`` keyed by ``secret``, as 64 lowercase hex chars."""
    try:
        mac = hmac.new(
            secret.encode("utf-8"),
            message.encode("utf-8"),
            hashlib.sha256,
        )
    except ValueError as exc:
        # hashlib raises ValueError when sha256 is disabled (e.g. FIPS builds)
        raise SigningFailure("HMAC-SHA256 is unavailable") from exc
    return mac.hexdigest()


def signatures_match(expected: str, signature: str | None) -> bool:
    """Constant-time comparison of two hex signatures."""
    if not isinstance(signature, str) or not signature:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))


def generate_nonce() -> str:
    """32 lowercase hex characters, a UUID4 without separators."""
    return uuid.uuid4().hex
