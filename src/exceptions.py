class MalformedInput(ValueError):
    """Raised when an inbound body cannot be decoded into the expected shape."""


class SigningFailure(RuntimeError):
    """Raised when the HMAC primitive itself is unusable."""


class XPayApiError(Exception):
    """Non-2xx answer from the gateway API."""

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        error_code: int = 0,
        error_data=None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.error_data = error_data


class XPayNetworkError(XPayApiError):
    """The request never produced an HTTP response (timeout, refused connection)."""
