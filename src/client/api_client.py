import json
import logging
from typing import Any, Callable, TypeVar

import requests

from src.client.config import XPayConfig
from src.exceptions import XPayApiError, XPayNetworkError

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ApiClient:
    """Thin JSON-over-HTTP client for the gateway API. No retries."""

    def __init__(self, config: XPayConfig):
        self.base_url = config.base_url.rstrip("/")
        self.timeout = (config.connect_timeout, config.read_timeout)
        self._api_key = config.api_key.get_secret_value()

    def _headers(self) -> dict[str, str]:
        return {
            "X-API-TOKEN": self._api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def get(self, path: str, params: dict[str, str | None] | None = None,
            decode: Callable[[dict], T] | None = None) -> T | dict:
        query = {k: v for k, v in (params or {}).items() if v is not None}
        return self._execute("GET", path, decode, params=query)

    def post(self, path: str, body: dict, decode: Callable[[dict], T] | None = None) -> T | dict:
        return self._execute("POST", path, decode, data=json.dumps(body))

    def _execute(self, method: str, path: str, decode: Callable[[dict], T] | None, **kwargs: Any) -> T | dict:
        url = f"{self.base_url}{path}"
        try:
            resp = requests.request(
                method,
                url,
                headers=self._headers(),
                timeout=self.timeout,
                **kwargs,
            )
        except requests.exceptions.Timeout as e:
            raise XPayNetworkError(f"Network error: timeout calling {path}") from e
        except requests.exceptions.RequestException as e:
            raise XPayNetworkError(f"Network error: {e}") from e

        logger.debug("%s %s -> %d", method, path, resp.status_code)

        if not resp.ok:
            self._raise_api_error(resp)

        try:
            body = resp.json()
        except ValueError as e:
            raise XPayApiError(
                f"Error parsing response: {e}\nResponse body: {resp.text[:500]}",
                status_code=resp.status_code,
            ) from e
        return decode(body) if decode else body

    @staticmethod
    def _raise_api_error(resp: requests.Response) -> None:
        try:
            body = resp.json()
            message = body.get("msg") or "API error"
            error_code = body.get("code") or 0
            error_data = body.get("data")
        except (ValueError, AttributeError):
            message = f"API error: {resp.reason}"
            error_code = 0
            error_data = None
        logger.warning("Gateway returned %d: %s", resp.status_code, message)
        raise XPayApiError(message, resp.status_code, error_code, error_data)
