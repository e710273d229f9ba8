import json
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Callable, Self

from src.exceptions import MalformedInput
from src.signing.webhook_verifier import SIGNATURE_HEADER, TIMESTAMP_HEADER, WebhookVerifier


class _WebhookHandler(BaseHTTPRequestHandler):
    """HTTP request handler for receiving gateway webhooks."""

    def _reply(self, status: int, body: dict | None) -> None:
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.end_headers()
        if body is not None:
            self.wfile.write(json.dumps(body).encode())

    def do_POST(self):
        content_length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(content_length)

        server_config = self.server.config  # type: ignore[attr-defined]

        # Simulate slow response
        if server_config["response_delay"] > 0:
            time.sleep(server_config["response_delay"])

        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, ValueError):
            self._reply(400, {"error": "invalid JSON"})
            return
        if not isinstance(payload, dict):
            self._reply(400, {"error": "invalid JSON"})
            return

        # Headers win; the body's own copies are the fallback
        signature = self.headers.get(SIGNATURE_HEADER) or payload.get("sign")
        timestamp = self.headers.get(TIMESTAMP_HEADER) or payload.get("timestamp")
        if not signature:
            self._reply(401, {"error": "missing signature"})
            return
        if timestamp is None:
            self._reply(400, {"error": "missing timestamp"})
            return

        verifier: WebhookVerifier = server_config["verifier"]
        try:
            event = verifier.parse(body, signature, timestamp)
        except MalformedInput as e:
            self._reply(400, {"error": str(e)})
            return
        if event is None:
            self._reply(401, {"error": "invalid signature"})
            return

        # Idempotency check and record happen under one lock acquisition
        nonce = event.nonce or ""
        with server_config["lock"]:
            duplicate = (
                server_config["idempotency_enabled"]
                and bool(nonce)
                and nonce in server_config["processed_nonces"]
            )
            if not duplicate:
                server_config["received_events"].append({
                    "nonce": nonce,
                    "notify_type": event.notify_type.name,
                    "event": event,
                    "payload": payload,
                    "headers": dict(self.headers),
                })
                if nonce:
                    server_config["processed_nonces"].add(nonce)

        if duplicate:
            self._reply(200, {"status": "already_processed"})
            return

        code = server_config["response_code"]
        self._reply(code, {"status": "ok"} if 200 <= code < 300 and code != 204 else None)

    def log_message(self, format, *args):
        """Suppress default request logging."""
        pass


class MerchantWebhookServer:
    """Configurable HTTP server that plays the merchant's webhook endpoint."""

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int = 0,
        secret: str = "",
        clock: Callable[[], float] = time.time,
    ):
        self._host = host
        self._port = port
        self._config = {
            "response_code": 200,
            "response_delay": 0,
            "verifier": WebhookVerifier(secret, clock=clock),
            "idempotency_enabled": False,
            "received_events": [],
            "processed_nonces": set(),
            "lock": threading.Lock(),
        }
        self._server: ThreadingHTTPServer | None = None
        self._thread: threading.Thread | None = None

    def set_response_code(self, code: int) -> Self:
        self._config["response_code"] = code
        return self

    def set_response_delay(self, seconds: float) -> Self:
        self._config["response_delay"] = seconds
        return self

    def enable_idempotency(self) -> Self:
        self._config["idempotency_enabled"] = True
        return self

    def start(self) -> None:
        self._server = ThreadingHTTPServer((self._host, self._port), _WebhookHandler)
        self._server.config = self._config  # type: ignore[attr-defined]
        # Get the actual port (useful when port=0)
        self._port = self._server.server_address[1]
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        if self._server:
            self._server.shutdown()
            self._server.server_close()
            self._server = None
        if self._thread:
            self._thread.join(timeout=5)
            self._thread = None

    @property
    def url(self) -> str:
        return f"http://{self._host}:{self._port}/webhook"

    @property
    def port(self) -> int:
        return self._port

    def get_received_events(self) -> list[dict]:
        with self._config["lock"]:
            return list(self._config["received_events"])

    def get_processed_count(self) -> int:
        with self._config["lock"]:
            return len(self._config["received_events"])

    def was_nonce_processed(self, nonce: str) -> bool:
        with self._config["lock"]:
            return nonce in self._config["processed_nonces"]

    def clear_events(self) -> None:
        with self._config["lock"]:
            self._config["received_events"].clear()
            self._config["processed_nonces"].clear()
