import json
import threading
import time
import uuid
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Self
from urllib.parse import parse_qs, urlparse

from src.gateway_simulator.dispatcher import WebhookDispatcher
from src.gateway_simulator.logger import DeliveryLogger
from src.gateway_simulator.signer import NotificationSigner
from src.models.delivery import DeliveryAttempt
from src.models.enums import WebhookNotifyType
from src.signing.request_signer import RequestSigner

DEFAULT_SYMBOLS = [
    {"symbol": "USDT", "chain": "TRON", "decimals": 6,
     "contractAddress": "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6t", "minAmount": 1.0, "maxAmount": 100000.0},
    {"symbol": "USDT", "chain": "ETH", "decimals": 6,
     "contract": "0xdAC17F958D2ee523a2206206994597C13D831ec7", "minAmount": 10.0, "maxAmount": 100000.0},
    {"symbol": "TRX", "chain": "TRON", "decimals": 6, "minAmount": 10.0, "maxAmount": 500000.0},
]


class _GatewayHandler(BaseHTTPRequestHandler):
    """HTTP request handler emulating the gateway's order API."""

    def _reply(self, status: int, body: dict) -> None:
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.end_headers()
        self.wfile.write(json.dumps(body).encode())

    def _authorized(self, config: dict) -> bool:
        if config["api_key"] and self.headers.get("X-API-TOKEN") != config["api_key"]:
            self._reply(401, {"code": 401, "msg": "invalid api token", "data": None})
            return False
        return True

    def do_POST(self):
        config = self.server.config  # type: ignore[attr-defined]
        path = urlparse(self.path).path
        content_length = int(self.headers.get("Content-Length", 0))
        raw = self.rfile.read(content_length)

        if not self._authorized(config):
            return
        if config["response_code"] != 200:
            self._reply(config["response_code"], {"code": config["response_code"], "msg": "simulated error"})
            return

        try:
            envelope = json.loads(raw)
        except (json.JSONDecodeError, ValueError):
            self._reply(400, {"code": 400, "msg": "invalid JSON", "data": None})
            return
        if not isinstance(envelope, dict):
            self._reply(400, {"code": 400, "msg": "invalid envelope", "data": None})
            return

        if not config["signer"].verify_envelope(envelope):
            self._reply(401, {"code": 401, "msg": "invalid signature", "data": None})
            return

        data = envelope.get("data") or {}
        with config["lock"]:
            config["received_requests"].append({"path": path, "envelope": envelope})

        if path == "/v1/order/createPayout":
            order = _store_order(config, "PAYOUT", data)
            self._reply(200, {"code": 0, "msg": "success", "data": {
                "orderId": order["orderId"],
                "status": order["status"],
                "amount": str(data.get("amount")),
                "symbol": data.get("symbol"),
                "chain": data.get("chain"),
                "uid": data.get("uid"),
                "receiveAddress": data.get("receiveAddress"),
            }})
        elif path == "/v1/order/createCollection":
            order = _store_order(config, "COLLECTION", data)
            self._reply(200, {"code": 0, "msg": "success", "data": {
                "address": order["address"],
                "amount": str(data.get("amount")),
                "symbol": data.get("symbol"),
                "chain": data.get("chain"),
                "uid": data.get("uid"),
                "orderId": order["orderId"],
                "expiredTime": int(time.time()) + 1800,
            }})
        else:
            self._reply(404, {"code": 404, "msg": "not found", "data": None})

    def do_GET(self):
        config = self.server.config  # type: ignore[attr-defined]
        url = urlparse(self.path)

        if not self._authorized(config):
            return
        if config["response_code"] != 200:
            self._reply(config["response_code"], {"code": config["response_code"], "msg": "simulated error"})
            return

        if url.path.startswith("/v1/order/status/"):
            order_id = url.path.rsplit("/", 1)[-1]
            with config["lock"]:
                order = config["orders"].get(order_id)
            if order is None:
                self._reply(404, {"code": 404, "msg": "order not found", "data": None})
                return
            self._reply(200, {"code": 0, "msg": "success", "data": {
                "orderId": order["orderId"],
                "orderType": order["orderType"],
                "status": order["status"],
                "reason": None,
            }})
        elif url.path == "/v1/symbol/supportSymbols":
            query = {k: v[0] for k, v in parse_qs(url.query).items()}
            symbols = [
                s for s in config["symbols"]
                if all(s.get(k) == v for k, v in query.items() if k in ("chain", "symbol"))
            ]
            self._reply(200, {"code": 0, "msg": "success", "data": symbols})
        else:
            self._reply(404, {"code": 404, "msg": "not found", "data": None})

    def log_message(self, format, *args):
        """Suppress default request logging."""
        pass


def _store_order(config: dict, order_type: str, data: dict) -> dict:
    order = {
        "orderId": data.get("orderId") or f"order-{uuid.uuid4().hex[:16]}",
        "orderType": order_type,
        "status": "PENDING",
        "address": f"T{uuid.uuid4().hex[:33]}",
        "data": data,
    }
    with config["lock"]:
        config["orders"][order["orderId"]] = order
    return order


class MockGatewayServer:
    """Local stand-in for the payment gateway: checks signed requests, pushes signed webhooks."""

    def __init__(self, host: str = "127.0.0.1", port: int = 0, secret: str = "", api_key: str = ""):
        self._host = host
        self._port = port
        self._config = {
            "api_key": api_key,
            "signer": RequestSigner(secret),
            "response_code": 200,
            "orders": {},
            "symbols": list(DEFAULT_SYMBOLS),
            "received_requests": [],
            "lock": threading.Lock(),
        }
        self.notification_signer = NotificationSigner(secret)
        self.delivery_logger = DeliveryLogger()
        self.dispatcher = WebhookDispatcher(self.delivery_logger, timeout_seconds=5)
        self._server: ThreadingHTTPServer | None = None
        self._thread: threading.Thread | None = None

    def set_response_code(self, code: int) -> Self:
        self._config["response_code"] = code
        return self

    def start(self) -> None:
        self._server = ThreadingHTTPServer((self._host, self._port), _GatewayHandler)
        self._server.config = self._config  # type: ignore[attr-defined]
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
    def base_url(self) -> str:
        return f"http://{self._host}:{self._port}"

    def get_received_requests(self) -> list[dict]:
        with self._config["lock"]:
            return list(self._config["received_requests"])

    def get_order(self, order_id: str) -> dict | None:
        with self._config["lock"]:
            return self._config["orders"].get(order_id)

    def notify(self, order_id: str, notify_type: WebhookNotifyType, url: str) -> DeliveryAttempt:
        """Move an order to the state ``notify_type`` implies and push the webhook."""
        with self._config["lock"]:
            order = self._config["orders"][order_id]
            if notify_type.order_status is not None:
                order["status"] = notify_type.order_status.value
            snapshot = dict(order)

        if notify_type.is_order:
            data = {
                "orderId": snapshot["orderId"],
                "orderType": snapshot["orderType"],
                "status": snapshot["status"],
                "reason": None,
            }
        else:
            amount = snapshot["data"].get("amount") or 0
            data = {
                "collectAmount": amount,
                "fee": 0.0,
                "feeRatio": 0.0,
                "reason": None,
                "transaction": {
                    "chain": snapshot["data"].get("chain"),
                    "symbol": snapshot["data"].get("symbol"),
                    "to": snapshot["address"],
                    "amount": amount,
                    "confirmedNum": 20,
                    "status": "SUCCESS",
                },
            }

        event = self.notification_signer.build(notify_type, data)
        return self.dispatcher.deliver(event, url)
