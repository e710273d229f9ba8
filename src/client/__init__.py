from .api_client import ApiClient
from .config import XPayConfig
from .xpay import XPay

__all__ = ["ApiClient", "XPayConfig", "XPay"]
