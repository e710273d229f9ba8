"""SDK configuration, loaded from ``XPAY_*`` environment variables via pydantic-settings."""

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://api.x-pay.fun"


class XPayConfig(BaseSettings):
    """Credentials and transport settings for the gateway client."""

    model_config = SettingsConfigDict(env_prefix="XPAY_", frozen=True)

    api_key: SecretStr
    api_secret: SecretStr
    base_url: str = DEFAULT_BASE_URL
    connect_timeout: float = Field(default=30, gt=0)
    read_timeout: float = Field(default=30, gt=0)

    @field_validator("api_key", "api_secret")
    @classmethod
    def not_blank(cls, v: SecretStr) -> SecretStr:
        # An empty HMAC key would still produce signatures
        if not v.get_secret_value().strip():
            raise ValueError("must not be empty")
        return v

    @classmethod
    def from_env(cls) -> "XPayConfig":
        """Build a config from ``XPAY_*`` environment variables."""
        return cls()
