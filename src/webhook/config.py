"""WhatsApp Cloud API configuration loaded once at startup."""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field

_REQUIRED_ENV = {
    "verify_token": "WHATSAPP_VERIFY_TOKEN",
    "access_token": "WHATSAPP_TOKEN",
    "phone_number_id": "WHATSAPP_PHONE_NUMBER_ID",
}


class ConfigError(ValueError):
    """Raised when required configuration is missing."""


class WhatsAppConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    verify_token: str = Field(min_length=1)
    access_token: str = Field(min_length=1)
    phone_number_id: str = Field(min_length=1)
    app_secret: str | None = None
    api_base: str = "https://graph.facebook.com"
    api_version: str = "v22.0"
    default_template: str = "toxic_survey"

    @property
    def messages_url(self) -> str:
        return f"{self.api_base.rstrip('/')}/{self.api_version}/{self.phone_number_id}/messages"

    @classmethod
    def from_env(cls) -> WhatsAppConfig:
        """Build config from environment variables.

        Raises ConfigError listing every missing required variable.
        """
        missing = [env for env in _REQUIRED_ENV.values() if not os.environ.get(env)]
        if missing:
            raise ConfigError(
                f"Missing required environment variables: {', '.join(missing)}",
            )

        values: dict[str, str] = {
            field: os.environ[env] for field, env in _REQUIRED_ENV.items()
        }
        optional = {
            "app_secret": "WHATSAPP_APP_SECRET",
            "api_base": "WHATSAPP_API_BASE",
            "api_version": "WHATSAPP_API_VERSION",
        }
        for field, env in optional.items():
            value = os.environ.get(env)
            if value:
                values[field] = value
        return cls(**values)
