"""Outbound template sender for the WhatsApp Cloud API.

One POST per call, authenticated with the configured bearer token. Failures
are logged and raised as SendError; there is no retry.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from src.webhook.config import WhatsAppConfig
from src.webhook.models import OutboundTemplateMessage

logger = logging.getLogger(__name__)


class SendError(Exception):
    """Raised when a template message could not be delivered to the API."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TemplateSender:
    """Sends named template messages via the WhatsApp Cloud API."""

    def __init__(self, config: WhatsAppConfig) -> None:
        self._config = config

    async def send(
        self, recipient: str, template_name: str | None = None,
    ) -> dict[str, Any]:
        template_name = template_name or self._config.default_template
        message = OutboundTemplateMessage.for_template(recipient, template_name)
        headers = {
            "Authorization": f"Bearer {self._config.access_token}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(verify=True) as client:
                resp = await client.post(
                    self._config.messages_url,
                    json=message.model_dump(),
                    headers=headers,
                )
        except httpx.HTTPError as exc:
            logger.error(
                "Error sending template %s to %s: %s", template_name, recipient, exc,
            )
            raise SendError(f"Transport error: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            logger.error(
                "Template %s to %s rejected with status %d: %s",
                template_name, recipient, resp.status_code, resp.text,
            )
            raise SendError(
                f"WhatsApp API returned {resp.status_code}",
                status_code=resp.status_code,
            )

        try:
            data: dict[str, Any] = resp.json()
        except ValueError as exc:
            logger.error("Undecodable response for template %s: %s", template_name, exc)
            raise SendError(
                "WhatsApp API returned a non-JSON body", status_code=resp.status_code,
            ) from exc

        logger.info("Template %s sent to %s: %s", template_name, recipient, data)
        return data
