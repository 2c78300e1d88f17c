"""Shared test fixtures for the WhatsApp template webhook."""

from __future__ import annotations

from typing import Any

import pytest

from src.webhook.config import WhatsAppConfig


@pytest.fixture
def whatsapp_config() -> WhatsAppConfig:
    return WhatsAppConfig(
        verify_token="test_verify",
        access_token="test_access_token",
        phone_number_id="123456",
    )


# --- Factory functions for test data ---


def make_text_message(
    text: str = "hello", phone: str = "15551234567", **kwargs: Any,
) -> dict[str, Any]:
    """Factory for an inbound WhatsApp text message."""
    message: dict[str, Any] = {
        "from": phone,
        "id": "wamid.test",
        "timestamp": "1700000000",
        "type": "text",
        "text": {"body": text},
    }
    message.update(kwargs)
    return message


def make_notification_payload(
    messages: list[dict[str, Any]] | None = None,
    field: str = "messages",
    object_type: str = "whatsapp_business_account",
) -> dict[str, Any]:
    """Factory for a notification with a single entry and change."""
    if messages is None:
        messages = [make_text_message()]
    return {
        "object": object_type,
        "entry": [
            {
                "id": "BUSINESS_ID",
                "changes": [
                    {
                        "value": {
                            "messaging_product": "whatsapp",
                            "metadata": {"phone_number_id": "PHONE_ID"},
                            "messages": messages,
                        },
                        "field": field,
                    }
                ],
            }
        ],
    }
