"""Data models for the WhatsApp template webhook."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class InboundMessage:
    """A text message extracted from a notification payload."""

    sender: str
    text: str


@dataclass
class WebhookResponse:
    """Plain-text response to return to the messaging platform."""

    text: str
    status_code: int


# --- Outbound template message ---


class TemplateLanguage(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str = "en_US"


class OutboundTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    language: TemplateLanguage = Field(default_factory=TemplateLanguage)
    components: list[dict[str, Any]] = Field(default_factory=list)  # dynamic fields, unused


class OutboundTemplateMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    messaging_product: Literal["whatsapp"] = "whatsapp"
    recipient_type: Literal["individual"] = "individual"
    to: str
    type: Literal["template"] = "template"
    template: OutboundTemplate

    @classmethod
    def for_template(cls, recipient: str, template_name: str) -> OutboundTemplateMessage:
        return cls(to=recipient, template=OutboundTemplate(name=template_name))
