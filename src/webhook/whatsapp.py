"""WhatsApp webhook handlers: subscription handshake and message dispatch.

Handles the Meta verification challenge (GET), optional HMAC signature
verification, extraction of text messages from notification payloads, and
phrase-routed template replies.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
from collections.abc import Iterator, Mapping
from typing import Any

from src.webhook.config import WhatsAppConfig
from src.webhook.models import InboundMessage, WebhookResponse
from src.webhook.phrase_router import PhraseRouter
from src.webhook.sender import SendError, TemplateSender

logger = logging.getLogger(__name__)

WHATSAPP_OBJECT = "whatsapp_business_account"


class WhatsAppWebhook:
    """Handles WhatsApp Business Account webhook requests."""

    def __init__(
        self,
        config: WhatsAppConfig,
        sender: TemplateSender,
        router: PhraseRouter | None = None,
    ) -> None:
        self._config = config
        self._sender = sender
        self._router = router or PhraseRouter()

    @property
    def signature_required(self) -> bool:
        return bool(self._config.app_secret)

    def handle_verification(self, params: Mapping[str, str]) -> WebhookResponse:
        """Answer the subscription handshake.

        200 with the challenge on a valid subscribe, 403 on a mode or token
        mismatch, 400 when mode or token is absent.
        """
        mode = params.get("hub.mode")
        token = params.get("hub.verify_token")
        if not mode or not token:
            return WebhookResponse(text="Bad Request", status_code=400)

        token_ok = hmac.compare_digest(
            token.encode(), self._config.verify_token.encode(),
        )
        if mode == "subscribe" and token_ok:
            logger.info("WEBHOOK_VERIFIED")
            return WebhookResponse(
                text=params.get("hub.challenge") or "", status_code=200,
            )

        logger.warning("Webhook verification rejected (mode=%s)", mode)
        return WebhookResponse(text="Forbidden", status_code=403)

    def verify_signature(self, headers: Mapping[str, str], body: bytes) -> bool:
        """Check X-Hub-Signature-256 against the app secret.

        Always passes when no app secret is configured.
        """
        if not self._config.app_secret:
            return True

        signature = headers.get("x-hub-signature-256", "")
        if not signature.startswith("sha256="):
            return False

        expected = hmac.new(
            self._config.app_secret.encode(), body, hashlib.sha256,
        ).hexdigest()
        return hmac.compare_digest(signature[7:], expected)

    def iter_messages(self, payload: Mapping[str, Any]) -> Iterator[InboundMessage]:
        """Yield the first text message of every "messages" change.

        Later messages in the same change are ignored, as are non-text
        messages, empty bodies, messages without a sender, and any entry,
        change or value that is not an object.
        """
        for entry in _objects(payload.get("entry")):
            for change in _objects(entry.get("changes")):
                if change.get("field") != "messages":
                    continue
                value = change.get("value")
                if not isinstance(value, dict):
                    continue
                messages = value.get("messages")
                if not isinstance(messages, list) or not messages:
                    continue

                msg = messages[0]
                if not isinstance(msg, dict) or msg.get("type") != "text":
                    continue
                text = msg.get("text")
                body = text.get("body") if isinstance(text, dict) else None
                sender = msg.get("from")
                if not body or not isinstance(body, str) or not sender:
                    continue
                yield InboundMessage(sender=str(sender), text=body.lower())

    async def handle_notification(self, payload: Any) -> WebhookResponse:
        """Dispatch a notification payload and acknowledge it.

        The acknowledgment does not depend on whether any send succeeded.
        """
        try:
            if not isinstance(payload, dict):
                raise TypeError(f"Payload is {type(payload).__name__}, not an object")
            logger.debug("Received webhook: %s", json.dumps(payload, indent=2))

            if payload.get("object") != WHATSAPP_OBJECT:
                logger.warning("Ignoring webhook for object %r", payload.get("object"))
                return WebhookResponse(
                    text="Not a WhatsApp Business Account webhook", status_code=400,
                )

            for message in self.iter_messages(payload):
                await self._dispatch(message)
        except Exception:
            logger.exception("Error processing webhook")
            return WebhookResponse(text="Internal Server Error", status_code=500)

        return WebhookResponse(text="OK", status_code=200)

    async def _dispatch(self, message: InboundMessage) -> None:
        template = self._router.route(message.text)
        if template is None:
            logger.info("No matching template for message: %s", message.text)
            return

        # Isolated per message: never reaches the acknowledgment.
        try:
            await self._sender.send(message.sender, template)
        except SendError as exc:
            logger.error(
                "Failed to send template %s to %s: %s", template, message.sender, exc,
            )
        except Exception:
            logger.exception(
                "Unexpected error sending template %s to %s", template, message.sender,
            )


def _objects(items: Any) -> Iterator[dict[str, Any]]:
    """Yield the dict elements of a JSON list; anything else yields nothing."""
    if not isinstance(items, list):
        return
    for item in items:
        if isinstance(item, dict):
            yield item
