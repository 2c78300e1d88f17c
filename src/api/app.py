"""FastAPI application exposing the WhatsApp template webhook."""

from __future__ import annotations

import json
import logging
import os

from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse

from src.webhook.config import WhatsAppConfig
from src.webhook.models import WebhookResponse
from src.webhook.phrase_router import PhraseRouter
from src.webhook.sender import TemplateSender
from src.webhook.whatsapp import WhatsAppWebhook

logger = logging.getLogger(__name__)

WEBHOOK_PATH = "/api/webhook"


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables.

    Fails fast with ConfigError when a required variable is missing.
    """
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return create_app(WhatsAppConfig.from_env())


def create_app(
    config: WhatsAppConfig,
    sender: TemplateSender | None = None,
    router: PhraseRouter | None = None,
) -> FastAPI:
    """Create the webhook FastAPI app."""
    app = FastAPI(docs_url=None, redoc_url=None)
    webhook = WhatsAppWebhook(
        config=config,
        sender=sender or TemplateSender(config),
        router=router,
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get(WEBHOOK_PATH)
    async def verify(request: Request) -> Response:
        result = webhook.handle_verification(request.query_params)
        return _to_response(result)

    @app.post(WEBHOOK_PATH)
    async def notify(request: Request) -> Response:
        body = await request.body()

        if not webhook.verify_signature(request.headers, body):
            logger.warning("Rejected webhook with invalid signature")
            return PlainTextResponse("Invalid signature", status_code=401)

        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.error("Error processing webhook: %s", exc)
            return PlainTextResponse("Internal Server Error", status_code=500)

        result = await webhook.handle_notification(payload)
        return _to_response(result)

    return app


def _to_response(result: WebhookResponse) -> Response:
    return PlainTextResponse(result.text, status_code=result.status_code)
