"""HTTP surface — the WaSenderAPI webhook endpoint."""

import json
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__
from .communication.delivery import DeliveryScheduler
from .communication.wasender import WaSenderClient
from .config import Settings, load_settings
from .llm.google import GoogleProvider
from .persona import load_persona
from .processor import WebhookProcessor
from .reply import ReplyGenerator
from .store import ConversationStore, FileRecordStore

logger = logging.getLogger("wagemini.server")


def build_processor(settings: Settings) -> WebhookProcessor:
    """Wire the pipeline from settings. Persona and credentials are read once here."""
    persona = load_persona(settings.persona_file)

    completion = None
    if settings.gemini_api_key:
        completion = GoogleProvider(
            api_key=settings.gemini_api_key,
            chat_model=settings.gemini_model,
            temperature=settings.temperature,
            top_k=settings.top_k,
            top_p=settings.top_p,
            max_output_tokens=settings.max_output_tokens,
        )

    delivery = WaSenderClient(settings.wasender_api_token, settings.wasender_api_url)

    return WebhookProcessor(
        store=ConversationStore(FileRecordStore(settings.conversations_dir)),
        generator=ReplyGenerator(completion, persona.system_instruction),
        scheduler=DeliveryScheduler(delivery),
    )


def create_app(
    settings: Optional[Settings] = None,
    processor: Optional[WebhookProcessor] = None,
) -> FastAPI:
    """Create the FastAPI app. Pass ``processor`` to skip wiring from settings."""
    if processor is None:
        processor = build_processor(settings or load_settings())

    app = FastAPI(title="wagemini", version=__version__)
    app.state.processor = processor

    @app.post("/webhook")
    async def webhook(request: Request):
        """Receive WaSenderAPI events.

        Always 200 unless the body is not JSON or the message has no sender,
        so the provider does not keep redelivering events we already handled.
        """
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Webhook body is not valid JSON")
            return JSONResponse(status_code=400, content={"status": "error", "message": "Invalid JSON"})

        result = await app.state.processor.process_inbound_event(payload)
        if not result.ok:
            return JSONResponse(status_code=400, content={"status": "error", "message": result.detail})
        return {"status": "success", "message": result.detail}

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app
