"""Webhook processor — one inbound event in, at most one reply sequence out.

Pipeline for a text message:
    load history → generate reply → split → deliver → save history

process_inbound_event() never raises. The only non-success outcome is a
new-message event without a sender; every other failure is logged and
absorbed so WaSenderAPI always gets its acknowledgment.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any

from .communication.delivery import DeliveryScheduler
from .communication.inbound import (
    IgnoredEvent,
    SelfMessage,
    MissingSender,
    StubMessage,
    TextMessage,
    UnsupportedMessage,
    classify_event,
)
from .communication.outbound import split_message
from .llm.provider import Turn, USER_ROLE, MODEL_ROLE
from .reply import ReplyGenerator
from .store import ConversationStore

logger = logging.getLogger("wagemini.processor")

STATUS_OK = "ok"
STATUS_CLIENT_ERROR = "client_error"


@dataclass(frozen=True)
class ProcessResult:
    status: str     # 'ok' or 'client_error'
    detail: str

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK


def _preview(raw: Any, limit: int = 200) -> str:
    try:
        text = json.dumps(raw, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        text = repr(raw)
    return text[:limit]


class WebhookProcessor:
    """Orchestrates classification, generation, chunking, delivery and history."""

    def __init__(
        self,
        store: ConversationStore,
        generator: ReplyGenerator,
        scheduler: DeliveryScheduler,
        max_lines: int = 3,
        max_chars_per_line: int = 100,
    ):
        self.store = store
        self.generator = generator
        self.scheduler = scheduler
        self.max_lines = max_lines
        self.max_chars_per_line = max_chars_per_line
        # One lock per storage key: same-user events run their
        # load → save cycle one at a time within this process.
        self._user_locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, storage_key: str) -> asyncio.Lock:
        lock = self._user_locks.get(storage_key)
        if lock is None:
            lock = asyncio.Lock()
            self._user_locks[storage_key] = lock
        return lock

    async def process_inbound_event(self, raw_event: Any) -> ProcessResult:
        """Handle one raw webhook payload."""
        logger.info(f"Received webhook data (first 200 chars): {_preview(raw_event)}")
        try:
            return await self._dispatch(classify_event(raw_event))
        except Exception as e:
            logger.exception(f"Error processing webhook: {type(e).__name__}: {e}")
            return ProcessResult(STATUS_OK, "Processing error logged")

    async def _dispatch(self, event) -> ProcessResult:
        if isinstance(event, IgnoredEvent):
            if event.event:
                logger.info(f"Ignoring event '{event.event}' (not a new message)")
            return ProcessResult(STATUS_OK, "Event ignored")

        if isinstance(event, SelfMessage):
            logger.info(f"Ignoring self-sent message: {event.message_id}")
            return ProcessResult(STATUS_OK, "Self-sent message ignored")

        if isinstance(event, MissingSender):
            logger.warning("Webhook received message without sender information.")
            return ProcessResult(STATUS_CLIENT_ERROR, "Incomplete sender data")

        if isinstance(event, StubMessage):
            logger.info(
                f"Received system message of type {event.stub_type} from {event.sender}. "
                f"Stub params: {event.parameters}"
            )
            return ProcessResult(STATUS_OK, "System message processed")

        if isinstance(event, TextMessage):
            await self._handle_text(event)
            return ProcessResult(STATUS_OK, "Message processed")

        if isinstance(event, UnsupportedMessage):
            logger.info(
                f"Received '{event.message_type}' message from {event.sender}. No text content. "
                f"Data: {_preview(event.payload, 500)}"
            )
            return ProcessResult(STATUS_OK, "Non-text message ignored")

        raise TypeError(f"Unhandled inbound event type: {type(event).__name__}")

    async def _handle_text(self, event: TextMessage) -> None:
        key = event.storage_key
        logger.info(f"Processing text message from {event.sender} ({key}): {event.text}")

        async with self._lock_for(key):
            history = self.store.load(key)
            reply = await self.generator.generate(event.text, history)

            if not reply:
                logger.warning(f"Empty reply for {key}; history not updated")
                return

            chunks = split_message(reply, self.max_lines, self.max_chars_per_line)
            sent = await self.scheduler.send_all(event.send_target, chunks)
            if sent < len(chunks):
                logger.warning(f"Delivered {sent}/{len(chunks)} chunks to {event.send_target}")
            else:
                logger.info(f"Delivered {sent} chunk(s) to {event.send_target}")

            history = history + [
                Turn(role=USER_ROLE, content=event.text),
                Turn(role=MODEL_ROLE, content=reply),
            ]
            self.store.save(key, history)
