"""Inbound webhook events — classify raw WaSenderAPI payloads.

Payloads arrive as loosely-structured JSON. classify_event() turns one into
exactly one of the event types below; the processor dispatches on the
type and never probes raw fields itself.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Optional, Union

MESSAGE_UPSERT_EVENT = "messages.upsert"
PERSONAL_JID_SUFFIX = "@s.whatsapp.net"

_UNSAFE_KEY_CHARS = re.compile(r"[^a-zA-Z0-9]")


# ============================================================
# EVENT TYPES
# ============================================================

@dataclass(frozen=True)
class IgnoredEvent:
    """Not a new-message event (delivery receipts, presence, …)."""
    event: Optional[str]


@dataclass(frozen=True)
class SelfMessage:
    """Echo of a message the bot itself sent."""
    message_id: Optional[str]


@dataclass(frozen=True)
class MissingSender:
    """A new message without a sender JID."""
    pass


@dataclass(frozen=True)
class StubMessage:
    """System notification (group membership change, etc.)."""
    sender: str
    stub_type: Any
    parameters: list = field(default_factory=list)


@dataclass(frozen=True)
class TextMessage:
    """A plain-text message that gets a reply."""
    sender: str
    text: str

    @property
    def send_target(self) -> str:
        return to_send_target(self.sender)

    @property
    def storage_key(self) -> str:
        return to_storage_key(self.sender)


@dataclass(frozen=True)
class UnsupportedMessage:
    """A message with no extractable text (media, reactions, …)."""
    sender: str
    message_type: str
    payload: dict = field(default_factory=dict)


InboundEvent = Union[IgnoredEvent, SelfMessage, MissingSender, StubMessage, TextMessage, UnsupportedMessage]


# ============================================================
# SENDER NORMALIZATION
# ============================================================

def to_send_target(sender: str) -> str:
    """Address used for outbound sends: personal JIDs lose their domain."""
    if sender and PERSONAL_JID_SUFFIX in sender:
        return sender.split("@")[0]
    return sender


def to_storage_key(sender: str) -> str:
    """Filesystem-safe key: every non-alphanumeric character becomes '_'."""
    return _UNSAFE_KEY_CHARS.sub("_", sender)


# ============================================================
# CLASSIFICATION
# ============================================================

def _extract_text(message: Any) -> Optional[str]:
    if not isinstance(message, dict):
        return None
    text = message.get("conversation")
    if isinstance(text, str) and text:
        return text
    extended = message.get("extendedTextMessage")
    if isinstance(extended, dict):
        text = extended.get("text")
        if isinstance(text, str) and text:
            return text
    return None


def _message_type(message: Any) -> str:
    if isinstance(message, dict) and message:
        return next(iter(message))
    return "unknown"


def classify_event(raw: Any) -> InboundEvent:
    """Classify a raw webhook payload.

    Rules, first match wins:
      1. not a ``messages.upsert`` with a message object → IgnoredEvent
      2. ``key.fromMe`` → SelfMessage
      3. no ``key.remoteJid`` → MissingSender
      4. ``messageStubType`` set → StubMessage
      5. text in ``conversation`` / ``extendedTextMessage.text`` → TextMessage
      6. anything else → UnsupportedMessage
    """
    if not isinstance(raw, dict):
        return IgnoredEvent(event=None)

    event = raw.get("event")
    data = raw.get("data")
    info = data.get("messages") if isinstance(data, dict) else None
    if event != MESSAGE_UPSERT_EVENT or not isinstance(info, dict):
        return IgnoredEvent(event=event if isinstance(event, str) else None)

    key = info.get("key") if isinstance(info.get("key"), dict) else {}
    if key.get("fromMe"):
        return SelfMessage(message_id=key.get("id"))

    sender = key.get("remoteJid")
    if not isinstance(sender, str) or not sender:
        return MissingSender()

    if info.get("messageStubType"):
        params = info.get("messageStubParameters") or []
        return StubMessage(
            sender=sender,
            stub_type=info["messageStubType"],
            parameters=list(params) if isinstance(params, list) else [params],
        )

    message = info.get("message")
    text = _extract_text(message)
    if text is not None:
        return TextMessage(sender=sender, text=text)

    return UnsupportedMessage(sender=sender, message_type=_message_type(message), payload=info)
