"""Pytest configuration and shared fixtures."""

import pytest

from wagemini.store import ConversationStore, FileRecordStore


class RecordingDelivery:
    """DeliveryCapability fake: records sends, fails on chosen call numbers."""

    def __init__(self, fail_on: tuple[int, ...] = ()):
        self.fail_on = fail_on
        self.calls: list[tuple[str, str]] = []

    async def send(self, recipient: str, text: str) -> bool:
        self.calls.append((recipient, text))
        return len(self.calls) not in self.fail_on


async def no_sleep(seconds: float) -> None:
    return None


@pytest.fixture
def conversations_dir(tmp_path):
    return tmp_path / "conversations"


@pytest.fixture
def store(conversations_dir):
    return ConversationStore(FileRecordStore(str(conversations_dir)))


@pytest.fixture
def delivery():
    return RecordingDelivery()


def text_event(sender="6281234567890@s.whatsapp.net", text="hello", from_me=False, **extra):
    """Build a WaSenderAPI messages.upsert payload."""
    info = {
        "key": {"id": "MSG1", "fromMe": from_me, "remoteJid": sender},
        "message": {"conversation": text},
    }
    info.update(extra)
    return {"event": "messages.upsert", "data": {"messages": info}}
