"""Conversation storage — one JSON record of Gemini-shaped turns per user.

Records live behind a tiny byte-level RecordStore so the history logic
does not care whether they sit on disk or somewhere else. The on-disk
shape is the Gemini ``contents`` shape (``{"role", "parts": [{"text"}]}``)
so a stored history can be replayed as-is.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from .llm.provider import Turn, ROLES

logger = logging.getLogger("wagemini.store")


class RecordNotFoundError(KeyError):
    """No record exists for the requested key."""
    pass


class RecordStore(ABC):
    """Byte-level read/write of one record per user key."""

    @abstractmethod
    def read(self, key: str) -> bytes:
        """Return the stored bytes; raise RecordNotFoundError if absent."""
        ...

    @abstractmethod
    def write(self, key: str, data: bytes) -> None:
        """Replace the record for ``key``."""
        ...


class FileRecordStore(RecordStore):
    """Stores each record as ``<directory>/<key>.json``."""

    def __init__(self, directory: str):
        self.directory = Path(directory)
        if not self.directory.exists():
            self.directory.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created conversations directory at {self.directory}")

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> bytes:
        try:
            return self.path_for(key).read_bytes()
        except FileNotFoundError:
            raise RecordNotFoundError(key) from None

    def write(self, key: str, data: bytes) -> None:
        # Temp file + rename so a crash mid-write never leaves half a record.
        target = self.path_for(key)
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, target)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise


def _parse_turn(item) -> Optional[Turn]:
    """Convert one stored entry into a Turn, or None if it is malformed."""
    if not isinstance(item, dict):
        return None
    role = item.get("role")
    parts = item.get("parts")
    if role not in ROLES or not isinstance(parts, list) or not parts:
        return None
    texts = []
    for part in parts:
        if not isinstance(part, dict) or not isinstance(part.get("text"), str):
            return None
        texts.append(part["text"])
    return Turn(role=role, content="".join(texts))


class ConversationStore:
    """Load and save per-user turn history.

    Neither method raises: a missing record is an empty conversation, a
    corrupted one is logged and treated as empty, and a failed save is
    logged and dropped.
    """

    def __init__(self, records: RecordStore):
        self.records = records

    def load(self, user_key: str) -> list[Turn]:
        try:
            raw = self.records.read(user_key)
        except RecordNotFoundError:
            return []
        except Exception as e:
            logger.error(f"Unexpected error loading history for {user_key}: {e}")
            return []

        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.error(f"Error decoding JSON history for {user_key}. Starting fresh.")
            return []

        if not isinstance(data, list):
            logger.warning(f"Invalid history format for {user_key}. Starting fresh.")
            return []

        turns = []
        for item in data:
            turn = _parse_turn(item)
            if turn is None:
                logger.warning(f"Invalid history format for {user_key}. Starting fresh.")
                return []
            turns.append(turn)

        logger.debug(f"Loaded {len(turns)} turns for {user_key}")
        return turns

    def save(self, user_key: str, turns: list[Turn]) -> None:
        try:
            payload = json.dumps([t.to_gemini() for t in turns], indent=2, ensure_ascii=False)
            self.records.write(user_key, payload.encode("utf-8"))
        except Exception as e:
            logger.error(f"Error saving conversation history for {user_key}: {e}")
