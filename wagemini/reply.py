"""Reply generation — persona + history + user text → reply text.

generate() always returns a string. When Gemini is not configured, fails,
or answers in a shape we cannot read, the user gets a fixed apology
instead of an exception.
"""

import logging
from typing import Any, Callable, Optional

from .llm.provider import LLMProvider, LLMError, Turn

logger = logging.getLogger("wagemini.reply")

NOT_CONFIGURED_REPLY = "Sorry, I'm having trouble connecting to my brain right now (API key issue)."
UNRECOGNIZED_REPLY = "I received an unexpected response format from Gemini. Please try again."
ERROR_REPLY = "I'm having trouble processing that request with my AI brain. Please try again later."

_MISSING = object()


# ============================================================
# RESULT SHAPE EXTRACTORS
# ============================================================

def _field(obj: Any, name: str) -> Any:
    """Read ``name`` from a mapping key or an attribute."""
    if obj is None:
        return _MISSING
    if isinstance(obj, dict):
        return obj.get(name, _MISSING)
    return getattr(obj, name, _MISSING)


def _first(seq: Any) -> Any:
    if isinstance(seq, (list, tuple)) and seq:
        return seq[0]
    return _MISSING


def _candidate_text(obj: Any) -> Optional[str]:
    """``candidates[0].content.parts[0].text``"""
    candidate = _first(_field(obj, "candidates"))
    if candidate is _MISSING:
        return None
    part = _first(_field(_field(candidate, "content"), "parts"))
    if part is _MISSING:
        return None
    text = _field(part, "text")
    return text if isinstance(text, str) else None


def extract_wrapped_candidates(result: Any) -> Optional[str]:
    """SDK-wrapped shape: ``response.candidates[0].content.parts[0].text``."""
    response = _field(result, "response")
    if response is _MISSING:
        return None
    return _candidate_text(response)


def extract_text_accessor(result: Any) -> Optional[str]:
    """Direct ``text`` attribute/key, or a zero-argument ``text()`` method."""
    text = _field(result, "text")
    if callable(text):
        text = text()
    return text if isinstance(text, str) else None


def extract_candidates(result: Any) -> Optional[str]:
    """Raw REST shape: ``candidates[0].content.parts[0].text``."""
    return _candidate_text(result)


# Tried in order; the first non-empty text wins.
RESULT_EXTRACTORS: list[Callable[[Any], Optional[str]]] = [
    extract_wrapped_candidates,
    extract_text_accessor,
    extract_candidates,
]


def extract_reply_text(result: Any) -> Optional[str]:
    """Return stripped reply text from any known result shape, else None."""
    for extractor in RESULT_EXTRACTORS:
        try:
            text = extractor(result)
        except Exception as e:
            # SDK-style text() raises when a response was blocked
            logger.debug(f"{extractor.__name__} failed: {type(e).__name__}: {e}")
            continue
        if text and text.strip():
            return text.strip()
    return None


# ============================================================
# GENERATOR
# ============================================================

class ReplyGenerator:
    """Ask the completion provider for a reply in the persona's voice."""

    def __init__(self, completion: Optional[LLMProvider], system_instruction: str):
        self.completion = completion
        self.system_instruction = system_instruction

    async def generate(self, user_text: str, history: list[Turn]) -> str:
        if self.completion is None:
            logger.error("Gemini API key is not configured.")
            return NOT_CONFIGURED_REPLY

        try:
            result = await self.completion.complete(self.system_instruction, list(history), user_text)
        except LLMError as e:
            logger.error(f"Gemini call failed ({type(e).__name__}): {e}")
            return ERROR_REPLY
        except Exception as e:
            logger.exception(f"Error calling Gemini API: {type(e).__name__}: {e}")
            return ERROR_REPLY

        text = extract_reply_text(result)
        if text is None:
            logger.error(f"Gemini API returned an unrecognized response structure: {str(result)[:500]}")
            return UNRECOGNIZED_REPLY
        return text
