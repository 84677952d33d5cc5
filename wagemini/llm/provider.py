"""Provider-agnostic completion interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


# ════════════════════════════════════════════════════════
# LLM Exception Hierarchy: classify errors by type,
# not by string matching.  ReplyGenerator catches these.
# ════════════════════════════════════════════════════════

class LLMError(Exception):
    """Base class for all LLM provider errors."""
    pass

class LLMRateLimitError(LLMError):
    """429 — rate limited / quota exhausted."""
    pass

class LLMAuthError(LLMError):
    """401/403 — authentication or authorization failure."""
    pass

class LLMBadRequestError(LLMError):
    """400 — bad request (malformed history, oversized prompt, etc.)."""
    pass


USER_ROLE = "user"
MODEL_ROLE = "model"
ROLES = (USER_ROLE, MODEL_ROLE)


@dataclass(frozen=True)
class Turn:
    role: str           # 'user' or 'model'
    content: str

    def to_gemini(self) -> dict:
        """Gemini `contents` entry — also the on-disk record shape."""
        return {"role": self.role, "parts": [{"text": self.content}]}


class LLMProvider(ABC):
    """Abstract base class for completion providers."""

    @abstractmethod
    async def complete(
        self,
        system_instruction: str,
        history: list[Turn],
        user_text: str,
    ) -> Any:
        """Run one completion and return the provider's raw result.

        The result shape is provider-specific; ReplyGenerator knows how to
        pull the reply text out of every shape we have seen.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        ...
