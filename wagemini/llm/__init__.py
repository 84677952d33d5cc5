"""LLM provider layer."""

from .provider import LLMProvider, LLMError, LLMRateLimitError, LLMAuthError, LLMBadRequestError
from .google import GoogleProvider

__all__ = [
    "LLMProvider",
    "LLMError",
    "LLMRateLimitError",
    "LLMAuthError",
    "LLMBadRequestError",
    "GoogleProvider",
]
