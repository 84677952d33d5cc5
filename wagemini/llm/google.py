"""Google Gemini provider via the Gemini REST API (API key).

Single non-streaming `generateContent` call per completion. No retries:
a failed call surfaces as a typed LLMError and the caller falls back to a
canned reply.
"""

import logging
import re
from typing import Any, Optional

import httpx

from .provider import (
    LLMProvider,
    Turn,
    USER_ROLE,
    LLMError,
    LLMRateLimitError,
    LLMAuthError,
    LLMBadRequestError,
)

logger = logging.getLogger("wagemini.llm.google")

# ═══════════════════════════════════════════════════════════════════════════════
# Constants
# ═══════════════════════════════════════════════════════════════════════════════

_GEMINI_API = "https://generativelanguage.googleapis.com/v1beta"
_DEFAULT_TIMEOUT = 120


# ═══════════════════════════════════════════════════════════════════════════════
# Unicode surrogate sanitization
# ═══════════════════════════════════════════════════════════════════════════════

# WhatsApp payloads occasionally carry half an emoji; json encoding of an
# unpaired surrogate fails, so strip them before building the request.
_SURROGATE_RE = re.compile(
    r'[\ud800-\udbff](?![\udc00-\udfff])'  # high surrogate not followed by low
    r'|(?<![\ud800-\udbff])[\udc00-\udfff]',  # low surrogate not preceded by high
    re.UNICODE,
)


def _sanitize_surrogates(text: str) -> str:
    """Remove unpaired Unicode surrogate characters.

    Valid emoji (properly paired surrogates) are preserved.
    """
    if not text:
        return text
    return _SURROGATE_RE.sub('', text)


# ═══════════════════════════════════════════════════════════════════════════════
# Retry hint extraction (log only, we never retry)
# ═══════════════════════════════════════════════════════════════════════════════

def _extract_retry_delay(error_text: str, headers: Optional[httpx.Headers] = None) -> Optional[float]:
    """Extract the server-suggested retry delay in seconds, if any."""
    if headers:
        retry_after = headers.get("retry-after")
        if retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass

    # "Please retry in 34.07s" / "Please retry in 500ms"
    m = re.search(r'Please retry in ([0-9.]+)(ms|s)', error_text, re.I)
    if m:
        value = float(m.group(1))
        return value / 1000 if m.group(2).lower() == "ms" else value

    # "retryDelay": "34s"
    m = re.search(r'"retryDelay":\s*"([0-9.]+)s"', error_text, re.I)
    if m:
        return float(m.group(1))

    return None


def _raise_for_status(resp: httpx.Response) -> None:
    """Translate a non-2xx Gemini response into the LLMError hierarchy."""
    if resp.is_success:
        return

    body = resp.text[:500]
    code = resp.status_code
    if code == 429:
        delay = _extract_retry_delay(body, resp.headers)
        hint = f" (server suggests retry in {delay:.0f}s)" if delay else ""
        raise LLMRateLimitError(f"Gemini rate limited{hint}: {body}")
    if code in (401, 403):
        raise LLMAuthError(f"Gemini rejected credentials ({code}): {body}")
    if code == 400:
        raise LLMBadRequestError(f"Gemini bad request: {body}")
    raise LLMError(f"Gemini HTTP {code}: {body}")


class GoogleProvider(LLMProvider):
    """Google Gemini via the standard Gemini API (API key)."""

    def __init__(
        self,
        api_key: str,
        chat_model: str = "gemini-2.0-flash",
        temperature: Optional[float] = 0.7,
        top_k: Optional[int] = 40,
        top_p: Optional[float] = 0.95,
        max_output_tokens: Optional[int] = 8192,
        timeout: float = _DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise ValueError("api_key is required")

        self.api_key = api_key
        self.chat_model = chat_model
        self.temperature = temperature
        self.top_k = top_k
        self.top_p = top_p
        self.max_output_tokens = max_output_tokens
        self.timeout = timeout
        self._transport = transport

    @property
    def name(self) -> str:
        return "google"

    def _generation_config(self) -> dict:
        gen_config: dict = {}
        if self.temperature is not None:
            gen_config["temperature"] = self.temperature
        if self.top_k is not None:
            gen_config["topK"] = self.top_k
        if self.top_p is not None:
            gen_config["topP"] = self.top_p
        if self.max_output_tokens:
            gen_config["maxOutputTokens"] = self.max_output_tokens
        return gen_config

    def build_request(self, system_instruction: str, history: list[Turn], user_text: str) -> dict:
        """Build the generateContent body: history in order, then the new user turn."""
        contents = [
            {"role": turn.role, "parts": [{"text": _sanitize_surrogates(turn.content)}]}
            for turn in history
        ]
        contents.append({"role": USER_ROLE, "parts": [{"text": _sanitize_surrogates(user_text)}]})

        body: dict = {"contents": contents}
        if system_instruction:
            body["systemInstruction"] = {"parts": [{"text": _sanitize_surrogates(system_instruction)}]}

        gen_config = self._generation_config()
        if gen_config:
            body["generationConfig"] = gen_config
        return body

    async def complete(
        self,
        system_instruction: str,
        history: list[Turn],
        user_text: str,
    ) -> Any:
        """Call generateContent and return the decoded JSON response."""
        body = self.build_request(system_instruction, history, user_text)
        url = f"{_GEMINI_API}/models/{self.chat_model}:generateContent"

        logger.info(
            f"Sending prompt to Gemini ({self.chat_model}, {len(history)} history turns): "
            f"{user_text[:200]}"
        )

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.post(url, json=body, params={"key": self.api_key})

        _raise_for_status(resp)
        data = resp.json()

        usage = data.get("usageMetadata", {}) if isinstance(data, dict) else {}
        if usage:
            logger.debug(
                f"Gemini usage: in={usage.get('promptTokenCount', 0)} "
                f"out={usage.get('candidatesTokenCount', 0)}"
            )
        return data
