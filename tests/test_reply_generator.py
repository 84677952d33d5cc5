"""Tests for ReplyGenerator and result-shape extraction."""

from types import SimpleNamespace

import httpx
import pytest
from unittest.mock import AsyncMock

from wagemini.llm.provider import Turn, LLMRateLimitError
from wagemini.reply import (
    ReplyGenerator,
    extract_reply_text,
    NOT_CONFIGURED_REPLY,
    UNRECOGNIZED_REPLY,
    ERROR_REPLY,
)


def _rest(text):
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


class TestExtractReplyText:
    """Each known result shape, and their priority order."""

    def test_rest_shape(self):
        assert extract_reply_text(_rest("  hi there \n")) == "hi there"

    def test_wrapped_shape(self):
        assert extract_reply_text({"response": _rest("wrapped")}) == "wrapped"

    def test_text_attribute(self):
        assert extract_reply_text(SimpleNamespace(text=" attr ")) == "attr"

    def test_text_method(self):
        assert extract_reply_text(SimpleNamespace(text=lambda: "called")) == "called"

    def test_attribute_objects_for_candidates(self):
        part = SimpleNamespace(text="obj")
        result = SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])
        assert extract_reply_text(result) == "obj"

    def test_wrapped_wins_over_text(self):
        result = {"response": _rest("first"), "text": "second", **_rest("third")}
        assert extract_reply_text(result) == "first"

    def test_text_wins_over_raw_candidates(self):
        result = {"text": "second", **_rest("third")}
        assert extract_reply_text(result) == "second"

    def test_blank_text_falls_through(self):
        result = {"text": "   ", **_rest("third")}
        assert extract_reply_text(result) == "third"

    def test_raising_text_method_falls_through(self):
        def boom():
            raise ValueError("response blocked")

        result = SimpleNamespace(text=boom, candidates=_rest("safe")["candidates"])
        assert extract_reply_text(result) == "safe"

    @pytest.mark.parametrize("result", [
        None,
        {},
        {"candidates": []},
        {"candidates": [{"content": {"parts": []}}]},
        {"candidates": [{"finishReason": "SAFETY"}]},
        {"text": 42},
        "plain string",
    ])
    def test_unknown_shapes(self, result):
        assert extract_reply_text(result) is None


class TestReplyGenerator:
    """generate() always returns a string."""

    @pytest.mark.asyncio
    async def test_not_configured(self):
        gen = ReplyGenerator(None, "persona")
        assert await gen.generate("hi", []) == NOT_CONFIGURED_REPLY

    @pytest.mark.asyncio
    async def test_passes_persona_history_and_text(self):
        completion = AsyncMock()
        completion.complete.return_value = _rest("  Hello!  ")
        history = [Turn("user", "earlier"), Turn("model", "reply")]

        gen = ReplyGenerator(completion, "You are Sam.")
        assert await gen.generate("hi", history) == "Hello!"

        completion.complete.assert_awaited_once_with("You are Sam.", history, "hi")

    @pytest.mark.asyncio
    async def test_empty_history_is_fresh_request(self):
        completion = AsyncMock()
        completion.complete.return_value = _rest("fresh")
        await ReplyGenerator(completion, "p").generate("hi", [])
        assert completion.complete.await_args.args[1] == []

    @pytest.mark.asyncio
    async def test_unrecognized_shape(self):
        completion = AsyncMock()
        completion.complete.return_value = {"promptFeedback": {"blockReason": "SAFETY"}}
        assert await ReplyGenerator(completion, "p").generate("hi", []) == UNRECOGNIZED_REPLY

    @pytest.mark.asyncio
    async def test_llm_error(self):
        completion = AsyncMock()
        completion.complete.side_effect = LLMRateLimitError("quota")
        assert await ReplyGenerator(completion, "p").generate("hi", []) == ERROR_REPLY

    @pytest.mark.asyncio
    async def test_network_error(self):
        completion = AsyncMock()
        completion.complete.side_effect = httpx.ConnectError("unreachable")
        assert await ReplyGenerator(completion, "p").generate("hi", []) == ERROR_REPLY
        assert completion.complete.await_count == 1
