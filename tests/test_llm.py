"""Single-call LLM wrapper with a fake client."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any

import httpx
import openai
import pytest

from blindspot import llm
from blindspot.errors import Timeout, UpstreamFailure

_REQUEST = httpx.Request("POST", "https://llm.test/v1/chat/completions")


class _FakeCompletions:
    def __init__(self, reply: Any = None, error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.reply


def _install(monkeypatch: pytest.MonkeyPatch, completions: _FakeCompletions) -> None:
    fake = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    monkeypatch.setattr(llm, "_client", fake)


def _reply(content: str, finish_reason: str = "stop") -> Any:
    choice = SimpleNamespace(message=SimpleNamespace(content=content), finish_reason=finish_reason)
    return SimpleNamespace(choices=[choice])


def test_needs_max_completion_tokens() -> None:
    assert llm._needs_max_completion_tokens("o3-mini")
    assert llm._needs_max_completion_tokens("gpt-5-2025-08-07")
    assert not llm._needs_max_completion_tokens("gpt-4o-mini")
    assert not llm._needs_max_completion_tokens("gpt-50")


def test_complete_sends_one_user_message(monkeypatch: pytest.MonkeyPatch) -> None:
    completions = _FakeCompletions(reply=_reply('{"ok": true}'))
    _install(monkeypatch, completions)
    assert asyncio.run(llm.complete("hello")) == '{"ok": true}'
    assert len(completions.calls) == 1
    call = completions.calls[0]
    assert call["messages"] == [{"role": "user", "content": "hello"}]
    assert call.get("max_tokens", call.get("max_completion_tokens")) == llm.settings.llm.max_tokens


def test_timeout_maps_to_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, _FakeCompletions(error=openai.APITimeoutError(request=_REQUEST)))
    with pytest.raises(Timeout):
        asyncio.run(llm.complete("hello"))


def test_status_error_keeps_code(monkeypatch: pytest.MonkeyPatch) -> None:
    response = httpx.Response(429, request=_REQUEST)
    error = openai.APIStatusError("rate limited", response=response, body=None)
    _install(monkeypatch, _FakeCompletions(error=error))
    with pytest.raises(UpstreamFailure) as info:
        asyncio.run(llm.complete("hello"))
    assert info.value.status_code == 429


def test_connection_error(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, _FakeCompletions(error=openai.APIConnectionError(request=_REQUEST)))
    with pytest.raises(UpstreamFailure):
        asyncio.run(llm.complete("hello"))


def test_no_choices(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, _FakeCompletions(reply=SimpleNamespace(choices=[])))
    with pytest.raises(UpstreamFailure):
        asyncio.run(llm.complete("hello"))


def test_missing_key_fails_before_any_call(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(llm, "_client", None)
    monkeypatch.setattr(llm, "get_api_key", lambda: "")
    with pytest.raises(UpstreamFailure, match="No LLM API key"):
        llm.get_client()
