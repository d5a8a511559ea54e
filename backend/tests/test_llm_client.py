from __future__ import annotations

from types import SimpleNamespace

import pytest

from growth_map.core.config import Settings
from growth_map.services import llm_client
from growth_map.services.llm_client import CompletionClient, CompletionError, build_completion_client


class _FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class _FakeOpenAI:
    content = '{"nodes": []}'

    def __init__(self, **kwargs):
        self.init_kwargs = kwargs
        self.chat = SimpleNamespace(completions=_FakeCompletions(self.content))


def test_no_api_key_means_no_client() -> None:
    assert build_completion_client(Settings(openai_api_key=None)) is None


def test_client_requests_json_objects(monkeypatch) -> None:
    monkeypatch.setattr(llm_client.openai, "OpenAI", _FakeOpenAI)

    settings = Settings(openai_api_key="sk-test", openai_model="gpt-test", openai_temperature=0.1)
    client = build_completion_client(settings)

    assert isinstance(client, CompletionClient)
    assert client.complete("plan please") == '{"nodes": []}'
    sent = client._client.chat.completions.kwargs
    assert sent["model"] == "gpt-test"
    assert sent["temperature"] == 0.1
    assert sent["response_format"] == {"type": "json_object"}
    assert sent["messages"][-1] == {"role": "user", "content": "plan please"}
    assert client._client.init_kwargs["max_retries"] == 0


def test_empty_completion_raises(monkeypatch) -> None:
    class _EmptyOpenAI(_FakeOpenAI):
        content = ""

    monkeypatch.setattr(llm_client.openai, "OpenAI", _EmptyOpenAI)

    with pytest.raises(CompletionError):
        CompletionClient("sk-test").complete("anything")
