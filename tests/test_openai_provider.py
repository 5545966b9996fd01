from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest
from openai.types import CompletionUsage

from ai_relay.common.config import Settings
from ai_relay.providers.openai_provider import OpenAIProvider


class _FakeCompletions:
    def __init__(self, content: str | None, usage: CompletionUsage | None) -> None:
        self.content = content
        self.usage = usage
        self.calls: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        message = SimpleNamespace(role="assistant", content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(index=0, message=message)], usage=self.usage)


class _FakeImages:
    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []

    async def generate(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        return SimpleNamespace(data=[SimpleNamespace(url="https://img.example/a.png")])


def _client(content: str | None = "Hello test", usage: CompletionUsage | None = None) -> SimpleNamespace:
    return SimpleNamespace(
        chat=SimpleNamespace(completions=_FakeCompletions(content, usage)),
        images=_FakeImages(),
    )


@pytest.mark.asyncio
async def test_complete_passes_messages_and_model() -> None:
    usage = CompletionUsage(prompt_tokens=10, completion_tokens=5, total_tokens=15)
    client = _client(usage=usage)
    provider = OpenAIProvider(client, chat_model="gpt-3.5-turbo")
    messages = [{"role": "system", "content": "be brief"}, {"role": "user", "content": "hi"}]

    result = await provider.complete(messages)

    assert result.text == "Hello test"
    assert result.usage == {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15}
    assert client.chat.completions.calls == [{"model": "gpt-3.5-turbo", "messages": messages}]


@pytest.mark.asyncio
async def test_complete_without_usage() -> None:
    provider = OpenAIProvider(_client(content=None))
    result = await provider.complete([{"role": "user", "content": "hi"}])
    assert result.text is None
    assert result.usage is None


@pytest.mark.asyncio
async def test_generate_image_requests_one_square_image() -> None:
    client = _client()
    provider = OpenAIProvider(client, image_model="dall-e-3", image_size="1024x1024")
    url = await provider.generate_image("a lighthouse")
    assert url == "https://img.example/a.png"
    assert client.images.calls == [
        {"model": "dall-e-3", "prompt": "a lighthouse", "n": 1, "size": "1024x1024"}
    ]


def test_from_settings_uses_configured_models() -> None:
    settings = Settings(openai_api_key="sk-test", chat_model="gpt-4o-mini", image_size="512x512")
    provider = OpenAIProvider.from_settings(settings)
    assert provider.chat_model == "gpt-4o-mini"
    assert provider.image_model == "dall-e-3"
    assert provider.image_size == "512x512"
