from __future__ import annotations

from typing import Any, Callable, Sequence

import pytest
from fastapi.testclient import TestClient

from ai_relay.common.config import Settings
from ai_relay.common.schema import Completion
from ai_relay.providers.base import Providers
from ai_relay.relay.app import create_app

WAV_BYTES = b"RIFF\x24\x00\x00\x00WAVEfmt stub-audio"
USAGE = {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15}


class StubChat:
    def __init__(self, text: str | None = "Hello test", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls: list[list[dict[str, Any]]] = []

    async def complete(self, messages: Sequence[dict[str, Any]]) -> Completion:
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return Completion(text=self.text, usage=dict(USAGE))


class StubImages:
    def __init__(self, url: str = "https://images.example/1.png", error: Exception | None = None) -> None:
        self.url = url
        self.error = error
        self.prompts: list[str] = []

    async def generate_image(self, prompt: str) -> str | None:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.url


class StubSession:
    def __init__(self, audio: bytes = WAV_BYTES, error: Exception | None = None, close_error: Exception | None = None) -> None:
        self.audio = audio
        self.error = error
        self.close_error = close_error
        self.texts: list[str] = []
        self.closed = False

    async def synthesize(self, text: str) -> bytes:
        self.texts.append(text)
        if self.error is not None:
            raise self.error
        return self.audio

    def close(self) -> None:
        self.closed = True
        if self.close_error is not None:
            raise self.close_error


class StubSpeech:
    def __init__(self, session: StubSession | None = None, open_error: Exception | None = None) -> None:
        self.session = session or StubSession()
        self.open_error = open_error
        self.voices: list[str] = []

    def open_session(self, voice: str) -> StubSession:
        self.voices.append(voice)
        if self.open_error is not None:
            raise self.open_error
        return self.session


@pytest.fixture
def chat() -> StubChat:
    return StubChat()


@pytest.fixture
def images() -> StubImages:
    return StubImages()


@pytest.fixture
def speech() -> StubSpeech:
    return StubSpeech()


@pytest.fixture
def make_client(chat: StubChat, images: StubImages, speech: StubSpeech) -> Callable[..., TestClient]:
    def _make(**overrides: Any) -> TestClient:
        providers = Providers(
            chat=overrides.get("chat", chat),
            images=overrides.get("images", images),
            speech=overrides.get("speech", speech),
        )
        return TestClient(create_app(Settings(), providers))
    return _make


@pytest.fixture
def client(make_client: Callable[..., TestClient]) -> TestClient:
    return make_client()
