"""Provider interfaces and the container handed to request handlers."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Protocol, Sequence

from ai_relay.common.schema import Completion


class ChatProvider(Protocol):
    async def complete(self, messages: Sequence[dict[str, Any]]) -> Completion:
        ...


class ImageProvider(Protocol):
    async def generate_image(self, prompt: str) -> str | None:
        """Return the URL of one generated image."""
        ...


class SpeechSession(Protocol):
    async def synthesize(self, text: str) -> bytes:
        """Resolve once with the audio bytes, or raise."""
        ...

    def close(self) -> None:
        ...


class SpeechProvider(Protocol):
    def open_session(self, voice: str) -> SpeechSession:
        ...


@dataclass(frozen=True)
class Providers:
    """Provider clients built once per process and shared read-only."""
    chat: ChatProvider
    images: ImageProvider
    speech: SpeechProvider
