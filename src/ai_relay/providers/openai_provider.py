"""OpenAI chat completion and image generation adapter."""
from __future__ import annotations
import logging
from typing import Any, Sequence

from openai import AsyncOpenAI

from ai_relay.common.config import Settings
from ai_relay.common.schema import Completion

LOGGER = logging.getLogger("airelay.providers.openai")


class OpenAIProvider:
    """Serves both the chat and the image role from one shared client."""

    def __init__(
        self,
        client: AsyncOpenAI,
        chat_model: str = "gpt-3.5-turbo",
        image_model: str = "dall-e-3",
        image_size: str = "1024x1024",
    ) -> None:
        self._client = client
        self.chat_model = chat_model
        self.image_model = image_model
        self.image_size = image_size

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAIProvider":
        client = AsyncOpenAI(api_key=settings.openai_api_key)
        return cls(
            client,
            chat_model=settings.chat_model,
            image_model=settings.image_model,
            image_size=settings.image_size,
        )

    async def complete(self, messages: Sequence[dict[str, Any]]) -> Completion:
        completion = await self._client.chat.completions.create(
            model=self.chat_model,
            messages=list(messages),
        )
        text = completion.choices[0].message.content
        usage = completion.usage.model_dump(exclude_unset=True) if completion.usage is not None else None
        LOGGER.debug("Chat completion done: model=%s usage=%s", self.chat_model, usage)
        return Completion(text=text, usage=usage)

    async def generate_image(self, prompt: str) -> str | None:
        response = await self._client.images.generate(
            model=self.image_model,
            prompt=prompt,
            n=1,
            size=self.image_size,
        )
        return response.data[0].url
