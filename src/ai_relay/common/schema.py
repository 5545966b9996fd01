"""Pydantic models and dataclasses for request/response types."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

IMAGE_FAILED = "Image generation failed"


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class CompletionIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    messages: list[ChatMessage]
    generate_image: bool = Field(default=False, alias="generateImage")


class CompletionOut(BaseModel):
    """Composed completion response; unset optional fields are left out."""
    message: str | None
    usage: dict[str, Any] | None
    image: str | None = None
    error: str | None = None


class TTSIn(BaseModel):
    text: str | None = None
    voice: str | None = None


class ErrorOut(BaseModel):
    error: str
    details: str | None = None


@dataclass
class Completion:
    """Chat provider output."""
    text: str | None
    usage: dict[str, Any] | None
