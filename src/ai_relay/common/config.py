"""Runtime settings loaded from an optional YAML file, `.env` and the environment."""
from __future__ import annotations
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml
from dotenv import find_dotenv, load_dotenv

DEFAULT_CONFIG_PATH = "configs/relay.yaml"
DEFAULT_VOICE = "en-US-JennyMultilingualNeural"

# Settings field -> environment variable.
ENV_VARS = {
    "openai_api_key": "OPENAI_API_KEY",
    "chat_model": "OPENAI_CHAT_MODEL",
    "image_model": "OPENAI_IMAGE_MODEL",
    "image_size": "OPENAI_IMAGE_SIZE",
    "azure_speech_key": "AZURE_SPEECH_KEY",
    "azure_speech_region": "AZURE_SPEECH_REGION",
    "default_voice": "TTS_DEFAULT_VOICE",
    "host": "HOST",
    "port": "PORT",
    "log_level": "LOG_LEVEL",
}


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once at startup."""
    openai_api_key: str | None = None
    chat_model: str = "gpt-3.5-turbo"
    image_model: str = "dall-e-3"
    image_size: str = "1024x1024"
    azure_speech_key: str | None = None
    azure_speech_region: str | None = None
    default_voice: str = DEFAULT_VOICE
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"


def load_cfg(path: str) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_settings(path: str | None = None) -> Settings:
    """
    Build settings from defaults, a YAML file and the environment.

    Environment variables (including those from a local `.env`) win over
    the YAML file, which wins over the defaults.

    Args:
        path: YAML config path. Falls back to $RELAY_CONFIG, then to
            configs/relay.yaml when that file exists.
    """
    load_dotenv(find_dotenv(usecwd=True), override=False)

    path = path or os.getenv("RELAY_CONFIG")
    if path is None and Path(DEFAULT_CONFIG_PATH).exists():
        path = DEFAULT_CONFIG_PATH
    values: dict[str, Any] = load_cfg(path) if path else {}

    known = {f.name for f in fields(Settings)}
    unknown = set(values) - known
    if unknown:
        raise ValueError(f"Unknown settings in {path}: {', '.join(sorted(unknown))}")

    for name, env in ENV_VARS.items():
        raw = os.getenv(env)
        if raw:
            values[name] = raw

    if "port" in values:
        values["port"] = int(values["port"])
    return Settings(**values)
