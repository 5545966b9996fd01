"""Error taxonomy and the JSON error envelope."""
from __future__ import annotations
from typing import Any

GENERIC_ERROR = "Error processing your request"


def describe(exc: BaseException) -> str:
    """Human-readable details for an envelope; never empty."""
    return str(exc) or "Unknown error"


class RelayError(Exception):
    status_code = 500

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            out["details"] = self.details
        return out


class ValidationError(RelayError):
    """Missing or malformed input; no provider was called."""
    status_code = 400


class ProviderError(RelayError):
    """A required provider call failed."""

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ProviderError":
        if isinstance(exc, ProviderError):
            return cls(GENERIC_ERROR, exc.details or exc.message)
        return cls(GENERIC_ERROR, describe(exc))


class SynthesisError(ProviderError):
    """Speech synthesis was canceled or returned no audio."""

    def __init__(self, message: str) -> None:
        super().__init__(message, message)
