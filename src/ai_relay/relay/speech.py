"""Drives one text-to-speech request from session setup to the closed stream.

States:
    IDLE -> CONFIGURING_SESSION -> AWAITING_SYNTHESIS -> WRITING -> CLOSED
    Any failure before the audio is handed to the response ends in
    FAILED_BEFORE_WRITE and can still become a JSON error. Once WRITING has
    started the headers are committed, so an interrupted write ends in
    FAILED_AFTER_HEADERS and is only logged.
"""
from __future__ import annotations
import enum
import logging
from typing import AsyncIterator

from ai_relay.common.errors import SynthesisError
from ai_relay.providers.base import SpeechProvider, SpeechSession

LOGGER = logging.getLogger("airelay.speech")


class TTSState(str, enum.Enum):
    IDLE = "idle"
    CONFIGURING_SESSION = "configuring_session"
    AWAITING_SYNTHESIS = "awaiting_synthesis"
    WRITING = "writing"
    CLOSED = "closed"
    FAILED_BEFORE_WRITE = "failed_before_write"
    FAILED_AFTER_HEADERS = "failed_after_headers"


TERMINAL_STATES = frozenset(
    {TTSState.CLOSED, TTSState.FAILED_BEFORE_WRITE, TTSState.FAILED_AFTER_HEADERS}
)


class SpeechRelay:
    def __init__(self, provider: SpeechProvider) -> None:
        self._provider = provider
        self._session: SpeechSession | None = None
        self._audio = b""
        self.state = TTSState.IDLE

    def _move(self, state: TTSState) -> None:
        LOGGER.debug("TTS state %s -> %s", self.state.value, state.value)
        self.state = state

    async def prepare(self, text: str, voice: str) -> None:
        """Open a session and wait for the audio; raises before anything is sent."""
        try:
            self._move(TTSState.CONFIGURING_SESSION)
            self._session = self._provider.open_session(voice)
            self._move(TTSState.AWAITING_SYNTHESIS)
            audio = await self._session.synthesize(text)
            if not audio:
                raise SynthesisError("No audio data generated")
        except BaseException:
            self._move(TTSState.FAILED_BEFORE_WRITE)
            self._close_session()
            raise
        self._audio = audio

    async def stream(self) -> AsyncIterator[bytes]:
        """Yield the whole buffer in one write, then close the session."""
        self._move(TTSState.WRITING)
        written = False
        try:
            yield self._audio
            written = True
        finally:
            # Close failures are only logged; they do not change what the client got.
            self._close_session()
            if written:
                self._move(TTSState.CLOSED)
            else:
                self._move(TTSState.FAILED_AFTER_HEADERS)
                LOGGER.error("TTS stream interrupted after headers were sent; audio is truncated")

    def _close_session(self) -> None:
        if self._session is None:
            return
        session, self._session = self._session, None
        try:
            session.close()
        except Exception as e:
            LOGGER.error("Failed to close speech session: %s", e)
