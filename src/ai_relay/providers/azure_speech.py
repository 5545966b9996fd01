"""Azure Speech synthesis adapter.

The SDK reports completion through callbacks fired on its own worker
threads. Each session bridges those callbacks into an asyncio future on the
caller's loop, so awaiting synthesis suspends only the current request.
"""
from __future__ import annotations
import asyncio
import logging

import azure.cognitiveservices.speech as speechsdk

from ai_relay.common.config import Settings
from ai_relay.common.errors import SynthesisError

LOGGER = logging.getLogger("airelay.providers.azure")

OUTPUT_FORMAT = speechsdk.SpeechSynthesisOutputFormat.Riff16Khz16BitMonoPcm


class AzureSpeechSession:
    """One synthesizer, used for a single request and then closed."""

    def __init__(self, synthesizer: speechsdk.SpeechSynthesizer, voice: str) -> None:
        self._synthesizer: speechsdk.SpeechSynthesizer | None = synthesizer
        self.voice = voice

    async def synthesize(self, text: str) -> bytes:
        if self._synthesizer is None:
            raise SynthesisError("Speech session is closed")

        loop = asyncio.get_running_loop()
        future: asyncio.Future[bytes] = loop.create_future()

        def settle(audio: bytes | None, error: Exception | None) -> None:
            # First callback wins; the SDK may report more than once.
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(audio or b"")

        def on_completed(evt: speechsdk.SpeechSynthesisEventArgs) -> None:
            loop.call_soon_threadsafe(settle, evt.result.audio_data, None)

        def on_canceled(evt: speechsdk.SpeechSynthesisEventArgs) -> None:
            details = evt.result.cancellation_details
            reason = details.error_details or str(details.reason)
            LOGGER.error("Speech synthesis error: %s", reason)
            loop.call_soon_threadsafe(settle, None, SynthesisError(f"Speech synthesis canceled: {reason}"))

        self._synthesizer.synthesis_completed.connect(on_completed)
        self._synthesizer.synthesis_canceled.connect(on_canceled)
        # Held until a callback fires.
        pending = self._synthesizer.speak_text_async(text)  # noqa: F841
        return await future

    def close(self) -> None:
        if self._synthesizer is None:
            return
        synthesizer, self._synthesizer = self._synthesizer, None
        synthesizer.synthesis_completed.disconnect_all()
        synthesizer.synthesis_canceled.disconnect_all()


class AzureSpeechProvider:
    def __init__(self, key: str | None, region: str | None) -> None:
        self.key = key
        self.region = region

    @classmethod
    def from_settings(cls, settings: Settings) -> "AzureSpeechProvider":
        return cls(settings.azure_speech_key, settings.azure_speech_region)

    def open_session(self, voice: str) -> AzureSpeechSession:
        config = speechsdk.SpeechConfig(subscription=self.key, region=self.region)
        config.speech_synthesis_voice_name = voice
        config.set_speech_synthesis_output_format(OUTPUT_FORMAT)
        # No audio config: keep the result in memory instead of playing it.
        synthesizer = speechsdk.SpeechSynthesizer(speech_config=config, audio_config=None)
        return AzureSpeechSession(synthesizer, voice)
