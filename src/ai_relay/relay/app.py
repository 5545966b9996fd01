"""FastAPI relay in front of the chat, image and speech providers.

Endpoints:
- GET /
- POST /api/completion  { "messages": [...], "generateImage": false }
- POST /api/tts         { "text": "...", "voice": "..." }

Serve with `uvicorn --factory ai_relay.relay.app:create_app`, or the `ai-relay` script.
"""
from __future__ import annotations
import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, StreamingResponse

from ai_relay.common.config import Settings, load_settings
from ai_relay.common.errors import (
    GENERIC_ERROR,
    ProviderError,
    RelayError,
    ValidationError,
    describe,
)
from ai_relay.common.schema import IMAGE_FAILED, CompletionIn, CompletionOut, ErrorOut, TTSIn
from ai_relay.providers.azure_speech import AzureSpeechProvider
from ai_relay.providers.base import Providers
from ai_relay.providers.openai_provider import OpenAIProvider
from ai_relay.relay.cors import cors_headers, install_cors
from ai_relay.relay.speech import SpeechRelay

LOGGER = logging.getLogger("airelay.app")

router = APIRouter()

ERROR_RESPONSES = {400: {"model": ErrorOut}, 500: {"model": ErrorOut}}


def build_providers(settings: Settings) -> Providers:
    openai_provider = OpenAIProvider.from_settings(settings)
    return Providers(
        chat=openai_provider,
        images=openai_provider,
        speech=AzureSpeechProvider.from_settings(settings),
    )


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_providers(request: Request) -> Providers:
    return request.app.state.providers


def _error_response(error: RelayError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@router.get("/")
def root() -> dict[str, str]:
    return {"message": "Hello from the AI relay!"}


@router.post(
    "/api/completion",
    response_model=CompletionOut,
    response_model_exclude_unset=True,
    responses=ERROR_RESPONSES,
)
async def completion(body: CompletionIn, providers: Providers = Depends(get_providers)):
    messages = [m.model_dump() for m in body.messages]
    try:
        result = await providers.chat.complete(messages)
    except Exception as e:
        LOGGER.error("Chat completion failed: %s", e)
        return _error_response(ProviderError.from_exception(e))

    if not body.generate_image:
        return CompletionOut(message=result.text, usage=result.usage)

    try:
        image = await providers.images.generate_image(result.text or "")
    except Exception as e:
        # The text result still goes out; only the image is marked as failed.
        LOGGER.error("Image generation failed: %s", e)
        return CompletionOut(message=result.text, usage=result.usage, error=IMAGE_FAILED)
    return CompletionOut(message=result.text, usage=result.usage, image=image)


@router.post("/api/tts", response_class=Response, responses=ERROR_RESPONSES)
async def tts(
    body: TTSIn | None = None,
    settings: Settings = Depends(get_settings),
    providers: Providers = Depends(get_providers),
) -> Response:
    # An empty or null body counts as missing text.
    body = body or TTSIn()
    if not body.text:
        return _error_response(ValidationError("Text is required"))

    relay = SpeechRelay(providers.speech)
    try:
        await relay.prepare(body.text, body.voice or settings.default_voice)
    except Exception as e:
        LOGGER.error("TTS Error: %s", e)
        return _error_response(ProviderError.from_exception(e))

    return StreamingResponse(
        relay.stream(),
        media_type="audio/wav",
        headers={"Transfer-Encoding": "chunked"},
    )


async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return _error_response(ValidationError("Invalid request body", details))


async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.error("Unhandled exception for %s: %s", request.url.path, exc, exc_info=True)
    # Runs outside the middleware stack, so CORS headers are added here.
    return JSONResponse(
        status_code=500,
        content={"error": GENERIC_ERROR, "details": describe(exc)},
        headers=cors_headers(request),
    )


def create_app(settings: Settings | None = None, providers: Providers | None = None) -> FastAPI:
    """
    Create the relay application.

    Args:
        settings: Runtime settings; loaded from file and environment when omitted.
        providers: Provider clients; built from settings at startup when omitted.
    """
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.providers is None:
            app.state.providers = build_providers(settings)
            LOGGER.info(
                "Providers ready: chat=%s image=%s voice=%s",
                settings.chat_model,
                settings.image_model,
                settings.default_voice,
            )
        yield

    app = FastAPI(title="ai-relay", lifespan=lifespan)
    app.state.settings = settings
    app.state.providers = providers

    install_cors(app)
    app.include_router(router)
    app.add_exception_handler(RequestValidationError, _invalid_body)
    app.add_exception_handler(Exception, _unhandled)
    return app
