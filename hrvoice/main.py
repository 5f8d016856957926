"""FastAPI host for the HR voice assistant pipeline."""

import logging
import time
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from hrvoice.api.http.voice import router as voice_router
from hrvoice.config import get_settings
from hrvoice.core.di import Container, get_container
from hrvoice.infrastructure.logging import (
    clear_request_context,
    set_request_context,
    setup_logging,
)

settings = get_settings()
setup_logging(log_level=settings.log_level, debug_namespaces=settings.debug_namespaces)

logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Own the process-wide pipeline state and the phrase preload task."""
    logger.info("HR voice assistant starting", extra={"service": "app"})
    settings.log_config_summary()

    container = get_container()
    if settings.preload_enabled:
        container.preloader.start(settings.tts_default_voice)

    yield

    await container.preloader.stop()
    await container.aclose()
    logger.info("HR voice assistant stopped", extra={"service": "app"})


def get_allowed_origins() -> list[str]:
    if settings.is_development:
        return ["*"]
    return settings.cors_allow_origins_list


app = FastAPI(
    title="HR Voice Assistant API",
    description="Voice conversation pipeline for the HR assistant",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_allowed_origins(),
    # Browsers reject credentialed requests against a wildcard origin
    allow_credentials=not settings.is_development,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(voice_router)


@app.middleware("http")
async def _http_request_context(request: Request, call_next):
    set_request_context(request_id=request.headers.get("x-request-id") or str(uuid4()))
    started = time.time()
    status_code: int | None = None
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        logger.info(
            "HTTP request completed",
            extra={
                "service": "http",
                "duration_ms": int((time.time() - started) * 1000),
                "metadata": {
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": status_code,
                },
            },
        )
        clear_request_context()


@app.get("/health")
async def health_check() -> dict:
    return {"status": "healthy", "service": "hr-voice-assistant"}


@app.get("/health/ready")
async def readiness_check(container: Container = Depends(get_container)) -> dict:
    """Report which hosted capabilities have a provider behind them."""
    capabilities = {
        "speech_to_text": container.stt_provider is not None,
        "moderation": container.moderation_provider is not None,
        "generation": container.llm_provider is not None,
        "text_to_speech": container.tts_provider is not None,
    }
    return {
        "status": "ready" if all(capabilities.values()) else "degraded",
        "capabilities": capabilities,
        "preloaded_phrases": len(container.phrase_cache),
        "mock_external_calls": container.settings.mock_external_calls,
    }
