"""HTTP endpoints for voice turns and synthesized audio."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Form, Header, HTTPException, UploadFile, status
from fastapi.responses import Response

from hrvoice.core.di import Container, get_container
from hrvoice.domains.voice.models import VoiceSessionConfig
from hrvoice.infrastructure.logging import set_request_context
from hrvoice.schemas.voice import CancelPipelineResponse, PreloadResponse, VoiceResponseSchema

logger = logging.getLogger("http")

router = APIRouter(prefix="/api/v1/voice", tags=["voice"])

_CONTENT_TYPE_FORMATS = {
    "audio/webm": "webm",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/mpeg": "mp3",
    "audio/mp4": "m4a",
    "audio/ogg": "ogg",
    "audio/flac": "flac",
}


def _audio_format(upload: UploadFile) -> str:
    """Guess the container format from the upload's filename, then its content type."""
    filename = upload.filename or ""
    if "." in filename:
        return filename.rsplit(".", 1)[-1].lower()
    content_type = (upload.content_type or "").split(";")[0].strip().lower()
    return _CONTENT_TYPE_FORMATS.get(content_type, "webm")


@router.post("/process", response_model=VoiceResponseSchema)
async def process_voice(
    audio: UploadFile = File(...),
    conversation_id: str = Form(...),
    user_id: str = Form(""),
    mode: str = Form("general"),
    voice: str | None = Form(None),
    system_prompt: str | None = Form(None),
    user_name: str | None = Form(None),
    user_token: str | None = Header(default=None, alias="X-User-Token"),
    container: Container = Depends(get_container),
) -> VoiceResponseSchema:
    """Run one voice turn. Stage failures are reported in ``error``, not as HTTP errors."""
    set_request_context(user_id=user_id or None, conversation_id=conversation_id)

    try:
        data = await audio.read()
    finally:
        await audio.close()

    session = VoiceSessionConfig(
        conversation_id=conversation_id,
        user_id=user_id,
        system_prompt=system_prompt or None,
        voice=voice or None,
        user_name=user_name or None,
    )
    result = await container.orchestrator.process_voice_input(
        data,
        session,
        mode,
        user_token=user_token,
        audio_format=_audio_format(audio),
    )
    return VoiceResponseSchema.from_response(result)


@router.get("/audio/{audio_id}")
async def get_audio(
    audio_id: str,
    container: Container = Depends(get_container),
) -> Response:
    """Serve a synthesized clip."""
    clip = container.audio_store.get(audio_id)
    if clip is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Audio not found")
    return Response(content=clip.data, media_type=clip.media_type)


@router.post("/cancel/{conversation_id}", response_model=CancelPipelineResponse)
async def cancel_voice_pipeline(
    conversation_id: str,
    container: Container = Depends(get_container),
) -> CancelPipelineResponse:
    return CancelPipelineResponse(cancelled=container.orchestrator.cancel_pipeline(conversation_id))


@router.post("/preload", response_model=PreloadResponse)
async def preload_phrases(
    voice: str | None = None,
    container: Container = Depends(get_container),
) -> PreloadResponse:
    """Schedule background synthesis of the common phrases."""
    scheduled = container.preloader.start(voice)
    logger.info(
        "Phrase preload requested",
        extra={"service": "http", "metadata": {"scheduled": scheduled, "voice": voice}},
    )
    return PreloadResponse(scheduled=scheduled)
