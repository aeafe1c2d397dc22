"""Session-related API endpoints."""

from typing import Annotated, List
from uuid import UUID

from fastapi import APIRouter, Depends, Form, Header, HTTPException, Response, UploadFile

from dictation.dependencies import get_dictation_service
from dictation.exceptions import (
    EventPublishError,
    FinalizeInProgressError,
    InputValidationError,
    SessionNotFoundError,
    StorageDeleteError,
    StorageUploadError,
    TranscriptNotFoundError,
)
from dictation.handlers import DictationService
from dictation.logging import setup_logging
from dictation.response_models import (
    AcceptWordRequest,
    CreateSessionRequest,
    CreateSessionResponse,
    FinalizeResponse,
    SessionSummary,
    SessionTranscriptResponse,
    TranscriptResponse,
    UploadChunkResponse,
)

logger = setup_logging()

router = APIRouter(prefix="/sessions", tags=["sessions"])

ServiceDep = Annotated[DictationService, Depends(get_dictation_service)]
OwnerDep = Annotated[str, Header(alias="X-Owner-Id", min_length=1)]


@router.post("", response_model=CreateSessionResponse, status_code=201)
def create_session(
    service: ServiceDep,
    owner_id: OwnerDep = "anonymous",
    request: CreateSessionRequest | None = None,
):
    """Starts a new dictation session in `recording` state."""
    title = request.title if request else None
    return CreateSessionResponse(session_id=service.create_session(owner_id, title))


@router.get("", response_model=List[SessionSummary])
def list_sessions(service: ServiceDep, owner_id: OwnerDep = "anonymous"):
    """Returns the owner's sessions, newest first."""
    return service.list_sessions(owner_id)


@router.get("/{session_id}", response_model=SessionSummary)
def get_session(session_id: UUID, service: ServiceDep):
    """Returns one session with a preview of its final transcript."""
    try:
        return service.get_session(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")


@router.post("/{session_id}/chunks", response_model=UploadChunkResponse, status_code=202)
def upload_chunk(
    session_id: UUID,
    file: UploadFile,
    service: ServiceDep,
    start_time: float = Form(..., description="Chunk start offset in seconds"),
    end_time: float = Form(..., description="Chunk end offset in seconds"),
) -> UploadChunkResponse:
    """
    Uploads one audio chunk of a session.

    Stores the audio and schedules its transcription; the partial transcript
    appears on the session once the chunk stage has run.
    """
    audio_data = file.file.read()

    logger.info(
        "Received chunk upload",
        extra={
            "session_id": str(session_id),
            "file_name": file.filename,
            "size": len(audio_data),
            "start_time": start_time,
            "end_time": end_time,
        },
    )

    try:
        chunk_id = service.upload_chunk(
            session_id,
            audio_data,
            file.filename or "",
            start_time,
            end_time,
            file.content_type,
        )
    except InputValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")
    except StorageUploadError:
        raise HTTPException(status_code=500, detail="File upload failed")
    except EventPublishError:
        raise HTTPException(status_code=500, detail="Event publish failed")

    return UploadChunkResponse(
        message="Chunk uploaded successfully, transcription started",
        chunk_id=chunk_id,
    )


@router.get("/{session_id}/transcript", response_model=SessionTranscriptResponse)
def get_transcript(session_id: UUID, service: ServiceDep):
    """Returns the session status, its partial transcripts and its latest final."""
    try:
        return service.get_transcript(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")


@router.post("/{session_id}/finalize", response_model=FinalizeResponse, status_code=202)
def finalize_session(session_id: UUID, service: ServiceDep):
    """Schedules merging and polishing of the session's partial transcripts."""
    try:
        service.request_finalize(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")
    except FinalizeInProgressError:
        raise HTTPException(status_code=409, detail="Finalization already in progress")
    except EventPublishError:
        raise HTTPException(status_code=500, detail="Event publish failed")

    return FinalizeResponse(message="Finalization started", session_id=session_id)


@router.post("/{session_id}/accept-word", response_model=TranscriptResponse)
def accept_word(session_id: UUID, request: AcceptWordRequest, service: ServiceDep):
    """Replaces one word of a transcript with the accepted alternative."""
    try:
        return service.accept_word_alternative(
            session_id,
            request.transcript_id,
            request.word_index,
            request.accepted_text,
        )
    except InputValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)
    except TranscriptNotFoundError:
        raise HTTPException(status_code=404, detail="Transcript not found")


@router.delete("/{session_id}", status_code=204)
def delete_session(session_id: UUID, service: ServiceDep):
    """Deletes a session with its chunks, transcripts and stored audio."""
    try:
        service.delete_session(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")
    except StorageDeleteError:
        raise HTTPException(status_code=500, detail="Audio removal failed")
    return Response(status_code=204)
