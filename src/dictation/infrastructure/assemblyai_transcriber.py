"""AssemblyAI implementation of the TranscriptionService interface."""

import tempfile

import assemblyai as aai

from dictation.domain.models import DEFAULT_WORD_CONFIDENCE, TranscriptionResult, Word
from dictation.exceptions import TranscriptionError
from dictation.logging import setup_logging

from .interfaces import TranscriptionService

logger = setup_logging()


class AssemblyAITranscriber(TranscriptionService):
    """Handles chunk transcription using AssemblyAI."""

    def __init__(self, transcriber: aai.Transcriber):
        self._transcriber = transcriber

    def transcribe(self, audio_data: bytes, language: str) -> TranscriptionResult:
        """
        Transcribes one audio chunk using AssemblyAI.

        Writes audio to a temp file (required by AssemblyAI SDK) and maps the
        word list to seconds-based Words. AssemblyAI timestamps are in
        milliseconds; missing word confidences fall back to a fixed default.
        """
        config = aai.TranscriptionConfig(language_code=language)
        try:
            with tempfile.NamedTemporaryFile(delete=True) as temp_file:
                temp_file.write(audio_data)
                temp_file.flush()

                transcript = self._transcriber.transcribe(temp_file.name, config=config)
        except Exception as e:
            logger.exception("AssemblyAI transcription call failed")
            raise TranscriptionError(str(e), cause=e) from e

        if transcript.status == aai.TranscriptStatus.error:
            status = getattr(transcript.status, "value", transcript.status)
            logger.error(
                "AssemblyAI returned an error",
                extra={"status": status, "error": transcript.error},
            )
            raise TranscriptionError(f"status '{status}': {transcript.error}")

        words = [
            Word(
                text=w.text,
                start=w.start / 1000.0,
                end=w.end / 1000.0,
                confidence=(
                    w.confidence if w.confidence is not None else DEFAULT_WORD_CONFIDENCE
                ),
            )
            for w in transcript.words or []
        ]

        response = transcript.json_response or {}
        result = TranscriptionResult(
            text=transcript.text or "",
            language=response.get("language_code") or language,
            duration=float(transcript.audio_duration or 0),
            words=words,
        )

        logger.info(
            "Audio transcription successful",
            extra={"word_count": len(words), "duration": result.duration},
        )
        return result

    def validate_api_key(self) -> bool:
        """Returns whether AssemblyAI accepts the client's API key."""
        try:
            self._transcriber.list_transcripts()
        except Exception:
            logger.warning("AssemblyAI API key validation failed", exc_info=True)
            return False
        return True
