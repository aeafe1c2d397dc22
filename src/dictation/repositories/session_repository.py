"""Repository for sessions, chunks and transcripts."""

from uuid import UUID

from sqlalchemy import update
from sqlmodel import col, select

from dictation.db_models import AudioChunk, DictationSession, Transcript, utc_now
from dictation.domain.models import (
    MergedTranscript,
    PolishResult,
    SessionStatus,
    TranscriptionResult,
    TranscriptKind,
    Word,
)
from dictation.exceptions import SessionNotFoundError, TranscriptNotFoundError
from dictation.logging import setup_logging

logger = setup_logging()


class SessionRepository:
    """
    The durable store both pipeline stages read and write.

    Every method runs in its own short transaction; stages never hold a
    transaction open across an external call.
    """

    def __init__(self, session_factory):
        """
        Initializes the repository.

        Args:
            session_factory: Callable that returns a SQLModel Session context manager.
        """
        self._session_factory = session_factory

    # --- sessions ---

    def create_session(self, owner_id: str, title: str | None = None) -> DictationSession:
        session_entity = DictationSession(
            owner_id=owner_id,
            title=title or "Untitled Session",
            status=SessionStatus.RECORDING,
        )
        with self._session_factory() as db_session:
            db_session.add(session_entity)
            db_session.commit()
            db_session.refresh(session_entity)

        logger.info(
            "Session created",
            extra={"session_id": str(session_entity.id), "owner_id": owner_id},
        )
        return session_entity

    def get_session(self, session_id: UUID) -> DictationSession:
        """
        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        with self._session_factory() as db_session:
            session_entity = db_session.get(DictationSession, session_id)

        if session_entity is None:
            raise SessionNotFoundError(session_id)
        return session_entity

    def list_sessions(self, owner_id: str) -> list[DictationSession]:
        statement = (
            select(DictationSession)
            .where(DictationSession.owner_id == owner_id)
            .order_by(col(DictationSession.created_at).desc())
        )
        with self._session_factory() as db_session:
            return list(db_session.exec(statement).all())

    def set_status(self, session_id: UUID, status: SessionStatus) -> None:
        statement = (
            update(DictationSession)
            .where(col(DictationSession.id) == session_id)
            .values(status=status, updated_at=utc_now())
        )
        with self._session_factory() as db_session:
            db_session.connection().execute(statement)
            db_session.commit()

        logger.info(
            "Session status updated",
            extra={"session_id": str(session_id), "status": status.value},
        )

    def try_begin_finalize(self, session_id: UUID) -> bool:
        """
        Atomically moves a session to `processing` unless it already is.

        Returns:
            True if this caller made the transition.
        """
        statement = (
            update(DictationSession)
            .where(
                col(DictationSession.id) == session_id,
                col(DictationSession.status) != SessionStatus.PROCESSING,
            )
            .values(status=SessionStatus.PROCESSING, updated_at=utc_now())
        )
        with self._session_factory() as db_session:
            result = db_session.connection().execute(statement)
            db_session.commit()
            return result.rowcount == 1

    def delete_session(self, session_id: UUID) -> list[str]:
        """
        Deletes a session together with its chunks and transcripts.

        Returns:
            Storage locators of the deleted chunks.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        with self._session_factory() as db_session:
            session_entity = db_session.get(DictationSession, session_id)
            if session_entity is None:
                raise SessionNotFoundError(session_id)

            filenames = [chunk.filename for chunk in session_entity.chunks]
            db_session.delete(session_entity)
            db_session.commit()

        logger.info(
            "Session deleted",
            extra={"session_id": str(session_id), "chunk_count": len(filenames)},
        )
        return filenames

    # --- chunks ---

    def add_chunk(
        self, session_id: UUID, filename: str, start_time: float, end_time: float
    ) -> AudioChunk:
        chunk = AudioChunk(
            session_id=session_id,
            filename=filename,
            start_time=start_time,
            end_time=end_time,
        )
        with self._session_factory() as db_session:
            db_session.add(chunk)
            db_session.commit()
            db_session.refresh(chunk)
        return chunk

    def get_chunk(self, chunk_id: int) -> AudioChunk | None:
        with self._session_factory() as db_session:
            return db_session.get(AudioChunk, chunk_id)

    def list_chunk_filenames(self, session_id: UUID) -> list[str]:
        """
        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        statement = select(AudioChunk.filename).where(AudioChunk.session_id == session_id)
        with self._session_factory() as db_session:
            if db_session.get(DictationSession, session_id) is None:
                raise SessionNotFoundError(session_id)
            return list(db_session.exec(statement).all())

    # --- transcripts ---

    def add_partial_transcript(
        self, chunk: AudioChunk, result: TranscriptionResult
    ) -> Transcript:
        transcript = Transcript(
            session_id=chunk.session_id,
            kind=TranscriptKind.PARTIAL,
            text=result.text,
            words=[w.model_dump() for w in result.words],
            language=result.language,
            duration=result.duration,
            chunk_id=chunk.id,
            chunk_start_time=chunk.start_time,
            chunk_end_time=chunk.end_time,
        )
        return self._insert(transcript)

    def add_final_transcript(
        self, session_id: UUID, polished: PolishResult, merged: MergedTranscript
    ) -> Transcript:
        transcript = Transcript(
            session_id=session_id,
            kind=TranscriptKind.FINAL,
            text=polished.text,
            words=[w.model_dump() for w in merged.words],
            segments=[s.model_dump() for s in polished.segments],
            uncertain_words=[u.model_dump() for u in polished.uncertain_words],
            partial_count=merged.partial_count,
        )
        return self._insert(transcript)

    def list_partials(self, session_id: UUID, newest_first: bool = False) -> list[Transcript]:
        """Returns the session's partial transcripts in creation order."""
        order = (
            (col(Transcript.created_at).desc(), col(Transcript.id).desc())
            if newest_first
            else (col(Transcript.created_at), col(Transcript.id))
        )
        statement = (
            select(Transcript)
            .where(
                Transcript.session_id == session_id,
                Transcript.kind == TranscriptKind.PARTIAL,
            )
            .order_by(*order)
        )
        with self._session_factory() as db_session:
            return list(db_session.exec(statement).all())

    def latest_final(self, session_id: UUID) -> Transcript | None:
        statement = (
            select(Transcript)
            .where(
                Transcript.session_id == session_id,
                Transcript.kind == TranscriptKind.FINAL,
            )
            .order_by(col(Transcript.created_at).desc(), col(Transcript.id).desc())
            .limit(1)
        )
        with self._session_factory() as db_session:
            return db_session.exec(statement).first()

    def get_transcript(self, session_id: UUID, transcript_id: int) -> Transcript:
        """
        Raises:
            TranscriptNotFoundError: If no such transcript belongs to the session.
        """
        with self._session_factory() as db_session:
            transcript = db_session.get(Transcript, transcript_id)

        if transcript is None or transcript.session_id != session_id:
            raise TranscriptNotFoundError(transcript_id)
        return transcript

    def update_transcript_words(
        self, transcript_id: int, words: list[Word], text: str
    ) -> Transcript:
        with self._session_factory() as db_session:
            transcript = db_session.get(Transcript, transcript_id)
            if transcript is None:
                raise TranscriptNotFoundError(transcript_id)

            # reassign so the JSON column is flagged dirty
            transcript.words = [w.model_dump() for w in words]
            transcript.text = text
            db_session.add(transcript)
            db_session.commit()
            db_session.refresh(transcript)
        return transcript

    def _insert(self, transcript: Transcript) -> Transcript:
        with self._session_factory() as db_session:
            db_session.add(transcript)
            db_session.commit()
            db_session.refresh(transcript)

        logger.info(
            "Transcript stored",
            extra={
                "session_id": str(transcript.session_id),
                "transcript_id": transcript.id,
                "kind": transcript.kind.value,
            },
        )
        return transcript
