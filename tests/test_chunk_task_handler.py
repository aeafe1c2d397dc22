import pytest

from dictation.domain import ChunkTask
from dictation.exceptions import MissingAudioError, SessionNotFoundError, TranscriptionError
from dictation.handlers import ChunkTaskHandler
from fakes import FakeAdapterProvider, FakeTranscriber, make_result


@pytest.fixture
def session_id(repository):
    return repository.create_session("owner-1").id


def _handler(repository, storage, transcriber):
    return ChunkTaskHandler(repository, storage, FakeAdapterProvider(transcriber), "es")


def test_process_creates_one_partial(repository, storage, session_id):
    storage.upload("audio-chunks/a.webm", b"audio", "audio/webm")
    chunk = repository.add_chunk(session_id, "audio-chunks/a.webm", 0.0, 5.0)
    transcriber = FakeTranscriber([make_result("hola", "doctor")])

    _handler(repository, storage, transcriber).process(ChunkTask(chunk_id=chunk.id))

    partials = repository.list_partials(session_id)
    assert len(partials) == 1
    assert partials[0].text == "hola doctor"
    assert partials[0].chunk_id == chunk.id
    assert transcriber.calls == [(b"audio", "es")]


def test_process_uses_session_owner_credentials(repository, storage, session_id):
    storage.upload("a.webm", b"audio", "audio/webm")
    chunk = repository.add_chunk(session_id, "a.webm", 0.0, 5.0)
    adapters = FakeAdapterProvider(FakeTranscriber([make_result("hola")]))

    ChunkTaskHandler(repository, storage, adapters, "es").process(ChunkTask(chunk_id=chunk.id))

    assert adapters.owners == ["owner-1"]


def test_process_missing_audio_raises(repository, storage, session_id):
    chunk = repository.add_chunk(session_id, "audio-chunks/gone.webm", 0.0, 5.0)
    transcriber = FakeTranscriber()

    with pytest.raises(MissingAudioError):
        _handler(repository, storage, transcriber).process(ChunkTask(chunk_id=chunk.id))

    assert transcriber.calls == []
    assert repository.list_partials(session_id) == []


def test_process_deleted_chunk_is_noop(repository, storage):
    transcriber = FakeTranscriber()

    _handler(repository, storage, transcriber).process(ChunkTask(chunk_id=999))

    assert transcriber.calls == []


def test_transcription_failure_propagates_without_partial(repository, storage, session_id):
    storage.upload("a.webm", b"audio", "audio/webm")
    chunk = repository.add_chunk(session_id, "a.webm", 0.0, 5.0)
    transcriber = FakeTranscriber(error=TranscriptionError("status 500"))

    with pytest.raises(TranscriptionError):
        _handler(repository, storage, transcriber).process(ChunkTask(chunk_id=chunk.id))

    assert repository.list_partials(session_id) == []


def test_process_skips_chunk_of_deleted_session(repository, storage, session_id, monkeypatch):
    chunk = repository.add_chunk(session_id, "a.webm", 0.0, 5.0)
    transcriber = FakeTranscriber([make_result("hola")])

    def missing_session(requested_id):
        raise SessionNotFoundError(requested_id)

    monkeypatch.setattr(repository, "get_session", missing_session)

    _handler(repository, storage, transcriber).process(ChunkTask(chunk_id=chunk.id))

    assert transcriber.calls == []
    assert repository.list_partials(session_id) == []
