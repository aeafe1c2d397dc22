from uuid import uuid4

import pytest

from dictation.domain import MergedTranscript, PolishResult, SessionStatus, TranscriptKind
from dictation.exceptions import SessionNotFoundError, TranscriptNotFoundError
from fakes import make_result, make_words


def test_create_session_defaults(repository):
    created = repository.create_session("owner-1")

    loaded = repository.get_session(created.id)
    assert loaded.title == "Untitled Session"
    assert loaded.status == SessionStatus.RECORDING
    assert loaded.owner_id == "owner-1"


def test_get_missing_session_raises(repository):
    with pytest.raises(SessionNotFoundError):
        repository.get_session(uuid4())


def test_list_sessions_filters_by_owner(repository):
    repository.create_session("owner-1", "a")
    repository.create_session("owner-1", "b")
    repository.create_session("owner-2", "c")

    titles = {s.title for s in repository.list_sessions("owner-1")}

    assert titles == {"a", "b"}


def test_try_begin_finalize_succeeds_once(repository):
    session_id = repository.create_session("owner-1").id

    assert repository.try_begin_finalize(session_id) is True
    assert repository.try_begin_finalize(session_id) is False
    assert repository.get_session(session_id).status == SessionStatus.PROCESSING


def test_try_begin_finalize_allowed_again_after_ready(repository):
    session_id = repository.create_session("owner-1").id
    repository.try_begin_finalize(session_id)
    repository.set_status(session_id, SessionStatus.READY)

    assert repository.try_begin_finalize(session_id) is True


def test_partials_listed_in_creation_order(repository):
    session_id = repository.create_session("owner-1").id
    first = repository.add_chunk(session_id, "a.webm", 0.0, 5.0)
    second = repository.add_chunk(session_id, "b.webm", 5.0, 10.0)
    repository.add_partial_transcript(first, make_result("uno"))
    repository.add_partial_transcript(second, make_result("dos"))

    oldest_first = [p.text for p in repository.list_partials(session_id)]
    newest_first = [p.text for p in repository.list_partials(session_id, newest_first=True)]

    assert oldest_first == ["uno", "dos"]
    assert newest_first == ["dos", "uno"]


def test_partial_records_chunk_offsets(repository):
    session_id = repository.create_session("owner-1").id
    chunk = repository.add_chunk(session_id, "a.webm", 12.5, 20.0)

    partial = repository.add_partial_transcript(chunk, make_result("hola", "mundo"))

    assert partial.kind == TranscriptKind.PARTIAL
    assert partial.chunk_id == chunk.id
    assert partial.chunk_start_time == 12.5
    assert partial.chunk_end_time == 20.0
    assert [w.text for w in partial.word_list()] == ["hola", "mundo"]


def test_latest_final_returns_most_recent(repository):
    session_id = repository.create_session("owner-1").id
    merged = MergedTranscript(text="x", words=make_words("x"), partial_count=1)
    repository.add_final_transcript(session_id, PolishResult(text="primera"), merged)
    repository.add_final_transcript(session_id, PolishResult(text="segunda"), merged)

    assert repository.latest_final(session_id).text == "segunda"
    assert repository.list_partials(session_id) == []


def test_get_transcript_from_other_session_raises(repository):
    session_a = repository.create_session("owner-1").id
    session_b = repository.create_session("owner-1").id
    chunk = repository.add_chunk(session_a, "a.webm", 0.0, 1.0)
    partial = repository.add_partial_transcript(chunk, make_result("hola"))

    with pytest.raises(TranscriptNotFoundError):
        repository.get_transcript(session_b, partial.id)


def test_delete_session_cascades(repository):
    session_id = repository.create_session("owner-1").id
    chunk = repository.add_chunk(session_id, "audio-chunks/a.webm", 0.0, 1.0)
    repository.add_partial_transcript(chunk, make_result("hola"))

    filenames = repository.delete_session(session_id)

    assert filenames == ["audio-chunks/a.webm"]
    assert repository.get_chunk(chunk.id) is None
    assert repository.list_partials(session_id) == []
    with pytest.raises(SessionNotFoundError):
        repository.get_session(session_id)
