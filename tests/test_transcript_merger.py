from uuid import uuid4

from dictation.db_models import Transcript
from dictation.domain import TranscriptKind, TranscriptMerger
from fakes import make_words


def _partial(text: str, chunk_start_time=None) -> Transcript:
    return Transcript(
        session_id=uuid4(),
        kind=TranscriptKind.PARTIAL,
        text=text,
        words=[w.model_dump() for w in make_words(*text.split())],
        chunk_start_time=chunk_start_time,
    )


def test_merge_joins_text_and_words_in_creation_order():
    partials = [_partial("hola doctor"), _partial("buenos días a todos")]

    merged = TranscriptMerger().merge(partials)

    assert merged.text == "hola doctor buenos días a todos"
    assert [w.text for w in merged.words] == ["hola", "doctor", "buenos", "días", "a", "todos"]
    assert merged.partial_count == 2


def test_merge_single_partial_keeps_its_text():
    merged = TranscriptMerger().merge([_partial("una sola frase")])

    assert merged.text == "una sola frase"
    assert merged.partial_count == 1


def test_chunk_start_order_sorts_by_declared_offset():
    partials = [
        _partial("tercero", chunk_start_time=20.0),
        _partial("primero", chunk_start_time=0.0),
        _partial("segundo", chunk_start_time=10.0),
    ]

    merged = TranscriptMerger(order="chunk_start").merge(partials)

    assert merged.text == "primero segundo tercero"


def test_chunk_start_order_is_stable_and_puts_unknown_offsets_last():
    partials = [
        _partial("sin", chunk_start_time=None),
        _partial("b", chunk_start_time=5.0),
        _partial("c", chunk_start_time=5.0),
        _partial("a", chunk_start_time=1.0),
    ]

    merged = TranscriptMerger(order="chunk_start").merge(partials)

    assert merged.text == "a b c sin"


def test_created_at_order_ignores_offsets():
    partials = [_partial("b", chunk_start_time=5.0), _partial("a", chunk_start_time=1.0)]

    merged = TranscriptMerger(order="created_at").merge(partials)

    assert merged.text == "b a"
