from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from dictation.api import app
from dictation.dependencies import get_dictation_service
from fakes import make_result


@pytest.fixture
def client(service):
    app.dependency_overrides[get_dictation_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def _create(client, owner="owner-1"):
    response = client.post("/sessions", json={"title": "Consulta"}, headers={"X-Owner-Id": owner})
    assert response.status_code == 201
    return UUID(response.json()["session_id"])


def test_create_and_list_sessions(client):
    session_id = _create(client)
    _create(client, owner="owner-2")

    response = client.get("/sessions", headers={"X-Owner-Id": "owner-1"})

    assert response.status_code == 200
    assert [s["session_id"] for s in response.json()] == [str(session_id)]


def test_get_unknown_session_is_404(client):
    assert client.get(f"/sessions/{uuid4()}").status_code == 404


def test_upload_chunk_returns_chunk_id(client, dispatcher):
    session_id = _create(client)

    response = client.post(
        f"/sessions/{session_id}/chunks",
        files={"file": ("chunk.webm", b"audio", "audio/webm")},
        data={"start_time": "0", "end_time": "5"},
    )

    assert response.status_code == 202
    assert dispatcher.chunks == [response.json()["chunk_id"]]


def test_upload_chunk_with_bad_extension_is_422(client):
    session_id = _create(client)

    response = client.post(
        f"/sessions/{session_id}/chunks",
        files={"file": ("chunk.txt", b"audio", "text/plain")},
        data={"start_time": "0", "end_time": "5"},
    )

    assert response.status_code == 422


def test_finalize_twice_is_409(client):
    session_id = _create(client)

    assert client.post(f"/sessions/{session_id}/finalize").status_code == 202
    assert client.post(f"/sessions/{session_id}/finalize").status_code == 409


def test_transcript_and_accept_word(client, repository):
    session_id = _create(client)
    chunk = repository.add_chunk(session_id, "a.webm", 0.0, 1.0)
    partial = repository.add_partial_transcript(chunk, make_result("hola", "doctor"))

    response = client.post(
        f"/sessions/{session_id}/accept-word",
        json={"transcript_id": partial.id, "word_index": 1, "accepted_text": "doctora"},
    )
    assert response.status_code == 200
    assert response.json()["text"] == "hola doctora"

    transcript = client.get(f"/sessions/{session_id}/transcript").json()
    assert transcript["status"] == "recording"
    assert transcript["partials"][0]["text"] == "hola doctora"


def test_accept_word_out_of_range_is_422(client, repository):
    session_id = _create(client)
    chunk = repository.add_chunk(session_id, "a.webm", 0.0, 1.0)
    partial = repository.add_partial_transcript(chunk, make_result("hola"))

    response = client.post(
        f"/sessions/{session_id}/accept-word",
        json={"transcript_id": partial.id, "word_index": 3, "accepted_text": "x"},
    )

    assert response.status_code == 422


def test_delete_session(client):
    session_id = _create(client)

    assert client.delete(f"/sessions/{session_id}").status_code == 204
    assert client.get(f"/sessions/{session_id}").status_code == 404
