import pytest
from fastapi.testclient import TestClient

from dictation.api import app
from dictation.dependencies import get_credentials_service
from dictation.exceptions import InputValidationError
from dictation.handlers import CredentialsService
from fakes import FakeAdapterProvider


@pytest.fixture
def adapters():
    return FakeAdapterProvider(valid_keys={"aai-good", "gemini-good"})


@pytest.fixture
def credentials_service(credentials_repository, adapters):
    return CredentialsService(credentials_repository, adapters)


@pytest.fixture
def client(credentials_service):
    app.dependency_overrides[get_credentials_service] = lambda: credentials_service
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_upsert_creates_then_updates(credentials_repository):
    credentials_repository.upsert("owner-1", assemblyai_api_key="aai-1")
    credentials_repository.upsert("owner-1", gemini_api_key="gemini-1")

    credential = credentials_repository.get("owner-1")
    assert credential.assemblyai_api_key == "aai-1"
    assert credential.gemini_api_key == "gemini-1"


def test_upsert_empty_key_keeps_stored_key(credentials_repository):
    credentials_repository.upsert("owner-1", assemblyai_api_key="aai-1")

    credentials_repository.upsert("owner-1", assemblyai_api_key="", gemini_api_key="gemini-1")

    assert credentials_repository.get("owner-1").assemblyai_api_key == "aai-1"


def test_get_unknown_owner(credentials_repository):
    assert credentials_repository.get("nobody") is None


def test_update_api_keys_stores_validated_keys(credentials_service, credentials_repository, adapters):
    status = credentials_service.update_api_keys("owner-1", " aai-good ", "gemini-good")

    assert status.assemblyai_configured and status.gemini_configured
    assert adapters.validated == ["aai-good", "gemini-good"]
    assert credentials_repository.get("owner-1").assemblyai_api_key == "aai-good"


def test_update_api_keys_rejected_key_stores_nothing(credentials_service, credentials_repository):
    with pytest.raises(InputValidationError):
        credentials_service.update_api_keys("owner-1", "aai-good", "gemini-bad")

    assert credentials_repository.get("owner-1") is None


def test_update_api_keys_requires_a_key(credentials_service, adapters):
    with pytest.raises(InputValidationError):
        credentials_service.update_api_keys("owner-1", "  ", None)

    assert adapters.validated == []


def test_put_then_get_credentials(client):
    response = client.put(
        "/credentials",
        json={"gemini_api_key": "gemini-good"},
        headers={"X-Owner-Id": "owner-1"},
    )

    assert response.status_code == 200
    assert response.json() == {"assemblyai_configured": False, "gemini_configured": True}
    assert "gemini-good" not in response.text

    other = client.get("/credentials", headers={"X-Owner-Id": "owner-2"})
    assert other.json() == {"assemblyai_configured": False, "gemini_configured": False}


def test_put_rejected_key_is_422(client):
    response = client.put("/credentials", json={"assemblyai_api_key": "aai-bad"})

    assert response.status_code == 422
    assert response.json()["detail"] == "AssemblyAI rejected the API key"
