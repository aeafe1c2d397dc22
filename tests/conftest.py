import pytest
from sqlalchemy.pool import StaticPool

from dictation.config import PipelineConfig, RetryPolicy
from dictation.database import get_engine, init_db, make_session_factory
from dictation.handlers import DictationService
from dictation.repositories import CredentialsRepository, SessionRepository
from fakes import FakeDispatcher, FakeStorage


@pytest.fixture
def session_factory():
    engine = get_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture
def repository(session_factory):
    return SessionRepository(session_factory)


@pytest.fixture
def credentials_repository(session_factory):
    return CredentialsRepository(session_factory)


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def dispatcher():
    return FakeDispatcher()


@pytest.fixture
def pipeline_config():
    return PipelineConfig(retry=RetryPolicy())


@pytest.fixture
def service(repository, storage, dispatcher, pipeline_config):
    return DictationService(repository, storage, dispatcher, pipeline_config)
