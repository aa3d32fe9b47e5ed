"""Fixtures do pytest para os testes do civic_events."""
import os
import tempfile

# antes de importar o app: sem migração no startup e sem ./data no repo
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="civic-events-"))
os.environ.setdefault("AUTO_MIGRATE", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from civic_events.db.base import Base
from civic_events.db.session import get_db
from civic_events.main import api
import civic_events.models  # noqa: F401

from tests.fakes import InMemoryEnrollmentLedger, InMemoryEventCatalog, InMemoryPersonStore


@pytest.fixture
def engine():
    eng = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    api.dependency_overrides[get_db] = override_get_db
    yield TestClient(api)
    api.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# colaboradores em memória
# ---------------------------------------------------------------------------


@pytest.fixture
def person_store():
    return InMemoryPersonStore()


@pytest.fixture
def catalog():
    return InMemoryEventCatalog()


@pytest.fixture
def ledger(catalog):
    return InMemoryEnrollmentLedger(catalog)
