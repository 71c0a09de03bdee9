from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, create_engine

from timegate.app import deps
from timegate.app.domain import models  # noqa: F401
from timegate.app.infra.clock import FixedClock
from timegate.app.infra.db import make_session_factory, session_scope
from timegate.app.main import app

TUESDAY_9AM = datetime(2024, 6, 4, 9, 0)


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'timegate.db'}",
        connect_args={"check_same_thread": False},
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def fixed_clock():
    return FixedClock(TUESDAY_9AM)


@pytest.fixture
def client(session_factory, fixed_clock):
    def _db_session():
        with session_scope(session_factory) as session:
            yield session

    app.dependency_overrides[deps.db_session] = _db_session
    app.dependency_overrides[deps.audit_session_factory] = lambda: session_factory
    app.dependency_overrides[deps.clock] = lambda: fixed_clock
    yield TestClient(app)
    app.dependency_overrides.clear()
