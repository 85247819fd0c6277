from __future__ import annotations

import pytest
from sqlalchemy.pool import StaticPool
from starlette.testclient import TestClient

from app.infra.db import build_engine, build_session_factory, create_schema
from app.infra.repository import TaskStore
from app.main import create_app


@pytest.fixture
def engine():
    engine = build_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def store(session_factory) -> TaskStore:
    return TaskStore(session_factory)


@pytest.fixture
def client(session_factory) -> TestClient:
    return TestClient(create_app(session_factory))
