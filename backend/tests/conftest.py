"""Shared pytest fixtures: an isolated database per test and an API client bound to it."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, _enable_sqlite_foreign_keys, get_db
from main import app
from tests.fixtures import (  # noqa: F401
    auth_headers,
    external_account,
    mortgage_account,
    snapshot,
)


@pytest.fixture(name="db")
def db_fixture():
    """In-memory SQLite with the same FK enforcement the app engine uses."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    _enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)

    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(name="client")
def client_fixture(db):
    """API client whose requests all share the test session."""
    app.dependency_overrides[get_db] = lambda: db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
