"""Shared test fixtures for the holdings test suite.

All tests use a throwaway SQLite database configured through environment
variables before the app is imported. The app creates its tables on
import; each test starts from empty tables and a fresh code counter.
"""

import os
import tempfile

_TEST_DB_DIR = tempfile.mkdtemp(prefix="holdings-test-")

# Point the app at the test database before any app imports.
os.environ["DATABASE_URL"] = os.environ.get(
    "TEST_DATABASE_URL",
    f"sqlite:///{os.path.join(_TEST_DB_DIR, 'test.db')}",
)
os.environ["LOG_FORMAT"] = "text"
os.environ["SEED_SAMPLE_DATA"] = "false"
os.environ["ENVIRONMENT"] = "development"

import pytest
from fastapi.testclient import TestClient

from holdings.database import get_db, SessionLocal
from holdings.main import app
from holdings.levels import Level
from holdings.models import (
    Shareholder, Company, Project, DataTable, View,
    Folder, SelectedView, CodeCounter, Setting,
)
from holdings.schemas import EntityCreate
from holdings.services.code_allocator import init_code_counter
from holdings.services.entity_service import EntityService

# Emptied before every test.
_CLEAN_MODELS = [
    SelectedView, View, DataTable, Project, Company, Shareholder,
    Folder, Setting, CodeCounter,
]


@pytest.fixture(autouse=True)
def _clean_tables():
    """Empty all tables before each test for isolation.

    Runs before the test (not after) so test failures leave data
    available for debugging.
    """
    db = SessionLocal()
    try:
        for model in _CLEAN_MODELS:
            db.query(model).delete()
        db.commit()
        init_code_counter(db)
    finally:
        db.close()
    yield


@pytest.fixture()
def db():
    """Per-test database session."""
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def client(db):
    """FastAPI TestClient with the DB dependency overridden to use the test session."""

    def _override_get_db():
        try:
            yield db
        except Exception:
            db.rollback()
            raise

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def make_chain(db):
    """Factory creating a shareholder with its default child chain.

    Returns a dict of ids keyed by level name.
    """

    def _make(name: str = "Holder") -> dict:
        shareholder = EntityService(db, Level.SHAREHOLDER).create(EntityCreate(name=name))
        ids = {"shareholder": shareholder["id"]}
        parent_id = shareholder["id"]
        for level in (Level.COMPANY, Level.PROJECT, Level.TABLE, Level.VIEW):
            nodes = EntityService(db, level).get_all(parent_id)
            parent_id = nodes[0]["id"]
            ids[level.value] = parent_id
        return ids

    return _make
