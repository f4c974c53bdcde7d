"""
Pytest configuration and shared fixtures.

Every test gets its own SQLite file under ``tmp_path`` so tests never
share rows.
"""
import pytest
from fastapi.testclient import TestClient

from mailinglist_api.app.core.config import Settings
from mailinglist_api.app.main import create_app
from mailinglist_api.app.services.email_service import EmailStore


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "list.db")


@pytest.fixture
def store(db_path):
    """A store with the subscriber table already created."""
    store = EmailStore(db_path)
    store.ensure_schema()
    return store


@pytest.fixture
def app(db_path):
    return create_app(Settings(database_url=db_path))


@pytest.fixture
def client(app):
    """Test client; entering it runs the startup hook that creates the table."""
    with TestClient(app) as c:
        yield c
