"""
Shared pytest fixtures for backend tests.
Uses a temp-file SQLite database and a stub LLM provider for isolation.
"""
import pytest
import sqlite3
import sys
import os

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import database
from providers import LLMProvider


class StubProvider(LLMProvider):
    """Provider that returns a canned response (or raises) without any network call."""
    name = "stub"

    def __init__(self, response: str = "", error: Exception = None):
        super().__init__(api_key="test-key", model="stub-model")
        self.response = response
        self.error = error
        self.prompts = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def stub_provider():
    return StubProvider()


@pytest.fixture
def test_db(monkeypatch, tmp_path):
    """
    Create an isolated test database for each test.
    Uses a temp file (not :memory:) because database.py opens new connections per operation.
    """
    db_path = str(tmp_path / "test.db")
    monkeypatch.setattr(database, "DATABASE_PATH", db_path)
    monkeypatch.setattr(database, "init_db", lambda: None)

    # Create tables directly (skip alembic for tests)
    conn = sqlite3.connect(db_path)
    conn.executescript("""
        CREATE TABLE tasks (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            description TEXT DEFAULT '',
            assignee TEXT NOT NULL,
            due_date TEXT NOT NULL,
            priority TEXT NOT NULL DEFAULT 'P3',
            status TEXT NOT NULL DEFAULT 'pending',
            completed TEXT,
            created_at TEXT NOT NULL
        );
    """)
    conn.commit()
    conn.close()

    yield db_path


@pytest.fixture
def app_client(test_db, stub_provider, monkeypatch):
    """
    Create a test client for the FastAPI app.
    init_db is mocked by test_db; the LLM provider is replaced by stub_provider.
    """
    from fastapi.testclient import TestClient
    import main

    # Lifespan reads settings from the environment
    monkeypatch.setenv("DATABASE_PATH", test_db)
    monkeypatch.setenv("APP_ENV", "development")
    monkeypatch.setenv("LLM_PROVIDER", "anthropic")

    main.app.dependency_overrides[main.get_provider] = lambda: stub_provider
    with TestClient(main.app) as client:
        yield client
    main.app.dependency_overrides.clear()
