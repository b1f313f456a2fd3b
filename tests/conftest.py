import os

import pytest
from fastapi.testclient import TestClient

# Ensure we default to memory backend for tests to avoid filesystem dependencies
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from todo_api.main import app  # noqa: E402
from todo_api.repositories import InMemoryRepository, get_repository  # noqa: E402


@pytest.fixture
def repo():
    return InMemoryRepository()


@pytest.fixture
def client(repo):
    # Fresh storage per test so order numbering starts at 1
    app.dependency_overrides[get_repository] = lambda: repo
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
