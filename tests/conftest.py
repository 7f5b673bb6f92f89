"""Shared pytest fixtures for reqcheck test suites."""

from collections.abc import Generator
from pathlib import Path
import sys

import pytest
from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Provide an API test client for the default application."""
    from reqcheck.main import create_app
    from reqcheck.core.config import Settings

    with TestClient(create_app(Settings())) as test_client:
        yield test_client
