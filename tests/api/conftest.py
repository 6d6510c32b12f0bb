# tests/api/conftest.py
"""
Shared fixtures for API tests.
Uses FastAPI's TestClient with an injected scraper.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from ecs_exporter.api.app import create_app
from ecs_exporter.core.scraper import MultiClusterScraper


@pytest.fixture
def scraper(fake_ecs):
    """A real scraper backed by the fake ECS API."""
    return MultiClusterScraper(fake_ecs, ["production", "staging"])


@pytest.fixture
def failing_scraper():
    """A scraper whose scrape() raises."""
    scraper = AsyncMock()
    scraper.scrape = AsyncMock(side_effect=RuntimeError("unexpected"))
    return scraper


@pytest.fixture
def client(scraper):
    """Creates a TestClient around an app with the scraper injected."""
    app = create_app(scraper=scraper)
    with TestClient(app) as c:
        yield c
