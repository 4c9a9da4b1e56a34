"""
Pytest configuration and fixtures for ShelfLink tests.
"""

import sys
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from shelflink.api.main import create_app
from shelflink.api.dependencies import (
    Settings,
    ServiceContainer,
    get_settings,
    get_service_container,
)
from shelflink.linking import LinkRepairService
from shelflink.storage import LinkRepository


# =============================================================================
# Test Settings
# =============================================================================

def get_test_settings() -> Settings:
    """Return settings configured for testing."""
    return Settings(
        database_url="sqlite:///:memory:",
        database_echo=False,
        environment="test",
        debug=True,
    )


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture
def repository() -> LinkRepository:
    """Fresh in-memory repository per test."""
    repo = LinkRepository("sqlite:///:memory:")
    yield repo
    repo.engine.dispose()


@pytest.fixture
def service(repository) -> LinkRepairService:
    return LinkRepairService(repository)


@pytest.fixture
def library(repository) -> dict:
    """
    A reader with three library books, a reading list and a challenge.

    Reading list links (all broken):
        "Suç ve Ceza" / "Dostoyevski"   -> HIGH match, auto-linked
        "1984" / "George Orwell"        -> no usable match
        "Dune" / ""                     -> MEDIUM match, suggested
    Challenge links (broken):
        "Hayvan Ciftligi" / "Orwell"    -> HIGH match, auto-linked
    """
    reader = repository.add_user(email="reader@example.com")
    other = repository.add_user(email="other@example.com")

    crime = repository.add_book(reader.id, "Suç ve Ceza", "Fyodor Dostoyevski")
    animal_farm = repository.add_book(reader.id, "Hayvan Çiftliği", "George Orwell")
    dune = repository.add_book(reader.id, "Dune", "Frank Herbert")
    others_crime = repository.add_book(other.id, "Suç ve Ceza", "Fyodor Dostoyevski")

    classics = repository.add_reading_list("Klasikler", slug="klasikler")
    crime_entry = repository.add_reading_list_book(classics, "Suç ve Ceza", "Dostoyevski")
    orwell_entry = repository.add_reading_list_book(classics, "1984", "George Orwell")
    dune_entry = repository.add_reading_list_book(classics, "Dune", "")

    crime_link = repository.create_reading_list_link(reader.id, crime_entry)
    orwell_link = repository.create_reading_list_link(reader.id, orwell_entry)
    dune_link = repository.create_reading_list_link(reader.id, dune_entry)
    others_dune_link = repository.create_reading_list_link(other.id, dune_entry)

    challenge = repository.add_challenge("Okuma Challenge", 2026)
    animal_farm_entry = repository.add_challenge_book(challenge, "Hayvan Ciftligi", "Orwell")
    challenge_link = repository.add_challenge_link(reader.id, animal_farm_entry)

    return {
        "reader": reader,
        "other": other,
        "books": {
            "crime": crime,
            "animal_farm": animal_farm,
            "dune": dune,
            "others_crime": others_crime,
        },
        "links": {
            "crime": crime_link,
            "orwell": orwell_link,
            "dune": dune_link,
            "others_dune": others_dune_link,
            "challenge": challenge_link,
        },
    }


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def container(repository) -> ServiceContainer:
    """Service container wired to the test repository."""
    services = ServiceContainer(get_test_settings())
    services._link_repository = repository
    return services


@pytest_asyncio.fixture(scope="function")
async def app(container):
    """Create FastAPI application for testing."""
    application = create_app(get_test_settings())

    # Override dependencies
    application.dependency_overrides[get_settings] = get_test_settings
    application.dependency_overrides[get_service_container] = lambda: container

    yield application

    application.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture
def sample_catalog() -> list[dict]:
    """Candidate catalog for matching requests."""
    return [
        {"id": "b3", "title": "Hayvan Çiftliği", "author": "George Orwell"},
        {"id": "b1", "title": "Suç ve Ceza", "author": "Fyodor Dostoyevski"},
        {"id": "b2", "title": "Budala", "author": "Fyodor Dostoyevski"},
    ]
