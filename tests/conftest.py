"""
Pytest configuration and fixtures.

Provides common fixtures for testing.
"""

import pytest

from xiq.config import AppConfig
from xiq.repositories.memory_repository import InMemoryRepository
from xiq.services.orchestrator import RequestOrchestrator
from tests.mocks.clock import FakeClock
from tests.mocks.factories import build_config, build_orchestrator
from tests.mocks.llm_mocks import MockLLMProvider
from tests.mocks.x_mocks import MockXClient


@pytest.fixture
def test_config() -> AppConfig:
    """
    Create test configuration.

    Returns:
        Test configuration instance
    """
    return build_config()


@pytest.fixture
def clock() -> FakeClock:
    """Simulated clock."""
    return FakeClock()


@pytest.fixture
def memory_store(clock: FakeClock) -> InMemoryRepository:
    """In-memory store driven by the simulated clock."""
    return InMemoryRepository(clock=clock)


@pytest.fixture
def x_client() -> MockXClient:
    """X API double with a few known accounts."""
    client = MockXClient()
    client.add_user("jack", posts=["just setting up my twttr", "older post"])
    client.add_user("quiet", posts=[], searchable=False)
    client.add_user("private", posts=["protected post"], searchable=False)
    return client


@pytest.fixture
def llm_provider() -> MockLLMProvider:
    """Score model double."""
    return MockLLMProvider()


@pytest.fixture
def orchestrator(
    test_config: AppConfig,
    memory_store: InMemoryRepository,
    x_client: MockXClient,
    llm_provider: MockLLMProvider,
    clock: FakeClock,
) -> RequestOrchestrator:
    """Orchestrator backed by the in-memory store."""
    return build_orchestrator(test_config, memory_store, x_client, llm_provider, clock)
