"""Pytest configuration and shared fixtures."""

import pytest
from rest_framework.test import APIClient

from factories import (
    ROSTER,
    DictDraftStore,
    FakeClock,
    FixtureRoster,
    InMemoryEventStore,
    InMemoryTokenIssuer,
    NOW,
)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def event_store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def draft_store() -> DictDraftStore:
    return DictDraftStore()


@pytest.fixture
def roster() -> FixtureRoster:
    return FixtureRoster(list(ROSTER))


@pytest.fixture
def token_issuer() -> InMemoryTokenIssuer:
    return InMemoryTokenIssuer()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def token_clock():
    return lambda: NOW
