"""Test fixtures."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
import respx
import structlog

from dnlookup.cache import UserRecordCache
from dnlookup.config import Config
from dnlookup.factory import Factory
from dnlookup.services.classifier import GroupClassifier
from dnlookup.services.userinfo import UserLookupService

from .support.config import configure
from .support.directory import MockDirectory
from .support.keycloak import MockKeycloak, mock_keycloak


@pytest.fixture
def config() -> Config:
    """Load the default test configuration."""
    return configure("keycloak")


@pytest_asyncio.fixture
async def factory(config: Config) -> AsyncIterator[Factory]:
    """Return a component factory with a fresh process context."""
    async with Factory.standalone(config) as factory:
        yield factory


@pytest.fixture
def keycloak(config: Config, respx_mock: respx.Router) -> MockKeycloak:
    """Mock the Keycloak token and admin endpoints."""
    return mock_keycloak(config, respx_mock)


@pytest.fixture
def directory() -> MockDirectory:
    """Return an empty in-memory directory."""
    return MockDirectory()


@pytest.fixture
def lookup_service(directory: MockDirectory) -> UserLookupService:
    """Return a user lookup service backed by the in-memory directory."""
    logger = structlog.get_logger("dnlookup")
    return UserLookupService(
        directory=directory,
        cache=UserRecordCache(),
        classifier=GroupClassifier(logger),
        logger=logger,
    )
