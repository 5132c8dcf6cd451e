"""Create dnlookup components."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Self

import structlog
from httpx import AsyncClient
from structlog.stdlib import BoundLogger

from .cache import UserRecordCache
from .config import Config
from .constants import HTTP_TIMEOUT
from .services.classifier import GroupClassifier
from .services.userinfo import UserLookupService
from .storage.keycloak import KeycloakStorage

__all__ = ["Factory", "ProcessContext"]


@dataclass(frozen=True, slots=True)
class ProcessContext:
    """Per-process application context.

    This object caches all of the per-process singletons that can be reused
    for every lookup and only need to be recreated if the configuration
    changes.
    """

    config: Config
    """dnlookup configuration."""

    http_client: AsyncClient
    """Shared HTTP client."""

    user_cache: UserRecordCache
    """Cache of resolved user records."""

    @classmethod
    async def from_config(cls, config: Config) -> Self:
        """Create a new process context from the dnlookup configuration.

        Parameters
        ----------
        config
            The dnlookup configuration.

        Returns
        -------
        ProcessContext
            Shared context for a dnlookup process.
        """
        return cls(
            config=config,
            http_client=AsyncClient(timeout=HTTP_TIMEOUT),
            user_cache=UserRecordCache(
                config.cache_size, config.cache_lifetime_seconds
            ),
        )

    async def aclose(self) -> None:
        """Clean up a process context.

        Called during shutdown, or before recreating the process context using
        a different configuration.
        """
        await self.http_client.aclose()
        await self.user_cache.clear()


class Factory:
    """Build dnlookup components.

    Uses the contents of a `ProcessContext` to construct the components of the
    application on demand.

    Parameters
    ----------
    context
        Shared process context.
    logger
        Logger to use for errors.
    """

    @classmethod
    @asynccontextmanager
    async def standalone(cls, config: Config) -> AsyncIterator[Self]:
        """Async context manager for dnlookup components.

        Intended for scripts and background jobs that do not share a process
        context with anything else.

        Parameters
        ----------
        config
            dnlookup configuration.

        Yields
        ------
        Factory
            The factory. Must be used as an async context manager.
        """
        logger = structlog.get_logger("dnlookup")
        context = await ProcessContext.from_config(config)
        try:
            yield cls(context, logger)
        finally:
            await context.aclose()

    def __init__(self, context: ProcessContext, logger: BoundLogger) -> None:
        self._context = context
        self._logger = logger

    def create_keycloak_storage(self) -> KeycloakStorage:
        """Create a Keycloak storage object.

        Returns
        -------
        KeycloakStorage
            Newly-created Keycloak storage.
        """
        return KeycloakStorage(
            config=self._context.config.keycloak,
            http_client=self._context.http_client,
            logger=self._logger,
        )

    def create_user_lookup_service(self) -> UserLookupService:
        """Create a service for resolving certificate principals.

        Returns
        -------
        UserLookupService
            Newly-created user lookup service.
        """
        return UserLookupService(
            directory=self.create_keycloak_storage(),
            cache=self._context.user_cache,
            classifier=GroupClassifier(self._logger),
            logger=self._logger,
        )
