"""Keycloak storage layer for dnlookup."""

from __future__ import annotations

from typing import Any

from httpx import AsyncClient, HTTPError
from pydantic import TypeAdapter, ValidationError
from structlog.stdlib import BoundLogger

from ..config import KeycloakConfig
from ..exceptions import KeycloakError, KeycloakWebError
from ..models.directory import DirectoryGroup, DirectoryUser

_USERS_ADAPTER = TypeAdapter(list[DirectoryUser])
"""Parser for the Keycloak user list."""

_GROUPS_ADAPTER = TypeAdapter(list[DirectoryGroup])
"""Parser for the Keycloak group membership list."""

__all__ = ["KeycloakStorage"]


class KeycloakStorage:
    """Look up users and groups with the Keycloak admin REST API.

    Every call authenticates with an OAuth 2.0 client credentials grant, so
    the configured client's service account must be allowed to view users.
    Tokens are not cached between calls.

    Parameters
    ----------
    config
        Keycloak configuration.
    http_client
        HTTP client to use.
    logger
        Logger to use.
    """

    def __init__(
        self,
        *,
        config: KeycloakConfig,
        http_client: AsyncClient,
        logger: BoundLogger,
    ) -> None:
        self._config = config
        self._http_client = http_client
        self._logger = logger.bind(
            keycloak_url=config.base_url, keycloak_realm=config.realm
        )

    async def list_users(self) -> list[DirectoryUser]:
        """List all users in the realm.

        Returns
        -------
        list of DirectoryUser
            Users in the order returned by Keycloak.

        Raises
        ------
        KeycloakError
            Raised if the response from Keycloak could not be parsed.
        KeycloakWebError
            Raised if an HTTP error occurred talking to Keycloak.
        """
        url = self._config.admin_url + "/users"
        result = await self._get(url, {"briefRepresentation": "false"})
        try:
            users = _USERS_ADAPTER.validate_python(result)
        except ValidationError as e:
            msg = f"Keycloak user list invalid: {e!s}"
            self._logger.exception("Invalid Keycloak user list")
            raise KeycloakError(msg) from e
        self._logger.debug("Listed Keycloak users", count=len(users))
        return users

    async def list_groups(self, user_id: str) -> list[DirectoryGroup]:
        """List the groups of a user.

        Parameters
        ----------
        user_id
            Keycloak ID of the user.

        Returns
        -------
        list of DirectoryGroup
            Groups of which the user is a direct member.

        Raises
        ------
        KeycloakError
            Raised if the response from Keycloak could not be parsed.
        KeycloakWebError
            Raised if an HTTP error occurred talking to Keycloak.
        """
        url = f"{self._config.admin_url}/users/{user_id}/groups"
        result = await self._get(url, {"briefRepresentation": "false"})
        try:
            groups = _GROUPS_ADAPTER.validate_python(result)
        except ValidationError as e:
            msg = f"Keycloak groups for {user_id} invalid: {e!s}"
            self._logger.exception("Invalid Keycloak group list", user=user_id)
            raise KeycloakError(msg) from e
        self._logger.debug(
            "Keycloak groups found",
            user=user_id,
            groups=[g.path for g in groups],
        )
        return groups

    async def _get(self, url: str, params: dict[str, str]) -> Any:
        """Make an authenticated GET request to the admin API.

        Parameters
        ----------
        url
            URL to retrieve.
        params
            Query parameters.

        Returns
        -------
        Any
            Parsed JSON body of the response.

        Raises
        ------
        KeycloakError
            Raised if the response was not valid JSON.
        KeycloakWebError
            Raised if an HTTP error occurred.
        """
        token = await self._get_token()
        headers = {"Authorization": f"Bearer {token}"}
        try:
            r = await self._http_client.get(
                url, params=params, headers=headers
            )
            r.raise_for_status()
            return r.json()
        except HTTPError as e:
            raise KeycloakWebError.from_exception(e) from e
        except ValueError as e:
            msg = f"Keycloak response from {url} is not JSON: {e!s}"
            raise KeycloakError(msg) from e

    async def _get_token(self) -> str:
        """Obtain an access token with the client credentials grant.

        Returns
        -------
        str
            Access token for the admin API.

        Raises
        ------
        KeycloakError
            Raised if the token response did not contain an access token.
        KeycloakWebError
            Raised if an HTTP error occurred.
        """
        data = {
            "grant_type": "client_credentials",
            "client_id": self._config.client_id,
            "client_secret": self._config.client_secret.get_secret_value(),
        }
        try:
            r = await self._http_client.post(self._config.token_url, data=data)
            r.raise_for_status()
            return r.json()["access_token"]
        except HTTPError as e:
            raise KeycloakWebError.from_exception(e) from e
        except (KeyError, TypeError, ValueError) as e:
            error = f"{type(e).__name__}: {e!s}"
            msg = f"Keycloak token response invalid: {error}"
            raise KeycloakError(msg) from e
