"""Tests for the Keycloak storage layer."""

from __future__ import annotations

import pytest
import respx
from httpx import Response

from dnlookup.config import Config
from dnlookup.exceptions import KeycloakError, KeycloakWebError
from dnlookup.factory import Factory
from dnlookup.models.directory import DirectoryGroup

from ..support.keycloak import MockKeycloak


@pytest.mark.asyncio
async def test_list_users(factory: Factory, keycloak: MockKeycloak) -> None:
    keycloak.add_user(
        "a1", "alice", email="alice@example.com", certificate="Alice"
    )
    keycloak.add_user("a2", "bob")
    storage = factory.create_keycloak_storage()

    users = await storage.list_users()
    assert [u.username for u in users] == ["alice", "bob"]
    assert users[0].id == "a1"
    assert users[0].email == "alice@example.com"
    assert users[0].certificate == "Alice"
    assert users[1].email is None
    assert users[1].certificate is None
    assert users[1].attributes == {"department": ["testing"]}


@pytest.mark.asyncio
async def test_list_groups(factory: Factory, keycloak: MockKeycloak) -> None:
    keycloak.add_user(
        "a1", "alice", groups=["/SAP_ACCESS_2/READ/Prog1", "/ROLE_AUDITOR"]
    )
    storage = factory.create_keycloak_storage()

    groups = await storage.list_groups("a1")
    assert groups == [
        DirectoryGroup(name="Prog1", path="/SAP_ACCESS_2/READ/Prog1"),
        DirectoryGroup(name="ROLE_AUDITOR", path="/ROLE_AUDITOR"),
    ]

    with pytest.raises(KeycloakWebError):
        await storage.list_groups("unknown")


@pytest.mark.asyncio
async def test_token_failure(
    config: Config, factory: Factory, respx_mock: respx.Router
) -> None:
    respx_mock.post(config.keycloak.token_url).mock(
        return_value=Response(401, json={"error": "unauthorized_client"})
    )
    storage = factory.create_keycloak_storage()

    with pytest.raises(KeycloakWebError):
        await storage.list_users()


@pytest.mark.asyncio
async def test_invalid_responses(
    config: Config, factory: Factory, respx_mock: respx.Router
) -> None:
    token_route = respx_mock.post(config.keycloak.token_url)
    users_url = config.keycloak.admin_url + "/users"
    users_route = respx_mock.get(users_url)
    storage = factory.create_keycloak_storage()

    token_route.mock(return_value=Response(200, json={"token": "x"}))
    with pytest.raises(KeycloakError):
        await storage.list_users()

    token_route.mock(return_value=Response(200, json={"access_token": "x"}))
    users_route.mock(return_value=Response(200, content=b"not json"))
    with pytest.raises(KeycloakError):
        await storage.list_users()

    users_route.mock(return_value=Response(200, json=[{"id": "a1"}]))
    with pytest.raises(KeycloakError) as excinfo:
        await storage.list_users()
    assert not isinstance(excinfo.value, KeycloakWebError)

    users_route.mock(
        return_value=Response(
            200, json=[{"id": "a1", "username": "a", "attributes": ["x"]}]
        )
    )
    with pytest.raises(KeycloakError) as excinfo:
        await storage.list_users()
    assert not isinstance(excinfo.value, KeycloakWebError)
