"""Configuration for dnlookup.

dnlookup is configured by a YAML file whose keys use camel case. Secrets are
normally injected via environment variables instead of the configuration
file. Only the settings with explicit ``validation_alias`` settings support
configuration via environment variable.
"""

from __future__ import annotations

import os
from datetime import timedelta
from pathlib import Path
from typing import Self

import yaml
from pydantic import AliasChoices, Field, HttpUrl, SecretStr
from pydantic.alias_generators import to_camel
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
from safir.logging import LogLevel, configure_logging
from safir.pydantic import HumanTimedelta
from typing_extensions import override

from .constants import CONFIG_PATH, USER_CACHE_LIFETIME, USER_CACHE_SIZE

__all__ = [
    "CamelCaseSettings",
    "Config",
    "EnvFirstSettings",
    "KeycloakConfig",
]


class CamelCaseSettings(BaseSettings):
    """Base class for Pydantic settings supporting camel-case.

    This base class also forbids all extra attributes. It should be used as
    the base class (possibly indirectly) for all dnlookup configuration models
    that support environment variable overrides.
    """

    model_config = SettingsConfigDict(
        alias_generator=to_camel, extra="forbid", populate_by_name=True
    )


class EnvFirstSettings(CamelCaseSettings):
    """Base class for Pydantic settings with environment overrides.

    Classes that inherit from this base class will prioritize environment
    variables over arguments to the class constructor.
    """

    @override
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Override the sources of settings.

        Deactivate :file:`.env` and secret file support. Allow environment
        variables to override init parameters, since init parameters come
        from the YAML configuration file and we want environment variables to
        take precedent.
        """
        return (env_settings, init_settings)


class KeycloakConfig(EnvFirstSettings):
    """Configuration for the Keycloak identity directory."""

    url: HttpUrl = Field(
        ...,
        title="Keycloak server URL",
        description="Base URL of the Keycloak server, without the realm",
    )

    realm: str = Field(
        ...,
        title="Keycloak realm",
        description="Realm containing the users and groups to search",
        min_length=1,
    )

    client_id: str = Field(
        ...,
        title="Client ID",
        description=(
            "Client ID used for the client credentials grant. The client's"
            " service account must be able to view users in the realm."
        ),
    )

    client_secret: SecretStr = Field(
        ...,
        title="Client secret",
        description="Secret used for the client credentials grant",
        validation_alias=AliasChoices(
            "DNLOOKUP_KEYCLOAK_CLIENT_SECRET", "clientSecret"
        ),
    )

    @property
    def base_url(self) -> str:
        """Keycloak URL with any trailing slash removed."""
        return str(self.url).rstrip("/")

    @property
    def token_url(self) -> str:
        """URL of the OpenID Connect token endpoint for the realm."""
        realm_url = f"{self.base_url}/realms/{self.realm}"
        return f"{realm_url}/protocol/openid-connect/token"

    @property
    def admin_url(self) -> str:
        """URL of the admin REST API for the realm."""
        return f"{self.base_url}/admin/realms/{self.realm}"


class Config(EnvFirstSettings):
    """Configuration for dnlookup."""

    keycloak: KeycloakConfig = Field(
        ...,
        title="Keycloak configuration",
        description="Directory used to resolve certificate principals",
    )

    log_level: LogLevel = Field(
        LogLevel.INFO,
        title="Logging level",
        description="Python logging level",
        validation_alias=AliasChoices("DNLOOKUP_LOG_LEVEL", "logLevel"),
    )

    cache_lifetime: HumanTimedelta = Field(
        USER_CACHE_LIFETIME,
        title="User record cache lifetime",
        description="How long to cache the result of a user lookup",
    )

    cache_size: int = Field(
        USER_CACHE_SIZE,
        title="User record cache size",
        description="Maximum number of user records to cache",
        ge=1,
    )

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Construct a Config object from a configuration file.

        Parameters
        ----------
        path
            Path to the configuration file in YAML.

        Returns
        -------
        Config
            The corresponding `Config` object.
        """
        with path.open("r") as f:
            return cls.model_validate(yaml.safe_load(f))

    @classmethod
    def from_default_path(cls) -> Self:
        """Load the configuration from its default location.

        The path is taken from the ``DNLOOKUP_CONFIG_PATH`` environment
        variable if set, and otherwise defaults to
        ``/etc/dnlookup/dnlookup.yaml``.

        Returns
        -------
        Config
            The corresponding `Config` object.
        """
        path = os.getenv("DNLOOKUP_CONFIG_PATH", CONFIG_PATH)
        return cls.from_file(Path(path))

    @property
    def cache_lifetime_seconds(self) -> float:
        """Cache lifetime in seconds, in the form cachetools expects."""
        return self.cache_lifetime / timedelta(seconds=1)

    def configure_logging(self) -> None:
        """Configure logging based on the dnlookup configuration."""
        configure_logging(name="dnlookup", log_level=self.log_level)
