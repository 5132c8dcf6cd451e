"""Exceptions for dnlookup."""

from __future__ import annotations

from safir.slack.blockkit import SlackException, SlackWebException

__all__ = [
    "ExternalUserInfoError",
    "InvalidDistinguishedNameError",
    "KeycloakError",
    "KeycloakWebError",
    "MalformedGroupPathError",
]


class InvalidDistinguishedNameError(ValueError):
    """A subject DN could not be turned into a certificate match key.

    Parameters
    ----------
    dn
        The offending subject DN.
    """

    def __init__(self, dn: str) -> None:
        super().__init__(f"Distinguished name has no comma: {dn}")
        self.dn = dn


class MalformedGroupPathError(ValueError):
    """A SAP access group path does not name both access level and program.

    Parameters
    ----------
    path
        The offending group path.
    """

    def __init__(self, path: str) -> None:
        msg = f"SAP access group path {path} must be /SAP_ACCESS_2/<a>/<p>"
        super().__init__(msg)
        self.path = path


class ExternalUserInfoError(SlackException):
    """Error in external user information source.

    This is the base exception for any error in retrieving information from
    the identity directory. These errors are propagated to the caller
    unchanged and are never converted into an empty authorization record.
    """


class KeycloakError(ExternalUserInfoError):
    """The response from Keycloak was invalid."""


class KeycloakWebError(KeycloakError, SlackWebException):
    """An HTTP request to Keycloak failed."""
