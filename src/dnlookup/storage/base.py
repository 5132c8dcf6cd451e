"""Interface to the identity directory."""

from __future__ import annotations

from typing import Protocol

from ..models.directory import DirectoryGroup, DirectoryUser

__all__ = ["DirectoryClient"]


class DirectoryClient(Protocol):
    """Read access to the users and groups of an identity directory.

    Implementations are responsible for authentication, timeouts, and
    connection handling. Failures should be raised as a subclass of
    `~dnlookup.exceptions.ExternalUserInfoError`.
    """

    async def list_users(self) -> list[DirectoryUser]:
        """List every user in the directory, in directory order."""
        ...

    async def list_groups(self, user_id: str) -> list[DirectoryGroup]:
        """List the groups of which a user is a member.

        Parameters
        ----------
        user_id
            Directory ID of the user.
        """
        ...
