"""In-memory identity directory for testing."""

from __future__ import annotations

from dnlookup.models.directory import DirectoryGroup, DirectoryUser

__all__ = ["MockDirectory"]


class MockDirectory:
    """Directory client backed by in-memory data.

    Attributes
    ----------
    users
        Users to return from `list_users`, in listing order.
    groups
        Mapping of user IDs to their group memberships.
    list_users_calls
        Number of times `list_users` was called.
    list_groups_calls
        User IDs passed to `list_groups`, in call order.
    """

    def __init__(self) -> None:
        self.users: list[DirectoryUser] = []
        self.groups: dict[str, list[DirectoryGroup]] = {}
        self.list_users_calls = 0
        self.list_groups_calls: list[str] = []

    def add_user(
        self,
        user_id: str,
        *,
        email: str | None = None,
        certificate: str | None = None,
        groups: dict[str, str] | None = None,
    ) -> DirectoryUser:
        """Add a user.

        Parameters
        ----------
        user_id
            ID of the user, also used as the username.
        email
            Email address, if any.
        certificate
            Value of the ``usercertificate`` attribute, if any.
        groups
            Mapping of group paths to group names.

        Returns
        -------
        DirectoryUser
            The new user.
        """
        attributes = {"usercertificate": [certificate]} if certificate else {}
        user = DirectoryUser.model_validate(
            {
                "id": user_id,
                "username": user_id,
                "email": email,
                "attributes": attributes,
            }
        )
        self.users.append(user)
        self.groups[user_id] = [
            DirectoryGroup(name=n, path=p) for p, n in (groups or {}).items()
        ]
        return user

    async def list_users(self) -> list[DirectoryUser]:
        self.list_users_calls += 1
        return list(self.users)

    async def list_groups(self, user_id: str) -> list[DirectoryGroup]:
        self.list_groups_calls.append(user_id)
        return list(self.groups[user_id])
