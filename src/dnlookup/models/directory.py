"""Models for users and groups in the identity directory.

The user and group models are parsed from the JSON representations returned
by the Keycloak admin REST API. Unknown fields are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, computed_field

from ..constants import CERTIFICATE_ATTRIBUTE, SAP_ACCESS_PREFIX
from ..exceptions import MalformedGroupPathError

__all__ = [
    "DirectoryGroup",
    "DirectoryUser",
    "SAPAccessPath",
    "parse_group_path",
]


class DirectoryUser(BaseModel):
    """A user in the identity directory."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(..., title="Directory ID of the user")

    username: str = Field(..., title="Username", examples=["alice"])

    email: str | None = Field(
        None, title="Email address", examples=["alice@example.com"]
    )

    attributes: dict[str, list[str]] | None = Field(
        None,
        title="Custom attributes",
        description="Multi-valued custom attributes of the user",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def certificate(self) -> str | None:
        """First value of the ``usercertificate`` attribute, if any."""
        if not self.attributes:
            return None
        values = self.attributes.get(CERTIFICATE_ATTRIBUTE)
        return values[0] if values else None


class DirectoryGroup(BaseModel):
    """A group membership of a directory user."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = Field(
        ...,
        title="Name of the group",
        description="Leaf label of the group, possibly prefixed by ``ROLE_``",
        examples=["ROLE_AUDITOR"],
    )

    path: str = Field(
        ...,
        title="Path of the group",
        description="Slash-separated path of the group in the hierarchy",
        examples=["/SAP_ACCESS_2/READ/ProgramA"],
    )


@dataclass(frozen=True)
class SAPAccessPath:
    """A group path of the form ``/SAP_ACCESS_2/<access>/<program>``."""

    access: str
    """Access level granted to the program."""

    program: str
    """Name of the program."""

    @property
    def auth(self) -> str:
        """Authorization token granted by membership in this group."""
        return f"{self.program}_{self.access}"


def parse_group_path(path: str) -> SAPAccessPath | None:
    """Parse a group path in the SAP access hierarchy.

    Parameters
    ----------
    path
        Slash-separated group path.

    Returns
    -------
    SAPAccessPath or None
        The parsed path, or `None` if the path is not under the SAP access
        hierarchy.

    Raises
    ------
    MalformedGroupPathError
        Raised if the path is under the SAP access hierarchy but does not
        contain both an access level and a program.
    """
    if not path.startswith(SAP_ACCESS_PREFIX):
        return None

    # Trailing empty segments do not count, so /SAP_ACCESS_2/READ/ is
    # malformed rather than granting access to a program with no name.
    segments = path.rstrip("/").split("/")
    if len(segments) < 4:
        raise MalformedGroupPathError(path)
    return SAPAccessPath(access=segments[2], program=segments[3])
