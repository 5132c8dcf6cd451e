"""Classify directory group memberships into authorizations and roles."""

from __future__ import annotations

from collections.abc import Iterable

from structlog.stdlib import BoundLogger

from ..constants import ROLE_PREFIX
from ..models.directory import DirectoryGroup, parse_group_path
from ..models.userinfo import ClassifiedGroups

__all__ = ["GroupClassifier"]


class GroupClassifier:
    """Map directory groups onto authorization and role tokens.

    Three independent rules are applied to every group:

    #. A group outside the SAP access hierarchy whose name does not start
       with ``ROLE_`` grants an authorization token equal to its name.
    #. A group at ``/SAP_ACCESS_2/<access>/<program>`` grants the
       authorization token ``<program>_<access>``. Its name is not used.
    #. A group whose name starts with ``ROLE_`` grants a role token equal to
       its name without that prefix.

    Parameters
    ----------
    logger
        Logger to use.
    """

    def __init__(self, logger: BoundLogger) -> None:
        self._logger = logger

    def classify(self, groups: Iterable[DirectoryGroup]) -> ClassifiedGroups:
        """Classify a user's groups.

        Parameters
        ----------
        groups
            Group memberships of the user.

        Returns
        -------
        ClassifiedGroups
            The resulting authorization and role tokens.

        Raises
        ------
        MalformedGroupPathError
            Raised if a group path is under the SAP access hierarchy but is
            missing the access level or program.
        """
        auths: set[str] = set()
        roles: set[str] = set()
        for group in groups:
            sap_path = parse_group_path(group.path)
            is_role = group.name.startswith(ROLE_PREFIX)
            if sap_path is not None:
                auths.add(sap_path.auth)
            elif not is_role:
                auths.add(group.name)
            if is_role:
                roles.add(group.name.removeprefix(ROLE_PREFIX))
            self._logger.debug(
                "Classified group", group=group.name, group_path=group.path
            )
        return ClassifiedGroups(auths=frozenset(auths), roles=frozenset(roles))
