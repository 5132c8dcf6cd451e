"""Service layer for resolving certificate principals."""

from __future__ import annotations

from datetime import datetime

from safir.datetime import current_datetime
from structlog.stdlib import BoundLogger

from ..cache import CacheGateway
from ..models.directory import DirectoryUser
from ..models.identity import SubjectIssuerDNPair
from ..models.userinfo import ClassifiedGroups, EntityType, UserRecord
from ..storage.base import DirectoryClient
from ..util import canonicalize_dn
from .classifier import GroupClassifier
from .matcher import find_matching_user

__all__ = ["UserLookupService", "build_user_record"]


def build_user_record(
    user: DirectoryUser | None,
    groups: ClassifiedGroups,
    identity: SubjectIssuerDNPair,
    now: datetime,
) -> UserRecord:
    """Assemble the authorization record for a principal.

    Parameters
    ----------
    user
        Matching directory user, or `None` if there was no match.
    groups
        Classified group memberships of the user. Ignored if there was no
        matching user.
    identity
        Principal being resolved.
    now
        Creation time of the record.

    Returns
    -------
    UserRecord
        A user record if there was a match. Otherwise, a server record with
        no email, authorizations, or roles.
    """
    if not user:
        return UserRecord(
            identity=identity, entity_type=EntityType.SERVER, created=now
        )
    return UserRecord(
        identity=identity,
        entity_type=EntityType.USER,
        email=user.email or "",
        auths=groups.auths,
        roles=groups.roles,
        created=now,
    )


class UserLookupService:
    """Resolve certificate principals into authorization records.

    The subject DN is reduced to a canonical key, matched against the
    certificate attribute of every user in the directory, and the groups of
    the matching user are classified into authorizations and roles. This
    service holds no state of its own between calls. Results are cached
    through the provided cache gateway, keyed by the string form of the
    principal.

    Parameters
    ----------
    directory
        Identity directory to search.
    cache
        Cache of resolved records.
    classifier
        Classifier for group memberships.
    logger
        Logger to use.
    """

    def __init__(
        self,
        *,
        directory: DirectoryClient,
        cache: CacheGateway,
        classifier: GroupClassifier,
        logger: BoundLogger,
    ) -> None:
        self._directory = directory
        self._cache = cache
        self._classifier = classifier
        self._logger = logger

    async def lookup_user(self, identity: SubjectIssuerDNPair) -> UserRecord:
        """Resolve a principal, using a cached result if available.

        Parameters
        ----------
        identity
            Principal to resolve.

        Returns
        -------
        UserRecord
            Authorization record for the principal.

        Raises
        ------
        ExternalUserInfoError
            Raised if the directory could not be queried.
        InvalidDistinguishedNameError
            Raised if the subject DN could not be canonicalized.
        MalformedGroupPathError
            Raised if one of the user's groups has a malformed path.
        """
        return await self._cache.get_or_compute(
            str(identity), lambda: self._build_record(identity)
        )

    async def reload_user(self, identity: SubjectIssuerDNPair) -> UserRecord:
        """Resolve a principal, ignoring and replacing any cached result.

        Parameters
        ----------
        identity
            Principal to resolve.

        Returns
        -------
        UserRecord
            Authorization record for the principal.

        Raises
        ------
        ExternalUserInfoError
            Raised if the directory could not be queried.
        InvalidDistinguishedNameError
            Raised if the subject DN could not be canonicalized.
        MalformedGroupPathError
            Raised if one of the user's groups has a malformed path.
        """
        return await self._cache.invalidate_and_recompute(
            str(identity), lambda: self._build_record(identity)
        )

    async def _build_record(self, identity: SubjectIssuerDNPair) -> UserRecord:
        """Resolve a principal against the directory without caching."""
        logger = self._logger.bind(subject_dn=identity.subject_dn)
        key = canonicalize_dn(identity.subject_dn)
        logger.debug("Searching directory for certificate", certificate=key)
        users = await self._directory.list_users()
        user = find_matching_user(key, users)
        if not user:
            logger.info("No directory user matches", certificate=key)
            return build_user_record(
                None, ClassifiedGroups(), identity, current_datetime()
            )

        logger = logger.bind(user=user.username)
        groups = await self._directory.list_groups(user.id)
        classified = self._classifier.classify(groups)
        logger.info(
            "Resolved directory user",
            auths=sorted(classified.auths),
            roles=sorted(classified.roles),
        )
        now = current_datetime()
        return build_user_record(user, classified, identity, now)
