"""Match certificate principals to directory users."""

from __future__ import annotations

from collections.abc import Iterable

from ..models.directory import DirectoryUser

__all__ = ["find_matching_user"]


def find_matching_user(
    key: str, users: Iterable[DirectoryUser]
) -> DirectoryUser | None:
    """Find the directory user whose certificate matches a canonical key.

    Parameters
    ----------
    key
        Canonical key from `~dnlookup.util.canonicalize_dn`.
    users
        All users in the directory, in listing order.

    Returns
    -------
    DirectoryUser or None
        The first user whose lowercased certificate attribute equals the key,
        or `None` if there is no such user. Users without a certificate
        attribute never match.
    """
    for user in users:
        if user.certificate is None:
            continue
        if user.certificate.lower() == key:
            return user
    return None
