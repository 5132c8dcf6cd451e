"""General utility functions."""

from __future__ import annotations

from .exceptions import InvalidDistinguishedNameError

__all__ = ["canonicalize_dn"]


def canonicalize_dn(subject_dn: str) -> str:
    """Convert a subject DN into the key matched against directory users.

    Parameters
    ----------
    subject_dn
        Subject DN from a certificate, such as
        ``uid=1,cn=alice,dc=example,dc=com``.

    Returns
    -------
    str
        Lowercased text between the first ``cn=`` (or the start of the
        string, if there is no ``cn=``) and the next comma.

    Raises
    ------
    InvalidDistinguishedNameError
        Raised if there is no comma after the start of the extracted text.

    Notes
    -----
    Both boundaries are found in the original DN, before lowercasing, so
    ``CN=`` does not count as a ``cn=`` marker.
    """
    start = subject_dn.find("cn=")
    start = start + len("cn=") if start >= 0 else 0
    end = subject_dn.find(",", start)
    if end < 0:
        raise InvalidDistinguishedNameError(subject_dn)
    return subject_dn[start:end].lower()
