"""Constants for dnlookup."""

from datetime import timedelta

__all__ = [
    "CERTIFICATE_ATTRIBUTE",
    "CONFIG_PATH",
    "HTTP_TIMEOUT",
    "ROLE_PREFIX",
    "SAP_ACCESS_PREFIX",
    "USER_CACHE_LIFETIME",
    "USER_CACHE_SIZE",
]

CERTIFICATE_ATTRIBUTE = "usercertificate"
"""Keycloak user attribute holding the certificate common name."""

CONFIG_PATH = "/etc/dnlookup/dnlookup.yaml"
"""Default configuration path."""

HTTP_TIMEOUT = 20.0
"""Timeout (in seconds) for outbound HTTP requests to Keycloak."""

ROLE_PREFIX = "ROLE_"
"""Prefix of group names that grant roles rather than authorizations."""

SAP_ACCESS_PREFIX = "/SAP_ACCESS_2/"
"""Group path prefix encoding an access level and program name.

Paths under this prefix have the form ``/SAP_ACCESS_2/<access>/<program>``.
"""

# The following constants define the defaults for the per-process cache of
# user records.

USER_CACHE_SIZE = 1000
"""Maximum number of entries in the user record cache."""

USER_CACHE_LIFETIME = timedelta(minutes=5)
"""Lifetime of entries in the user record cache."""
