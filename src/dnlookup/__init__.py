"""Map certificate principals to authorization records via Keycloak."""
