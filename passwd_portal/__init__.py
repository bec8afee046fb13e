"""Self-service password change for vmail LDAP accounts."""
