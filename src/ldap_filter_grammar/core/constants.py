"""Shared constants across the application."""

# Truth value strings
YES_VALUES = ('1', 'TRUE', 'YES', 'ON', 'true', 'yes', 'on')

# Default configuration values
DEFAULT_LDAP_HOST = 'ldap://localhost:389'
DEFAULT_LDAP_TIMEOUT = 5
DEFAULT_LDAP_ATTRIBUTES = ['cn', 'mail']

# Searched when a condition set compiles to nothing
MATCH_ALL_FILTER = '(objectClass=*)'
