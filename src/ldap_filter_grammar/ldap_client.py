"""Run compiled filters against a directory.

Built on *ldap3* so it works with the usual directory flavours (389ds/FreeIPA,
OpenLDAP, Active Directory…).

* Connects using simple bind (service account DN/password), or reuses a
  caller-owned :class:`ldap3.Connection`.
* Supports ``ldaps://`` with optional certificate ignore or CA file.
* Builds the search filter with
  :func:`ldap_filter_grammar.filter_compiler.compile_filter`; a condition set
  without filters searches ``(objectClass=*)``.

Return value is a list of :class:`LdapEntry` dataclass instances.
"""
from __future__ import annotations

import ssl
from dataclasses import dataclass, field
from typing import Dict, List, Sequence
import logging

from ldap3 import Connection, Server, Tls

from .conditions import ConditionSet
from .core.constants import MATCH_ALL_FILTER
from .filter_compiler import compile_filter

logger = logging.getLogger("ldap_filter_grammar.ldap")

__all__ = ["LdapEntry", "search"]


@dataclass(slots=True)
class LdapEntry:
    dn: str
    attributes: Dict[str, List[str]] = field(default_factory=dict)

    def first(self, name: str) -> str | None:
        """Return the first value of attribute *name*, if any."""
        values = self.attributes.get(name)
        return values[0] if values else None

    def __repr__(self) -> str:  # pragma: no cover – cosmetic
        return f"LdapEntry(dn={self.dn!r}, attributes={len(self.attributes)} items)"


# Helper ---------------------------------------------------------------------


def _build_server(host: str, ignore_cert: bool = False, ca_file: str | None = None) -> Server:
    """Build an ldap3 :class:`Server` with correct TLS settings."""
    use_ssl = host.lower().startswith("ldaps://")
    clean_host = host.replace("ldap://", "").replace("ldaps://", "")

    tls: Tls | None = None
    if use_ssl:
        if ignore_cert:
            tls = Tls(validate=ssl.CERT_NONE)
        elif ca_file:
            tls = Tls(validate=ssl.CERT_REQUIRED, ca_certs_file=ca_file)
    return Server(clean_host, use_ssl=use_ssl, get_info=None, tls=tls)


def _as_strings(raw: object) -> List[str]:
    if raw in (None, "", [], ()):
        return []
    if isinstance(raw, (list, tuple)):
        return [str(v) for v in raw]
    return [str(raw)]


# Public API -----------------------------------------------------------------


def search(
    query: ConditionSet,
    *,
    host: str = "",
    bind_dn: str = "",
    bind_password: str = "",
    base_dn: str,
    attributes: Sequence[str] | None = None,
    ignore_cert: bool = False,
    ca_file: str | None = None,
    timeout: int | float = 5,
    connection: Connection | None = None,
) -> List[LdapEntry]:
    """Search *base_dn* with the filter compiled from *query*.

    When *connection* is given it is used as-is and left open; otherwise a
    connection to *host* is bound for this call and unbound afterwards.
    """
    search_filter = compile_filter(query) or MATCH_ALL_FILTER
    attrs = list(attributes or [])

    owned = connection is None
    if connection is None:
        server = _build_server(host, ignore_cert=ignore_cert, ca_file=ca_file)
        connection = Connection(
            server, user=bind_dn, password=bind_password, auto_bind=True, receive_timeout=timeout
        )

    logger.debug(f"Searching LDAP at {base_dn} with filter: {search_filter} and attributes: {attrs}")

    try:
        connection.search(search_base=base_dn, search_filter=search_filter, attributes=attrs)

        entries: list[LdapEntry] = []
        for entry in connection.entries:
            values = {name: _as_strings(entry[name].value) for name in entry.entry_attributes}
            entries.append(LdapEntry(dn=str(entry.entry_dn), attributes=values))
    finally:
        if owned:
            connection.unbind()

    logger.debug("LDAP search returned %s entries", len(entries))
    return entries
