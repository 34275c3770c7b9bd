"""Central configuration dataclass loaded from environment variables.

Only the directory connection settings used by ``--search`` live here; the
compiler itself takes no configuration.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List

from .core.constants import (
    YES_VALUES,
    DEFAULT_LDAP_HOST,
    DEFAULT_LDAP_TIMEOUT,
    DEFAULT_LDAP_ATTRIBUTES,
)


def _env_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val in YES_VALUES


def _env_list(name: str) -> List[str]:
    raw = os.getenv(name, "").strip()
    return [s for s in [p.strip() for p in raw.split(",")] if s]


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(slots=True)
class Config:
    """Runtime configuration derived from environment variables."""

    # LDAP --------------------------------------------------------------
    ldap_host: str = DEFAULT_LDAP_HOST
    ldap_bind_dn: str = ''
    ldap_bind_password: str = ''
    ldap_base_dn: str = ''
    ldap_filter: str | None = None
    ldap_attributes: List[str] = field(default_factory=lambda: list(DEFAULT_LDAP_ATTRIBUTES))
    ldap_timeout: float = DEFAULT_LDAP_TIMEOUT

    ignore_ldaps_cert: bool = False
    ldap_ca_file: str | None = None

    # Misc --------------------------------------------------------------
    debug: bool = False

    def __post_init__(self) -> None:
        # a bare "uid=jdoe" style filter is accepted and parenthesised
        if self.ldap_filter is not None:
            flt = self.ldap_filter.strip()
            if flt and not flt.startswith("("):
                flt = f"({flt})"
            self.ldap_filter = flt or None

    @classmethod
    def from_env(cls) -> "Config":
        """Build a config from the current process environment."""
        return cls(
            ldap_host=os.getenv('LDAP_HOST', DEFAULT_LDAP_HOST),
            ldap_bind_dn=os.getenv('LDAP_BIND_DN', ''),
            ldap_bind_password=os.getenv('LDAP_BIND_PASSWORD', ''),
            ldap_base_dn=os.getenv('LDAP_BASE_DN', ''),
            ldap_filter=os.getenv('LDAP_FILTER', None),
            ldap_attributes=_env_list('LDAP_ATTRIBUTES') or list(DEFAULT_LDAP_ATTRIBUTES),
            ldap_timeout=_env_float('LDAP_TIMEOUT', DEFAULT_LDAP_TIMEOUT),
            ignore_ldaps_cert=_env_bool('IGNORE_LDAPS_CERT', False),
            ldap_ca_file=os.getenv('LDAP_CA_FILE', None),
            debug=os.getenv('DEBUG', '').upper() in YES_VALUES,
        )
