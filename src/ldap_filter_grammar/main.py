"""ldap-filter command line entrypoint.

Compiles conditions given on the command line and prints the filter, or runs
it against the directory configured through environment variables::

    ldap-filter --where objectClass = person --or-where cn starts_with adm \
                --or-where cn = root
    (&(objectClass=person)(|(cn=adm*)(cn=root)))

A condition may also be passed as one quoted argument, which is the way to
give a value starting with ``-``::

    ldap-filter --where "employeeNumber = -1"
"""
import argparse
import logging
import os
import sys
from typing import List, Optional, Sequence

from ldap_filter_grammar.conditions import ConditionSet
from ldap_filter_grammar.config import Config
from ldap_filter_grammar.core.constants import YES_VALUES
from ldap_filter_grammar.filter_compiler import compile_filter
from ldap_filter_grammar.ldap_client import search
from ldap_filter_grammar.operators import InvalidOperator, get_operators

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def _setup_logging(debug: bool = False) -> logging.Logger:
    """Configure and return the application logger."""

    # Configure only the application logger, not the root logger
    app_logger = logging.getLogger("ldap_filter_grammar")
    app_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    # Prevent propagation to the root logger to avoid affecting other modules
    app_logger.propagate = False

    # Clear any existing handlers to avoid duplicate logs
    for h in list(app_logger.handlers):
        app_logger.removeHandler(h)

    formatter = logging.Formatter(
        fmt="[%(asctime)s] [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S %d.%m.%y",
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    return app_logger

# ---------------------------------------------------------------------------
# Argument handling
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ldap-filter",
        description="Compile search conditions into an LDAP filter string.",
    )
    parser.add_argument(
        "--where", nargs="+", action="append", default=[], metavar="ARG",
        help="AND condition: FIELD OP [VALUE], or one quoted 'FIELD OP VALUE'",
    )
    parser.add_argument(
        "--or-where", nargs="+", action="append", default=[], metavar="ARG",
        help="OR condition: FIELD OP [VALUE], or one quoted 'FIELD OP VALUE'",
    )
    parser.add_argument(
        "--raw", action="append", default=[], metavar="FILTER",
        help="pre-formed filter inserted verbatim",
    )
    parser.add_argument("--nested", action="store_true", help="suppress the outer envelope")
    parser.add_argument("--list-operators", action="store_true", help="print supported operators")
    parser.add_argument("--search", action="store_true", help="run the filter against LDAP_HOST")
    return parser


def _condition_args(parser: argparse.ArgumentParser, option: str, args: List[str]) -> tuple:
    if len(args) == 1:
        # quoted form; the value keeps its inner spaces
        args = args[0].split(None, 2)
    if len(args) not in (2, 3):
        parser.error(f"{option} expects FIELD OP [VALUE], got {' '.join(args)!r}")
    field, operator = args[0], args[1]
    value = args[2] if len(args) == 3 else None
    return field, operator, value


def build_condition_set(
    parser: argparse.ArgumentParser, ns: argparse.Namespace, cfg: Optional[Config] = None
) -> ConditionSet:
    """Translate parsed arguments (and ``LDAP_FILTER``) into a condition set."""
    query = ConditionSet(nested=ns.nested)
    if cfg is not None and cfg.ldap_filter:
        query.raw_filter(cfg.ldap_filter)
    query.raw_filter(*ns.raw)
    for args in ns.where:
        query.where(*_condition_args(parser, "--where", args))
    for args in ns.or_where:
        query.or_where(*_condition_args(parser, "--or-where", args))
    return query

# ---------------------------------------------------------------------------
# Main entrypoint
# ---------------------------------------------------------------------------

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Compile (and optionally run) a filter; returns the exit status."""
    parser = _build_parser()
    ns = parser.parse_args(argv)

    logger = _setup_logging(os.getenv("DEBUG", "").upper() in YES_VALUES)

    if ns.list_operators:
        for token in get_operators():
            print(token)
        return 0

    # connection settings are only needed (and validated) for --search
    cfg: Optional[Config] = None
    if ns.search:
        try:
            cfg = Config.from_env()
        except ValueError as exc:
            logger.error("Invalid configuration: %s", exc)
            return 2

    try:
        query = build_condition_set(parser, ns, cfg)
        flt = compile_filter(query)
    except InvalidOperator as exc:
        logger.error("%s (supported: %s)", exc, " ".join(get_operators()))
        return 2

    if cfg is None:
        print(flt)
        return 0

    logger.info("Searching %s under %s", cfg.ldap_host, cfg.ldap_base_dn or "<root>")
    entries = search(
        query,
        host=cfg.ldap_host,
        bind_dn=cfg.ldap_bind_dn,
        bind_password=cfg.ldap_bind_password,
        base_dn=cfg.ldap_base_dn,
        attributes=cfg.ldap_attributes,
        ignore_cert=cfg.ignore_ldaps_cert,
        ca_file=cfg.ldap_ca_file,
        timeout=cfg.ldap_timeout,
    )
    for entry in entries:
        print(entry.dn)
    logger.info("Found %s entries", len(entries))
    return 0


if __name__ == "__main__":
    sys.exit(main())
