"""LDAP filter operator registry.

Maps each supported operator token to the rule that renders a single
``(field<op>value)`` fragment.  The token set is closed:

====================  ========================
token                 fragment
====================  ========================
``*``                 ``(field=*)``
``!*``                ``(!(field=*))``
``=``                 ``(field=value)``
``!`` / ``!=``        ``(!(field=value))``
``>=``                ``(field>=value)``
``<=``                ``(field<=value)``
``~=``                ``(field~=value)``
``starts_with``       ``(field=value*)``
``not_starts_with``   ``(!(field=value*))``
``ends_with``         ``(field=*value)``
``not_ends_with``     ``(!(field=*value))``
``contains``          ``(field=*value*)``
``not_contains``      ``(!(field=*value*))``
====================  ========================

Field and value text is concatenated as-is; escaping is the caller's job.
"""
from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Tuple

__all__ = [
    "InvalidOperator",
    "Operator",
    "OPERATORS",
    "get_operators",
    "is_operator",
    "resolve",
    "render",
    "wrap",
    "compile_and",
    "compile_or",
    "compile_not",
]


class InvalidOperator(ValueError):
    """Raised when a condition carries a token outside the operator set."""

    def __init__(self, operator: object) -> None:
        self.operator = operator
        super().__init__(f"Invalid LDAP filter operator [{operator}]")


class Operator(Enum):
    """Rendering rules, one member per distinct fragment shape."""

    HAS = "has"
    NOT_HAS = "not_has"
    EQUALS = "equals"
    DOES_NOT_EQUAL = "does_not_equal"
    GREATER_THAN_OR_EQUALS = "greater_than_or_equals"
    LESS_THAN_OR_EQUALS = "less_than_or_equals"
    APPROXIMATELY_EQUALS = "approximately_equals"
    STARTS_WITH = "starts_with"
    NOT_STARTS_WITH = "not_starts_with"
    ENDS_WITH = "ends_with"
    NOT_ENDS_WITH = "not_ends_with"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"


# ---------------------------------------------------------------------------
# Envelope helpers
# ---------------------------------------------------------------------------


def wrap(query: str, prefix: str = "(", suffix: str = ")") -> str:
    """Return ``prefix + query + suffix``."""
    return f"{prefix}{query}{suffix}"


def compile_and(query: str) -> str:
    """Wrap *query* in ``(&...)``; empty input yields an empty string."""
    return wrap(query, "(&") if query else ""


def compile_or(query: str) -> str:
    """Wrap *query* in ``(|...)``; empty input yields an empty string."""
    return wrap(query, "(|") if query else ""


def compile_not(query: str) -> str:
    """Wrap *query* in ``(!...)``; empty input yields an empty string."""
    return wrap(query, "(!") if query else ""


# ---------------------------------------------------------------------------
# Fragment rules
# ---------------------------------------------------------------------------


def _has(field: str, value: str) -> str:
    return wrap(f"{field}=*")


def _equals(field: str, value: str) -> str:
    return wrap(f"{field}={value}")


def _starts_with(field: str, value: str) -> str:
    return wrap(f"{field}={value}*")


def _ends_with(field: str, value: str) -> str:
    return wrap(f"{field}=*{value}")


def _contains(field: str, value: str) -> str:
    return wrap(f"{field}=*{value}*")


def _negated(rule: Callable[[str, str], str]) -> Callable[[str, str], str]:
    def _rule(field: str, value: str) -> str:
        return compile_not(rule(field, value))

    return _rule


_RULES: Dict[Operator, Callable[[str, str], str]] = {
    Operator.HAS: _has,
    Operator.NOT_HAS: _negated(_has),
    Operator.EQUALS: _equals,
    Operator.DOES_NOT_EQUAL: _negated(_equals),
    Operator.GREATER_THAN_OR_EQUALS: lambda field, value: wrap(f"{field}>={value}"),
    Operator.LESS_THAN_OR_EQUALS: lambda field, value: wrap(f"{field}<={value}"),
    Operator.APPROXIMATELY_EQUALS: lambda field, value: wrap(f"{field}~={value}"),
    Operator.STARTS_WITH: _starts_with,
    # negates the starts_with shape, not an ends_with one
    Operator.NOT_STARTS_WITH: _negated(_starts_with),
    Operator.ENDS_WITH: _ends_with,
    Operator.NOT_ENDS_WITH: _negated(_ends_with),
    Operator.CONTAINS: _contains,
    Operator.NOT_CONTAINS: _negated(_contains),
}

# Token order is part of the public contract (get_operators()).
OPERATORS: Mapping[str, Operator] = MappingProxyType(
    {
        "*": Operator.HAS,
        "!*": Operator.NOT_HAS,
        "=": Operator.EQUALS,
        "!": Operator.DOES_NOT_EQUAL,
        "!=": Operator.DOES_NOT_EQUAL,
        ">=": Operator.GREATER_THAN_OR_EQUALS,
        "<=": Operator.LESS_THAN_OR_EQUALS,
        "~=": Operator.APPROXIMATELY_EQUALS,
        "starts_with": Operator.STARTS_WITH,
        "not_starts_with": Operator.NOT_STARTS_WITH,
        "ends_with": Operator.ENDS_WITH,
        "not_ends_with": Operator.NOT_ENDS_WITH,
        "contains": Operator.CONTAINS,
        "not_contains": Operator.NOT_CONTAINS,
    }
)

if set(_RULES) != set(Operator):  # pragma: no cover - import-time guard
    raise RuntimeError("every Operator member needs a rendering rule")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_operators() -> Tuple[str, ...]:
    """Return all supported operator tokens in registry order."""
    return tuple(OPERATORS)


def is_operator(token: object) -> bool:
    return isinstance(token, str) and token in OPERATORS


def resolve(token: object) -> Operator:
    """Return the :class:`Operator` for *token* or raise :class:`InvalidOperator`."""
    if not is_operator(token):
        raise InvalidOperator(token)
    return OPERATORS[token]  # type: ignore[index]


def render(field: str, operator: str, value: str | None = None) -> str:
    """Render a single condition fragment.

    Presence operators (``*`` / ``!*``) ignore *value*.  ``None`` values are
    rendered as empty text.
    """
    rule = _RULES[resolve(operator)]
    return rule(field, "" if value is None else value)
