"""Compile a :class:`~ldap_filter_grammar.conditions.ConditionSet` into an
RFC-4515 filter string.

Layout of the result::

    <raw fragments><AND conditions><OR conditions>

A filter with more than one top-level clause must be wrapped.  The envelope
defaults to ``(&...)``; when the query is purely disjunctive (OR conditions
only, or one AND beside one OR condition, and no raw fragments) the whole
query is wrapped in ``(|...)`` instead.  Otherwise the OR conditions are grouped in
their own ``(|...)`` inside the AND envelope::

    (cn=a) OR (cn=b)                 -> (|(cn=a)(cn=b))
    (mail=x) AND ((cn=a) OR (cn=b))  -> (&(mail=x)(|(cn=a)(cn=b)))

Nested sets never receive an outer envelope; the enclosing query wraps them.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Optional, Tuple

from .conditions import Condition, ConditionSet
from .operators import compile_and, compile_or, get_operators, render

logger = logging.getLogger("ldap_filter_grammar.compiler")

__all__ = ["Envelope", "compile_filter", "concatenate", "Grammar"]


class Envelope(Enum):
    AND = "and"
    OR = "or"


def concatenate(fragments: Iterable[object]) -> str:
    """Join *fragments*, skipping those that stringify to ``""``."""
    return "".join(s for s in (str(f) for f in fragments) if s != "")


def _compile_conditions(conditions: Iterable[Condition]) -> str:
    return "".join(render(c.field, c.operator, c.value) for c in conditions)


def _compile_or_conditions(
    query: ConditionSet, envelope: Optional[Envelope]
) -> Tuple[str, Optional[Envelope]]:
    """Render the OR bucket and return it with the (possibly changed) envelope."""
    filter_text = _compile_conditions(query.disjunctive)

    if query.count() > 1:
        and_count, or_count = len(query.conjunctive), len(query.disjunctive)
        # a lone AND condition may only join a lone OR condition; next to an
        # OR group it stays outside and the group is scoped with (|...)
        collapsible = (
            or_count >= 1
            and (and_count == 0 or (and_count == 1 and or_count == 1))
            and len(query.raw) == 0
        )
        if collapsible:
            # the whole query becomes one OR; a nested set leaves that to its parent,
            # which must wrap it in (|...): wrapping it in (&...) turns the OR into an AND
            if not query.nested:
                envelope = Envelope.OR
        else:
            filter_text = compile_or(filter_text)

    return filter_text, envelope


def compile_filter(query: ConditionSet) -> str:
    """Return the LDAP filter for *query* (``""`` when it holds no filters).

    Raises
    ------
    InvalidOperator
        If any condition carries an unsupported operator token.
    """
    envelope: Optional[Envelope] = None
    if not query.nested and query.count() > 1:
        envelope = Envelope.AND

    raw_text = concatenate(query.raw)
    and_text = _compile_conditions(query.conjunctive)
    or_text, envelope = _compile_or_conditions(query, envelope)

    body = raw_text + and_text + or_text

    if envelope is Envelope.AND:
        result = compile_and(body)
    elif envelope is Envelope.OR:
        result = compile_or(body)
    else:
        result = body

    logger.debug("Compiled LDAP filter: %s", result)
    return result


class Grammar:
    """Object facade over :func:`compile_filter` for builder collaborators."""

    def compile(self, query: ConditionSet) -> str:
        return compile_filter(query)

    @staticmethod
    def get_operators() -> Tuple[str, ...]:
        return get_operators()
