"""Condition containers consumed by the filter compiler.

A :class:`ConditionSet` holds three ordered buckets:

* ``conjunctive`` – conditions combined with AND,
* ``disjunctive`` – conditions combined with OR,
* ``raw`` – pre-formed filter strings inserted verbatim.

plus a ``nested`` flag marking a set that is a sub-expression of an outer
query (the outer compile step owns the wrapping).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .operators import resolve

__all__ = ["Condition", "ConditionSet"]


@dataclass(frozen=True, slots=True)
class Condition:
    field: str
    operator: str
    value: str | None = None


@dataclass(slots=True)
class ConditionSet:
    """Classified conditions for a single compile call."""

    conjunctive: List[Condition] = field(default_factory=list)
    disjunctive: List[Condition] = field(default_factory=list)
    raw: List[str] = field(default_factory=list)
    nested: bool = False

    @classmethod
    def nested_set(cls) -> "ConditionSet":
        """Return an empty set flagged as a nested sub-query."""
        return cls(nested=True)

    # Builder helpers ---------------------------------------------------

    def where(self, field: str, operator: str, value: str | None = None) -> "ConditionSet":
        """Append an AND condition.  Unknown operators fail immediately."""
        resolve(operator)
        self.conjunctive.append(Condition(field, operator, value))
        return self

    def or_where(self, field: str, operator: str, value: str | None = None) -> "ConditionSet":
        """Append an OR condition.  Unknown operators fail immediately."""
        resolve(operator)
        self.disjunctive.append(Condition(field, operator, value))
        return self

    def raw_filter(self, *filters: str) -> "ConditionSet":
        self.raw.extend(filters)
        return self

    def count(self) -> int:
        """Total number of filters across all buckets."""
        return len(self.conjunctive) + len(self.disjunctive) + len(self.raw)
