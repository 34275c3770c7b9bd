import dataclasses

import pytest

from ldap_filter_grammar.conditions import Condition, ConditionSet
from ldap_filter_grammar.filter_compiler import compile_filter
from ldap_filter_grammar.operators import InvalidOperator


def test_builder_helpers_fill_buckets_in_order():
    query = (
        ConditionSet()
        .where("objectClass", "=", "person")
        .where("mail", "*")
        .or_where("cn", "starts_with", "adm")
        .or_where("cn", "=", "root")
        .raw_filter("(uid=jdoe)", "(uid=other)")
    )
    assert query.conjunctive == [Condition("objectClass", "=", "person"), Condition("mail", "*")]
    assert query.disjunctive == [Condition("cn", "starts_with", "adm"), Condition("cn", "=", "root")]
    assert query.raw == ["(uid=jdoe)", "(uid=other)"]
    assert query.count() == 6
    assert not query.nested


def test_where_validates_operator_before_appending():
    query = ConditionSet()
    with pytest.raises(InvalidOperator):
        query.where("cn", "like", "bob")
    with pytest.raises(InvalidOperator):
        query.or_where("cn", "=~", "bob")
    assert query.count() == 0


def test_nested_set_is_empty_and_flagged():
    query = ConditionSet.nested_set()
    assert query.nested
    assert query.count() == 0
    assert compile_filter(query) == ""


def test_condition_is_immutable():
    cond = Condition("cn", "=", "bob")
    with pytest.raises(dataclasses.FrozenInstanceError):
        cond.value = "alice"  # type: ignore[misc]


def test_builder_output_matches_direct_construction():
    built = ConditionSet().where("mail", "=", "x").or_where("cn", "=", "a").or_where("cn", "=", "b")
    assert compile_filter(built) == "(&(mail=x)(|(cn=a)(cn=b)))"


def test_buckets_are_not_shared_between_instances():
    first = ConditionSet().where("cn", "=", "a")
    second = ConditionSet()
    assert first.conjunctive is not second.conjunctive
    assert second.count() == 0
