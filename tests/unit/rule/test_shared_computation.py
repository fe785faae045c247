"""Tests for shared computation rules and their shadows."""

from __future__ import annotations

import gc
import weakref

import pytest

from validoctor.models.ailment import Ailment
from validoctor.rule.basic import max_value, non_negative
from validoctor.rule.context import ExaminationContext
from validoctor.rule.reducer import (
    ShadowRule,
    SharedComputationDelegate,
    SharedComputationRule,
)
from validoctor.rule.rule_set import RuleSet


class CountingSum:
    """Computation summing ``a`` and ``b`` that counts its invocations."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, patient: dict[str, int]) -> int:
        self.calls += 1
        return patient["a"] + patient["b"]


@pytest.fixture()
def total() -> CountingSum:
    return CountingSum()


@pytest.fixture()
def reducer(total: CountingSum) -> SharedComputationRule[dict[str, int], int]:
    return SharedComputationRule.uniform(["a", "b"], total, non_negative())


# ---------------------------------------------------------------------------
# SharedComputationRule
# ---------------------------------------------------------------------------


class TestSharedComputationRule:
    def test_properties_in_declaration_order(self, reducer) -> None:
        assert reducer.properties == ("a", "b")

    def test_empty_properties_rejected(self, total) -> None:
        with pytest.raises(ValueError, match="at least one property"):
            SharedComputationRule.uniform([], total, non_negative())

    def test_duplicate_properties_rejected(self, total) -> None:
        with pytest.raises(ValueError, match=r"Duplicate properties .*\['a'\]"):
            SharedComputationRule.uniform(["a", "b", "a"], total, non_negative())

    def test_unknown_property_rejected(self, reducer) -> None:
        with pytest.raises(ValueError, match="'c' is not covered"):
            reducer.check_for("c")

    def test_per_property_checks(self, total) -> None:
        rule = SharedComputationRule(total, {"a": non_negative(), "b": max_value(10)})
        ailments = RuleSet.of_reducers(rule).examine({"a": 6, "b": 6})
        assert ailments == {Ailment(rule="MAX_VALUE", property="b", params={"max": 10})}


# ---------------------------------------------------------------------------
# Delegate and shadows
# ---------------------------------------------------------------------------


class TestSharedComputationDelegate:
    def test_computes_once_per_context(self, reducer, total) -> None:
        delegate = SharedComputationDelegate(reducer)
        context = ExaminationContext()
        patient = {"a": -1, "b": -1}
        first = delegate.outcomes(patient, context)
        second = delegate.outcomes(patient, context)
        assert first is second
        assert total.calls == 1
        assert first == {
            "a": Ailment(rule="NON_NEGATIVE", property="a"),
            "b": Ailment(rule="NON_NEGATIVE", property="b"),
        }

    def test_recomputes_for_new_context(self, reducer, total) -> None:
        delegate = SharedComputationDelegate(reducer)
        patient = {"a": 1, "b": 1}
        delegate.outcomes(patient, ExaminationContext())
        delegate.outcomes(patient, ExaminationContext())
        assert total.calls == 2

    def test_recomputes_for_other_patient_in_same_context(self, reducer, total) -> None:
        delegate = SharedComputationDelegate(reducer)
        context = ExaminationContext()
        assert delegate.outcomes({"a": 1, "b": 1}, context)["a"] is None
        assert delegate.outcomes({"a": -5, "b": 1}, context)["a"] is not None
        assert total.calls == 2

    def test_state_lives_in_context_only(self, reducer) -> None:
        delegate = SharedComputationDelegate(reducer)
        context = ExaminationContext()
        delegate.outcomes({"a": 1, "b": 1}, context)
        assert len(context) == 1
        assert vars(delegate) == {"_reducer": reducer}

    def test_delegates_of_one_reducer_share_cache(self, reducer, total) -> None:
        context = ExaminationContext()
        patient = {"a": 1, "b": 1}
        first = SharedComputationDelegate(reducer).outcomes(patient, context)
        second = SharedComputationDelegate(reducer).outcomes(patient, context)
        assert first is second
        assert total.calls == 1


# ---------------------------------------------------------------------------
# ExaminationContext
# ---------------------------------------------------------------------------


class Owner:
    """Plain object standing in for a cache owner."""


class TestExaminationContext:
    def test_lookup_misses_for_unknown_owner(self) -> None:
        context = ExaminationContext()
        patient = object()
        context.store(Owner(), patient, "cached")
        assert context.lookup(Owner(), patient) == (False, None)

    def test_lookup_hits_for_same_owner_and_patient(self) -> None:
        context = ExaminationContext()
        owner, patient = Owner(), object()
        context.store(owner, patient, "cached")
        assert context.lookup(owner, patient) == (True, "cached")
        assert context.lookup(owner, object()) == (False, None)

    def test_keeps_owner_alive(self) -> None:
        context = ExaminationContext()
        owner = Owner()
        ref = weakref.ref(owner)
        context.store(owner, object(), "cached")
        del owner
        gc.collect()
        assert ref() is not None


class TestShadowRule:
    def test_shadows_share_one_delegate(self, reducer) -> None:
        rules = RuleSet.of_reducers(reducer)
        assert len(rules) == 2
        assert all(isinstance(rule, ShadowRule) for rule in rules)
        assert rules[0].delegate is rules[1].delegate
        assert [rule.property_name for rule in rules] == ["a", "b"]

    def test_each_reducer_gets_its_own_delegate(self, reducer, total) -> None:
        other = SharedComputationRule.uniform(["c"], total, non_negative())
        rules = RuleSet.of_reducers(reducer, other)
        assert len(rules) == 3
        assert rules[0].delegate is not rules[2].delegate

    def test_shared_context_computes_once(self, reducer, total) -> None:
        rules = RuleSet.of_reducers(reducer)
        context = ExaminationContext()
        patient = {"a": -1, "b": -1}
        results = [rule.apply(patient, context=context) for rule in rules]
        assert results == [
            Ailment(rule="NON_NEGATIVE", property="a"),
            Ailment(rule="NON_NEGATIVE", property="b"),
        ]
        assert total.calls == 1

    def test_standalone_call_uses_fresh_context(self, reducer, total) -> None:
        shadow = RuleSet.of_reducers(reducer)[0]
        patient = {"a": 2, "b": 3}
        assert shadow.test(patient)
        assert shadow.apply(patient) is None
        assert total.calls == 2

    def test_introspection_is_per_property(self, total) -> None:
        rule = SharedComputationRule(total, {"a": non_negative(), "b": max_value(10)})
        a, b = RuleSet.of_reducers(rule)
        assert a.peek_ailment() == Ailment(rule="NON_NEGATIVE", property="a")
        assert b.peek_ailment() == Ailment(rule="MAX_VALUE", property="b", params={"max": 10})
        assert a.get_params() == {}
        assert b.get_params() == {"max": 10}

    def test_shadow_for_unknown_property_rejected(self, reducer) -> None:
        with pytest.raises(ValueError, match="not covered"):
            ShadowRule("z", SharedComputationDelegate(reducer))

    def test_computation_fault_propagates(self) -> None:
        def explode(_: object) -> int:
            raise ZeroDivisionError("boom")

        rules = RuleSet.of_reducers(SharedComputationRule.uniform(["a"], explode, non_negative()))
        with pytest.raises(ZeroDivisionError):
            rules.examine({"a": 1})
