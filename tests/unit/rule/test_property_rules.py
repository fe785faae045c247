"""Tests for property-scoped, conditional and adapted whole-object rules."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from validoctor.models.ailment import Ailment
from validoctor.rule.base import PredicateRule
from validoctor.rule.basic import min_value, not_null, positive
from validoctor.rule.context import ExaminationContext
from validoctor.rule.property import (
    AccessorPropertyRule,
    AdaptedObjectRule,
    ConditionalPropertyRule,
    attribute,
    conditional_rule,
    property_rule,
)


@dataclass
class Person:
    name: str | None
    age: int


class RecordingRule(PredicateRule[int]):
    """Positive check that records every value it sees."""

    def __init__(self) -> None:
        super().__init__("POSITIVE", lambda value: value > 0)
        self.seen: list[int] = []

    def test(self, value: int) -> bool:
        self.seen.append(value)
        return super().test(value)


# ---------------------------------------------------------------------------
# attribute()
# ---------------------------------------------------------------------------


class TestAttributeAccessor:
    def test_reads_mapping_key(self) -> None:
        assert attribute("age")({"age": 3}) == 3

    def test_reads_object_attribute(self) -> None:
        assert attribute("age")(Person("Ann", 3)) == 3

    def test_missing_key_raises(self) -> None:
        with pytest.raises(KeyError):
            attribute("age")({})

    def test_missing_attribute_raises(self) -> None:
        with pytest.raises(AttributeError):
            attribute("height")(Person("Ann", 3))


# ---------------------------------------------------------------------------
# AccessorPropertyRule
# ---------------------------------------------------------------------------


class TestAccessorPropertyRule:
    def test_failure_attributed_to_property(self) -> None:
        rule = AccessorPropertyRule("age", lambda p: p.age, positive())
        assert rule.apply(Person("Ann", -5)) == Ailment(rule="POSITIVE", property="age")
        assert not rule.test(Person("Ann", -5))

    def test_pass(self) -> None:
        rule = AccessorPropertyRule("age", lambda p: p.age, positive())
        assert rule.apply(Person("Ann", 5)) is None
        assert rule.test(Person("Ann", 5))

    def test_introspection(self) -> None:
        rule = AccessorPropertyRule("age", lambda p: p.age, min_value(18))
        assert rule.property_name == "age"
        assert rule.get_property() == "age"
        assert rule.get_params() == {"min": 18}
        assert rule.peek_ailment() == Ailment(rule="MIN_VALUE", property="age", params={"min": 18})

    def test_accessor_fault_propagates(self) -> None:
        def broken(_: Person) -> int:
            raise RuntimeError("cannot read age")

        rule = AccessorPropertyRule("age", broken, positive())
        with pytest.raises(RuntimeError, match="cannot read age"):
            rule.apply(Person("Ann", 1))

    def test_property_rule_shorthand_uses_default_accessor(self) -> None:
        rule = property_rule("name", not_null())
        assert rule.apply({"name": None}) == Ailment(rule="NOT_NULL", property="name")
        assert rule.apply(Person(None, 1)) == Ailment(rule="NOT_NULL", property="name")


# ---------------------------------------------------------------------------
# ConditionalPropertyRule
# ---------------------------------------------------------------------------


class TestConditionalPropertyRule:
    def test_gate_false_passes_vacuously(self) -> None:
        inner_rule = RecordingRule()
        rule = ConditionalPropertyRule(
            AccessorPropertyRule("age", lambda p: p.age, inner_rule),
            lambda p: p.name is not None,
        )
        patient = Person(None, -5)
        assert rule.apply(patient) is None
        assert rule.test(patient)
        assert inner_rule.seen == []

    def test_gate_true_delegates(self) -> None:
        rule = ConditionalPropertyRule(
            AccessorPropertyRule("age", lambda p: p.age, positive()),
            lambda p: p.name is not None,
        )
        patient = Person("Ann", -5)
        assert rule.apply(patient) == Ailment(rule="POSITIVE", property="age")
        assert not rule.test(patient)
        assert rule.apply(Person("Ann", 5)) is None

    def test_introspection_ignores_gate(self) -> None:
        inner = AccessorPropertyRule("age", lambda p: p.age, min_value(18))
        rule = ConditionalPropertyRule(inner, lambda p: False)
        assert rule.property_name == "age"
        assert rule.peek_ailment() == inner.peek_ailment()
        assert rule.get_params() == inner.get_params()
        assert rule.inner is inner

    def test_accessor_fault_propagates_when_gate_true(self) -> None:
        rule = conditional_rule("height", lambda p: True, positive())
        with pytest.raises(AttributeError):
            rule.apply(Person("Ann", 1))

    def test_accessor_not_called_when_gate_false(self) -> None:
        rule = conditional_rule("height", lambda p: False, positive())
        assert rule.apply(Person("Ann", 1)) is None

    def test_context_passed_through(self) -> None:
        seen: list[ExaminationContext | None] = []

        class Spy(AccessorPropertyRule):
            def apply(self, patient, *, context=None):
                seen.append(context)
                return None

        context = ExaminationContext()
        rule = ConditionalPropertyRule(Spy("age", lambda p: p.age, positive()), lambda p: True)
        rule.apply(Person("Ann", 1), context=context)
        assert seen == [context]


# ---------------------------------------------------------------------------
# AdaptedObjectRule
# ---------------------------------------------------------------------------


class TestAdaptedObjectRule:
    def test_leaf_rule_receives_whole_patient(self) -> None:
        rule = AdaptedObjectRule("this", not_null())
        assert rule.apply(None) == Ailment(rule="NOT_NULL", property="this")
        assert rule.apply(Person("Ann", 1)) is None

    def test_overrides_property_attribution(self) -> None:
        rule = AdaptedObjectRule("person", property_rule("age", positive()))
        assert rule.property_name == "person"
        assert rule.apply({"age": -1}) == Ailment(rule="POSITIVE", property="person")
        assert rule.peek_ailment() == Ailment(rule="POSITIVE", property="person")
        assert not rule.test({"age": -1})
