"""Fluent builder for RuleSets."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from validoctor.rule.base import Rule
from validoctor.rule.property import (
    AccessorPropertyRule,
    ConditionalPropertyRule,
    PropertyRule,
    attribute,
)
from validoctor.rule.reducer import SharedComputationRule
from validoctor.rule.rule_set import RuleSet

T = TypeVar("T")


class RuleSetBuilder(Generic[T]):
    """Accumulates property rules and produces an immutable RuleSet.

    Usage::

        rules = (
            RuleSet.builder()
            .property("name", not_null(), not_empty())
            .property("age", positive(), when=lambda p: p["name"] is not None)
            .shared(total_score_rule)
            .build()
        )

    Each call to property() adds one rule per leaf rule given, all reading the
    same property. ``accessor`` defaults to key lookup for mappings and
    attribute lookup otherwise; ``when`` gates every added rule.
    """

    def __init__(self) -> None:
        self._parts: list[RuleSet[T]] = []

    def property(
        self,
        name: str,
        *rules: Rule[Any],
        accessor: Callable[[T], Any] | None = None,
        when: Callable[[T], bool] | None = None,
    ) -> RuleSetBuilder[T]:
        if not rules:
            msg = f"No rules given for property '{name}'"
            raise ValueError(msg)
        getter = accessor or attribute(name)
        added: list[PropertyRule[T]] = []
        for rule in rules:
            property_rule: PropertyRule[T] = AccessorPropertyRule(name, getter, rule)
            if when is not None:
                property_rule = ConditionalPropertyRule(property_rule, when)
            added.append(property_rule)
        self._parts.append(RuleSet(added))
        return self

    def rule(self, *property_rules: PropertyRule[T]) -> RuleSetBuilder[T]:
        """Add ready-made property rules as they are."""
        self._parts.append(RuleSet(property_rules))
        return self

    def whole(self, object_name: str, *rules: Rule[T]) -> RuleSetBuilder[T]:
        """Add rules checking the patient as a whole, reported under ``object_name``."""
        self._parts.append(RuleSet.of(object_name, *rules))
        return self

    def shared(self, *reducer_rules: SharedComputationRule[T, Any]) -> RuleSetBuilder[T]:
        self._parts.append(RuleSet.of_reducers(*reducer_rules))
        return self

    def include(self, rule_set: RuleSet[T]) -> RuleSetBuilder[T]:
        self._parts.append(rule_set)
        return self

    def build(self) -> RuleSet[T]:
        return RuleSet.flatten(*self._parts)
