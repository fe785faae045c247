"""Shared-computation rules.

Some checks on several properties all depend on one expensive derivation of
the whole patient (a total, a parsed document, a lookup). A
SharedComputationRule declares that derivation once together with the check
each property gets on its result.

Expanding it into a RuleSet yields one ShadowRule per property. All shadows
of one reducer reference the same SharedComputationDelegate. The derivation
runs at most once per patient per examination, even when the reducer was
expanded more than once, and its outcome is kept in the call's
ExaminationContext under the reducer, never on the rule objects.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any, Generic, TypeVar

from loguru import logger

from validoctor.models.ailment import Ailment
from validoctor.rule.base import Rule
from validoctor.rule.context import ExaminationContext
from validoctor.rule.property import PropertyRule

P = TypeVar("P")
D = TypeVar("D")


class SharedComputationRule(Generic[P, D]):
    """One computation ``P -> D`` shared by checks on several properties.

    Args:
        computation: Derivation run over the whole patient.
        checks: Property name -> rule applied to the derived value. Failures
            of each rule are reported for its property.
    """

    def __init__(
        self,
        computation: Callable[[P], D],
        checks: Mapping[str, Rule[D]],
    ) -> None:
        if not checks:
            msg = "A shared computation rule needs at least one property"
            raise ValueError(msg)
        self._computation = computation
        self._checks: dict[str, Rule[D]] = dict(checks)

    @classmethod
    def uniform(
        cls,
        properties: Iterable[str],
        computation: Callable[[P], D],
        rule: Rule[D],
    ) -> SharedComputationRule[P, D]:
        """Apply the same rule to the derived value on behalf of every property."""
        names = list(properties)
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            msg = f"Duplicate properties in shared computation rule: {duplicates}"
            raise ValueError(msg)
        return cls(computation, {name: rule for name in names})

    @property
    def properties(self) -> tuple[str, ...]:
        return tuple(self._checks)

    def compute(self, patient: P) -> D:
        return self._computation(patient)

    def check_for(self, property_name: str) -> Rule[D]:
        try:
            return self._checks[property_name]
        except KeyError:
            msg = f"Property '{property_name}' is not covered by this shared computation rule"
            raise ValueError(msg) from None

    def __repr__(self) -> str:
        return f"SharedComputationRule(properties={list(self._checks)!r})"


class SharedComputationDelegate(Generic[P, D]):
    """The single evaluator behind all shadows of one SharedComputationRule."""

    def __init__(self, reducer: SharedComputationRule[P, D]) -> None:
        self._reducer = reducer

    @property
    def reducer(self) -> SharedComputationRule[P, D]:
        return self._reducer

    def outcomes(self, patient: P, context: ExaminationContext) -> dict[str, Ailment | None]:
        """Per-property outcome for ``patient``, computed once per context.

        The entry belongs to the reducer, not this delegate, so separate
        expansions of one reducer share it.
        """
        found, cached = context.lookup(self._reducer, patient)
        if found:
            return cached

        derived = self._reducer.compute(patient)
        results: dict[str, Ailment | None] = {}
        for name in self._reducer.properties:
            ailment = self._reducer.check_for(name).apply(derived)
            results[name] = None if ailment is None else ailment.with_property(name)
        context.store(self._reducer, patient, results)
        logger.debug(
            "Shared computation for {} evaluated: {} failing",
            list(results),
            sum(1 for a in results.values() if a is not None),
        )
        return results


class ShadowRule(PropertyRule[P]):
    """Per-property view onto a SharedComputationDelegate.

    Introspection reports this property's own check; only the derivation is
    shared between shadows.
    """

    def __init__(self, property_name: str, delegate: SharedComputationDelegate[P, Any]) -> None:
        delegate.reducer.check_for(property_name)  # raises for unknown properties
        self._property_name = property_name
        self._delegate = delegate

    @property
    def property_name(self) -> str:
        return self._property_name

    @property
    def delegate(self) -> SharedComputationDelegate[P, Any]:
        return self._delegate

    def apply(self, patient: P, *, context: ExaminationContext | None = None) -> Ailment | None:
        if context is None:
            context = ExaminationContext()
        return self._delegate.outcomes(patient, context)[self._property_name]

    def peek_ailment(self) -> Ailment:
        check = self._delegate.reducer.check_for(self._property_name)
        return check.peek_ailment().with_property(self._property_name)

    def get_params(self) -> dict[str, Any]:
        return self._delegate.reducer.check_for(self._property_name).get_params()
