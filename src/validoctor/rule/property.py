"""Property-scoped rules.

A PropertyRule examines a whole patient but attributes its failures to one
named property. The variants here are composed by decoration:

- AccessorPropertyRule: extract a property with an accessor, check it with a leaf Rule.
- ConditionalPropertyRule: gate another PropertyRule on a patient-level predicate.
- AdaptedObjectRule: check the patient as a whole, reported under a fixed name.

Shadow rules produced from shared computations live in validoctor.rule.reducer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any, Generic, TypeVar

from validoctor.models.ailment import Ailment
from validoctor.rule.base import Rule
from validoctor.rule.context import ExaminationContext

P = TypeVar("P")
V = TypeVar("V")


def attribute(name: str) -> Callable[[Any], Any]:
    """Build the default accessor for ``name``.

    Mappings are read by key, any other patient by attribute. A missing key
    or attribute raises, as extraction failures are evaluation faults.
    """

    def _get(patient: Any) -> Any:
        if isinstance(patient, Mapping):
            return patient[name]
        return getattr(patient, name)

    _get.__name__ = f"attribute_{name}"
    return _get


class PropertyRule(ABC, Generic[P]):
    """Rule over a patient of type P whose failures belong to one property.

    ``context`` carries call-scoped state between the rules of one
    examination. Callers evaluating a single rule may omit it.
    """

    @property
    @abstractmethod
    def property_name(self) -> str:
        """Name of the property this rule reports failures for."""
        ...

    @abstractmethod
    def apply(self, patient: P, *, context: ExaminationContext | None = None) -> Ailment | None:
        """Examine ``patient`` and return an Ailment on failure, None otherwise."""
        ...

    @abstractmethod
    def peek_ailment(self) -> Ailment:
        """Template ailment describing what this rule checks."""
        ...

    def test(self, patient: P, *, context: ExaminationContext | None = None) -> bool:
        return self.apply(patient, context=context) is None

    def get_params(self) -> dict[str, Any]:
        return dict(self.peek_ailment().params)

    def get_property(self) -> str:
        return self.property_name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.property_name!r}, {self.peek_ailment().rule!r})"


class AccessorPropertyRule(PropertyRule[P], Generic[P, V]):
    """Extracts one property of the patient and checks it with a leaf rule."""

    def __init__(
        self,
        property_name: str,
        accessor: Callable[[P], V],
        rule: Rule[V],
    ) -> None:
        self._property_name = property_name
        self._accessor = accessor
        self._rule = rule

    @property
    def property_name(self) -> str:
        return self._property_name

    @property
    def rule(self) -> Rule[V]:
        return self._rule

    def test(self, patient: P, *, context: ExaminationContext | None = None) -> bool:
        return self._rule.test(self._accessor(patient))

    def apply(self, patient: P, *, context: ExaminationContext | None = None) -> Ailment | None:
        ailment = self._rule.apply(self._accessor(patient))
        if ailment is None:
            return None
        return ailment.with_property(self._property_name)

    def peek_ailment(self) -> Ailment:
        return self._rule.peek_ailment().with_property(self._property_name)

    def get_params(self) -> dict[str, Any]:
        return self._rule.get_params()


class ConditionalPropertyRule(PropertyRule[P]):
    """Evaluates the wrapped rule only when ``condition(patient)`` holds.

    When the condition is false the rule passes vacuously. Introspection
    (peek_ailment, get_params, property_name) describes the wrapped rule and
    never depends on the gate.
    """

    def __init__(self, inner: PropertyRule[P], condition: Callable[[P], bool]) -> None:
        self._inner = inner
        self._condition = condition

    @property
    def property_name(self) -> str:
        return self._inner.property_name

    @property
    def inner(self) -> PropertyRule[P]:
        return self._inner

    def test(self, patient: P, *, context: ExaminationContext | None = None) -> bool:
        return not self._condition(patient) or self._inner.test(patient, context=context)

    def apply(self, patient: P, *, context: ExaminationContext | None = None) -> Ailment | None:
        if self._condition(patient):
            return self._inner.apply(patient, context=context)
        return None

    def peek_ailment(self) -> Ailment:
        return self._inner.peek_ailment()

    def get_params(self) -> dict[str, Any]:
        return self._inner.get_params()


class AdaptedObjectRule(PropertyRule[P]):
    """Checks the patient as a whole and reports failures under ``name``.

    The wrapped rule receives the patient itself. If it is already a
    PropertyRule, its own property attribution is replaced by ``name``.
    """

    def __init__(self, name: str, rule: Rule[P] | PropertyRule[P]) -> None:
        self._name = name
        self._rule = rule

    @property
    def property_name(self) -> str:
        return self._name

    @property
    def rule(self) -> Rule[P] | PropertyRule[P]:
        return self._rule

    def test(self, patient: P, *, context: ExaminationContext | None = None) -> bool:
        if isinstance(self._rule, PropertyRule):
            return self._rule.test(patient, context=context)
        return self._rule.test(patient)

    def apply(self, patient: P, *, context: ExaminationContext | None = None) -> Ailment | None:
        if isinstance(self._rule, PropertyRule):
            ailment = self._rule.apply(patient, context=context)
        else:
            ailment = self._rule.apply(patient)
        if ailment is None:
            return None
        return ailment.with_property(self._name)

    def peek_ailment(self) -> Ailment:
        return self._rule.peek_ailment().with_property(self._name)

    def get_params(self) -> dict[str, Any]:
        return self._rule.get_params()


def property_rule(
    property_name: str,
    rule: Rule[Any],
    accessor: Callable[[Any], Any] | None = None,
) -> AccessorPropertyRule[Any, Any]:
    """Shorthand for AccessorPropertyRule with the default accessor."""
    return AccessorPropertyRule(property_name, accessor or attribute(property_name), rule)


def conditional_rule(
    property_name: str,
    condition: Callable[[Any], bool],
    rule: Rule[Any],
    accessor: Callable[[Any], Any] | None = None,
) -> ConditionalPropertyRule[Any]:
    """Shorthand for a ConditionalPropertyRule around a property_rule()."""
    return ConditionalPropertyRule(property_rule(property_name, rule, accessor), condition)
