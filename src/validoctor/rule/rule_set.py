"""RuleSet: the composable unit of property rules for one patient type.

RuleSets are immutable. Every composition operation (merge, flatten, of,
of_reducers) returns a new RuleSet and leaves its inputs untouched.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any, Generic, TypeVar, overload

from loguru import logger

from validoctor.models.ailment import Ailment
from validoctor.rule.base import Rule
from validoctor.rule.context import ExaminationContext
from validoctor.rule.property import AdaptedObjectRule, PropertyRule
from validoctor.rule.reducer import SharedComputationDelegate, SharedComputationRule, ShadowRule

if TYPE_CHECKING:
    from validoctor.rule.builder import RuleSetBuilder

T = TypeVar("T")


class RuleSet(Generic[T]):
    """Ordered collection of PropertyRules validating patients of type T.

    Order is kept for deterministic inspection; examination results are sets
    and do not depend on it.
    """

    def __init__(self, rules: Iterable[PropertyRule[T]] = ()) -> None:
        self._rules: tuple[PropertyRule[T], ...] = tuple(rules)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @staticmethod
    def builder() -> RuleSetBuilder[Any]:
        """Return a fluent builder, the recommended way to assemble a RuleSet."""
        from validoctor.rule.builder import RuleSetBuilder

        return RuleSetBuilder()

    @classmethod
    def collect(cls, rules: Iterable[PropertyRule[T]]) -> RuleSet[T]:
        """Gather property rules from any iterable into one RuleSet."""
        return cls(rules)

    @classmethod
    def flatten(cls, *rule_sets: RuleSet[T]) -> RuleSet[T]:
        """Combine all rules of ``rule_sets`` into one RuleSet."""
        return cls.collect(rule for rule_set in rule_sets for rule in rule_set)

    @classmethod
    def of(cls, object_name: str, *rules: Rule[T] | PropertyRule[T]) -> RuleSet[T]:
        """Adapt whole-object rules into a RuleSet reporting under ``object_name``.

        Caution: rules that already are PropertyRules lose their own property
        attribution; every failure is reported for ``object_name``. To check
        the object and its properties in one call, keep them separate and use
        Validoctor.examine_combo() instead.
        """
        adapted: list[PropertyRule[T]] = []
        for rule in rules:
            if isinstance(rule, PropertyRule) and rule.property_name != object_name:
                logger.warning(
                    "Property rule for '{}' re-attributed to '{}'",
                    rule.property_name,
                    object_name,
                )
            adapted.append(AdaptedObjectRule(object_name, rule))
        return cls(adapted)

    @classmethod
    def of_reducers(cls, *reducer_rules: SharedComputationRule[T, Any]) -> RuleSet[T]:
        """Expand shared computation rules into one shadow rule per property.

        All shadows of one reducer share a single delegate, so the reducer's
        computation runs once per examination no matter how many of its
        properties are checked.
        """
        shadows: list[PropertyRule[T]] = []
        for reducer in reducer_rules:
            delegate = SharedComputationDelegate(reducer)
            shadows.extend(ShadowRule(name, delegate) for name in reducer.properties)
        logger.debug(
            "Expanded {} shared computation rule(s) into {} shadow rule(s)",
            len(reducer_rules),
            len(shadows),
        )
        return cls(shadows)

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    @overload
    def merge(self, other: RuleSet[T]) -> RuleSet[T]: ...

    @overload
    def merge(self, other: SharedComputationRule[T, Any]) -> RuleSet[T]: ...

    def merge(self, other: RuleSet[T] | SharedComputationRule[T, Any]) -> RuleSet[T]:
        """Return a new RuleSet with this set's rules followed by ``other``'s.

        A SharedComputationRule is expanded with of_reducers() first.
        """
        if isinstance(other, SharedComputationRule):
            other = RuleSet.of_reducers(other)
        if not isinstance(other, RuleSet):
            msg = f"Cannot merge RuleSet with {type(other).__name__}"
            raise TypeError(msg)
        return RuleSet(self._rules + other._rules)

    def __add__(self, other: RuleSet[T] | SharedComputationRule[T, Any]) -> RuleSet[T]:
        if not isinstance(other, RuleSet | SharedComputationRule):
            return NotImplemented
        return self.merge(other)

    # ------------------------------------------------------------------
    # Examination
    # ------------------------------------------------------------------

    def examine(
        self, patient: T, *, context: ExaminationContext | None = None
    ) -> frozenset[Ailment]:
        """Run every rule against ``patient`` and return the distinct ailments."""
        if context is None:
            context = ExaminationContext()
        ailments: set[Ailment] = set()
        for rule in self._rules:
            ailment = rule.apply(patient, context=context)
            if ailment is not None:
                ailments.add(ailment)
        return frozenset(ailments)

    def peek_ailments(self) -> list[Ailment]:
        """Template ailments of all rules, in order."""
        return [rule.peek_ailment() for rule in self._rules]

    @property
    def properties(self) -> list[str]:
        """Distinct property names covered, in first-seen order."""
        return list(dict.fromkeys(rule.property_name for rule in self._rules))

    # ------------------------------------------------------------------
    # Sequence protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[PropertyRule[T]]:
        return iter(self._rules)

    @overload
    def __getitem__(self, index: int) -> PropertyRule[T]: ...

    @overload
    def __getitem__(self, index: slice) -> RuleSet[T]: ...

    def __getitem__(self, index: int | slice) -> PropertyRule[T] | RuleSet[T]:
        if isinstance(index, slice):
            return RuleSet(self._rules[index])
        return self._rules[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RuleSet):
            return NotImplemented
        return len(self._rules) == len(other._rules) and all(
            a is b for a, b in zip(self._rules, other._rules, strict=True)
        )

    def __repr__(self) -> str:
        return f"RuleSet({list(self._rules)!r})"
