"""Base abstractions for leaf validation rules.

A Rule decides whether a single value passes a check and, when it does not,
describes the failure as an Ailment. Concrete leaf rules either subclass
Rule or are built from a predicate with PredicateRule.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any, Generic, TypeVar

from validoctor.models.ailment import Ailment

V = TypeVar("V")


class Rule(ABC, Generic[V]):
    """Abstract pass/fail check over a value of type V.

    Subclasses must implement test() and peek_ailment(). The default apply()
    reports the template ailment on failure; override it when the ailment
    should depend on the examined value. Whatever the override, apply() must
    return None exactly when test() returns True.
    """

    @abstractmethod
    def test(self, value: V) -> bool:
        """Return True when ``value`` passes this rule."""
        ...

    @abstractmethod
    def peek_ailment(self) -> Ailment:
        """Return the ailment this rule reports, without examining any value.

        Useful for introspection and documentation of a rule set.
        """
        ...

    def apply(self, value: V) -> Ailment | None:
        """Examine ``value`` and return an Ailment on failure, None otherwise."""
        if self.test(value):
            return None
        return self.peek_ailment()

    def get_params(self) -> dict[str, Any]:
        """Return the parameters of this rule (e.g., bounds it enforces)."""
        return dict(self.peek_ailment().params)


class PredicateRule(Rule[V]):
    """Leaf rule backed by a plain predicate.

    Usage::

        adult = PredicateRule("ADULT", lambda age: age >= 18, {"min": 18})
        adult.apply(12)  # Ailment(rule="ADULT", property=None, params={"min": 18})
    """

    def __init__(
        self,
        rule_id: str,
        predicate: Callable[[V], bool],
        params: Mapping[str, Any] | None = None,
    ) -> None:
        if not rule_id:
            msg = "rule_id must be a non-empty string"
            raise ValueError(msg)
        self._rule_id = str(rule_id)
        self._predicate = predicate
        self._params = dict(params or {})

    @property
    def rule_id(self) -> str:
        return self._rule_id

    def test(self, value: V) -> bool:
        return bool(self._predicate(value))

    def peek_ailment(self) -> Ailment:
        return Ailment(rule=self._rule_id, params=dict(self._params))

    def get_params(self) -> dict[str, Any]:
        return dict(self._params)

    def __repr__(self) -> str:
        return f"PredicateRule({self._rule_id!r}, params={self._params!r})"
