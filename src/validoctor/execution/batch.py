"""Execution batches: nodes of an examination tree.

A batch owns a group of property rules and any number of child batches.
Performing it runs its own rules and, unless gated, its children, and returns
the union of everything they report.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Generic, TypeVar

from loguru import logger

from validoctor.models.ailment import Ailment
from validoctor.rule.context import ExaminationContext
from validoctor.rule.property import PropertyRule
from validoctor.rule.rule_set import RuleSet

T = TypeVar("T")


class ExecutionBatch(Generic[T]):
    """A group of rules plus child batches evaluated against one patient.

    Children run unconditionally by default. Two explicit gates exist:

    - ``condition``: when it returns False for the patient, neither the
      batch's rules nor its children run.
    - ``children_require_pass``: when True, children run only if this
      batch's own rules reported nothing, e.g. to skip detailed checks on a
      value that is already known to be missing.
    """

    def __init__(
        self,
        rules: RuleSet[T] | Iterable[PropertyRule[T]] = (),
        children: Sequence[ExecutionBatch[T]] = (),
        *,
        name: str | None = None,
        condition: Callable[[T], bool] | None = None,
        children_require_pass: bool = False,
    ) -> None:
        self._rules = rules if isinstance(rules, RuleSet) else RuleSet(rules)
        self._children: tuple[ExecutionBatch[T], ...] = tuple(children)
        self._name = name
        self._condition = condition
        self._children_require_pass = children_require_pass

    @property
    def name(self) -> str:
        return self._name or f"batch({', '.join(self._rules.properties) or '-'})"

    @property
    def rules(self) -> RuleSet[T]:
        return self._rules

    @property
    def children(self) -> tuple[ExecutionBatch[T], ...]:
        return self._children

    def then(self, *children: ExecutionBatch[T]) -> ExecutionBatch[T]:
        """Return a copy of this batch with ``children`` appended."""
        return ExecutionBatch(
            self._rules,
            self._children + children,
            name=self._name,
            condition=self._condition,
            children_require_pass=self._children_require_pass,
        )

    def perform(
        self, patient: T, context: ExaminationContext | None = None
    ) -> set[Ailment]:
        """Evaluate this batch and its subtree against ``patient``."""
        if context is None:
            context = ExaminationContext()
        if self._condition is not None and not self._condition(patient):
            logger.debug("Skipping {}: condition not met", self.name)
            return set()

        ailments = set(self._rules.examine(patient, context=context))
        if ailments and self._children_require_pass:
            if self._children:
                logger.debug(
                    "Skipping {} child batch(es) of {}: {} ailment(s) found",
                    len(self._children),
                    self.name,
                    len(ailments),
                )
            return ailments

        for child in self._children:
            ailments |= child.perform(patient, context)
        return ailments

    def __repr__(self) -> str:
        return (
            f"ExecutionBatch({self.name!r}, rules={len(self._rules)}, "
            f"children={len(self._children)})"
        )
