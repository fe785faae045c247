"""Examination definition: the root of an execution tree."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Generic, TypeVar

from loguru import logger

from validoctor.execution.batch import ExecutionBatch
from validoctor.models.ailment import Ailment
from validoctor.rule.context import ExaminationContext
from validoctor.rule.rule_set import RuleSet

T = TypeVar("T")


class ExaminationDefinition(Generic[T]):
    """A complete examination: a list of root branches evaluated together.

    apply() runs every branch against the patient and returns the distinct
    ailments they report. A failing branch never stops its siblings. An
    exception raised by any rule, accessor or computation aborts the whole
    call; there is no partial result.
    """

    def __init__(self, branches: Sequence[ExecutionBatch[T]]) -> None:
        self._branches: tuple[ExecutionBatch[T], ...] = tuple(branches)

    @classmethod
    def of(cls, *rule_sets: RuleSet[T]) -> ExaminationDefinition[T]:
        """One root branch per rule set."""
        return cls([ExecutionBatch(rule_set) for rule_set in rule_sets])

    @property
    def branches(self) -> tuple[ExecutionBatch[T], ...]:
        return self._branches

    def apply(self, patient: T) -> frozenset[Ailment]:
        """Examine ``patient`` and return every distinct ailment found."""
        context = ExaminationContext()
        ailments: set[Ailment] = set()
        for branch in self._branches:
            try:
                ailments |= branch.perform(patient, context)
            except Exception:
                logger.error("Examination aborted in branch {}", branch.name)
                raise
        logger.debug(
            "Examination finished: {} branch(es), {} ailment(s)",
            len(self._branches),
            len(ailments),
        )
        return frozenset(ailments)
