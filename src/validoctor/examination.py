"""Validoctor: the examination driver.

Accepts a patient together with any composed rule structure and returns the
resulting ailment set. This is the entry point CLIs, web handlers or batch
jobs are expected to call.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

from loguru import logger

from validoctor.config import ValidoctorConfig
from validoctor.execution.definition import ExaminationDefinition
from validoctor.models.ailment import Ailment
from validoctor.rule.base import Rule
from validoctor.rule.property import PropertyRule
from validoctor.rule.reducer import SharedComputationRule
from validoctor.rule.rule_set import RuleSet

T = TypeVar("T")

Examinable = (
    RuleSet[Any]
    | ExaminationDefinition[Any]
    | SharedComputationRule[Any, Any]
    | PropertyRule[Any]
    | Rule[Any]
)


class AilmentsFound(Exception):
    """Raised instead of returning ailments when throw_on_ailment is enabled."""

    def __init__(self, ailments: Iterable[Ailment]) -> None:
        self.ailments = frozenset(ailments)
        listed = "; ".join(sorted(a.describe() for a in self.ailments))
        super().__init__(f"{len(self.ailments)} ailment(s) found: {listed}")


class Validoctor:
    """Runs examinations and applies the configured reporting policy."""

    def __init__(self, config: ValidoctorConfig | None = None) -> None:
        self._config = config or ValidoctorConfig()

    @property
    def config(self) -> ValidoctorConfig:
        return self._config

    def examine(self, patient: T, rules: Examinable) -> frozenset[Ailment]:
        """Examine ``patient`` with any composed rule structure.

        Accepts a RuleSet, an ExaminationDefinition, a shared computation
        rule, a single property rule or a whole-object leaf rule.
        """
        return self._report(patient, self._evaluate(patient, rules))

    def examine_combo(
        self,
        patient: T,
        object_rules: Rule[T] | Sequence[Rule[T]],
        *rule_sets: RuleSet[T],
    ) -> frozenset[Ailment]:
        """Check the patient as a whole first, then its properties.

        Property rules run only when the whole-object rules pass, since they
        usually cannot extract anything from, say, a missing patient.
        """
        if isinstance(object_rules, Rule):
            object_rules = [object_rules]
        whole = RuleSet.of(self._config.object_name, *object_rules)
        ailments = whole.examine(patient)
        if not ailments:
            ailments = RuleSet.flatten(*rule_sets).examine(patient)
        return self._report(patient, ailments)

    def _evaluate(self, patient: Any, rules: Examinable) -> frozenset[Ailment]:
        if isinstance(rules, ExaminationDefinition):
            return rules.apply(patient)
        if isinstance(rules, RuleSet):
            return rules.examine(patient)
        if isinstance(rules, SharedComputationRule):
            return RuleSet.of_reducers(rules).examine(patient)
        if isinstance(rules, PropertyRule):
            return RuleSet([rules]).examine(patient)
        if isinstance(rules, Rule):
            return RuleSet.of(self._config.object_name, rules).examine(patient)
        msg = f"Cannot examine with {type(rules).__name__}"
        raise TypeError(msg)

    def _report(self, patient: Any, ailments: frozenset[Ailment]) -> frozenset[Ailment]:
        logger.info(
            "Examined {}: {} ailment(s)", type(patient).__name__, len(ailments)
        )
        if self._config.log_ailments:
            for ailment in sorted(ailments, key=Ailment.describe):
                logger.debug("Ailment: {}", ailment.describe())
        if ailments and self._config.throw_on_ailment:
            raise AilmentsFound(ailments)
        return ailments
