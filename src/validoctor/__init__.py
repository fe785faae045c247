"""Validoctor: composable validation producing complete ailment reports.

Typical use::

    from validoctor import RuleSet, Validoctor
    from validoctor.rule.basic import not_null, positive

    rules = RuleSet.builder().property("name", not_null()).property("age", positive()).build()
    ailments = Validoctor().examine({"name": None, "age": -5}, rules)
"""

from validoctor.config import ValidoctorConfig
from validoctor.examination import AilmentsFound, Validoctor
from validoctor.execution import ExaminationDefinition, ExecutionBatch
from validoctor.models import Ailment
from validoctor.rule import (
    ConditionalPropertyRule,
    PredicateRule,
    PropertyRule,
    Rule,
    RuleSet,
    SharedComputationRule,
)

__version__ = "0.1.0"

__all__ = [
    "Ailment",
    "AilmentsFound",
    "ConditionalPropertyRule",
    "ExaminationDefinition",
    "ExecutionBatch",
    "PredicateRule",
    "PropertyRule",
    "Rule",
    "RuleSet",
    "SharedComputationRule",
    "Validoctor",
    "ValidoctorConfig",
    "__version__",
]
