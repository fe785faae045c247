"""Rules and their composition.

- base: leaf Rule abstraction and PredicateRule
- basic: ready-made leaf rules (not_null, positive, ...)
- property: property-scoped and conditionally gated rules
- reducer: rules sharing one computation across several properties
- rule_set: the composable RuleSet and its algebra
- builder: fluent RuleSet construction
"""

from validoctor.rule.base import PredicateRule, Rule
from validoctor.rule.builder import RuleSetBuilder
from validoctor.rule.context import ExaminationContext
from validoctor.rule.property import (
    AccessorPropertyRule,
    AdaptedObjectRule,
    ConditionalPropertyRule,
    PropertyRule,
    attribute,
    conditional_rule,
    property_rule,
)
from validoctor.rule.reducer import (
    ShadowRule,
    SharedComputationDelegate,
    SharedComputationRule,
)
from validoctor.rule.rule_set import RuleSet

__all__ = [
    "AccessorPropertyRule",
    "AdaptedObjectRule",
    "ConditionalPropertyRule",
    "ExaminationContext",
    "PredicateRule",
    "PropertyRule",
    "Rule",
    "RuleSet",
    "RuleSetBuilder",
    "ShadowRule",
    "SharedComputationDelegate",
    "SharedComputationRule",
    "attribute",
    "conditional_rule",
    "property_rule",
]
