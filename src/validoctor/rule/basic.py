"""Ready-made leaf rules for common checks.

Every factory returns a fresh PredicateRule. Except for not_null() and
is_null(), the rules treat None as a failure so they can be used on optional
properties without an extra guard; combine them with not_null() when the
missing value should be reported separately.
"""

from __future__ import annotations

import re
from collections.abc import Collection, Sized
from enum import StrEnum
from typing import Any

from validoctor.rule.base import PredicateRule


class RuleId(StrEnum):
    """Identifiers reported by the built-in rules."""

    NOT_NULL = "NOT_NULL"
    NULL = "NULL"
    NOT_EMPTY = "NOT_EMPTY"
    POSITIVE = "POSITIVE"
    NON_NEGATIVE = "NON_NEGATIVE"
    MIN_VALUE = "MIN_VALUE"
    MAX_VALUE = "MAX_VALUE"
    IN_RANGE = "IN_RANGE"
    MAX_LENGTH = "MAX_LENGTH"
    MATCHES = "MATCHES"
    ONE_OF = "ONE_OF"


def not_null() -> PredicateRule[Any]:
    return PredicateRule(RuleId.NOT_NULL, lambda value: value is not None)


def is_null() -> PredicateRule[Any]:
    return PredicateRule(RuleId.NULL, lambda value: value is None)


def not_empty() -> PredicateRule[Sized]:
    """Fail on None and on any sized value of length zero (strings, lists, dicts)."""
    return PredicateRule(RuleId.NOT_EMPTY, lambda value: value is not None and len(value) > 0)


def positive() -> PredicateRule[Any]:
    return PredicateRule(RuleId.POSITIVE, lambda value: value is not None and value > 0)


def non_negative() -> PredicateRule[Any]:
    return PredicateRule(RuleId.NON_NEGATIVE, lambda value: value is not None and value >= 0)


def min_value(minimum: Any) -> PredicateRule[Any]:
    return PredicateRule(
        RuleId.MIN_VALUE,
        lambda value: value is not None and value >= minimum,
        {"min": minimum},
    )


def max_value(maximum: Any) -> PredicateRule[Any]:
    return PredicateRule(
        RuleId.MAX_VALUE,
        lambda value: value is not None and value <= maximum,
        {"max": maximum},
    )


def in_range(minimum: Any, maximum: Any) -> PredicateRule[Any]:
    """Inclusive range check on both ends."""
    if minimum > maximum:
        msg = f"Invalid range: min {minimum!r} is greater than max {maximum!r}"
        raise ValueError(msg)
    return PredicateRule(
        RuleId.IN_RANGE,
        lambda value: value is not None and minimum <= value <= maximum,
        {"min": minimum, "max": maximum},
    )


def max_length(length: int) -> PredicateRule[Sized]:
    return PredicateRule(
        RuleId.MAX_LENGTH,
        lambda value: value is not None and len(value) <= length,
        {"max": length},
    )


def matches(pattern: str) -> PredicateRule[str]:
    """Full-match a string against a regular expression."""
    compiled = re.compile(pattern)
    return PredicateRule(
        RuleId.MATCHES,
        lambda value: value is not None and compiled.fullmatch(value) is not None,
        {"pattern": pattern},
    )


def one_of(allowed: Collection[Any]) -> PredicateRule[Any]:
    options = frozenset(allowed)
    return PredicateRule(
        RuleId.ONE_OF,
        lambda value: value in options,
        {"allowed": sorted(options, key=repr)},
    )
