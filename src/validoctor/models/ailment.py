"""Ailment data model.

An Ailment is the structured report of one failed check. Examination results
are sets of Ailments, so equality and hashing are structural: two failures with
the same rule, property and parameters are the same ailment.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Ailment(BaseModel):
    """One validation failure found in a patient.

    A property of None means the failure concerns the whole object rather
    than any single property of it.
    """

    model_config = ConfigDict(frozen=True)

    rule: str = Field(..., description="Identifier of the failed rule (e.g., 'NOT_NULL')")
    property: str | None = Field(
        default=None,
        description="Property the failure is attributed to, None for whole-object failures",
    )
    params: dict[str, Any] = Field(
        default_factory=dict,
        description="Rule parameters relevant to the failure (e.g., expected bound)",
    )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ailment):
            return NotImplemented
        return (
            self.rule == other.rule
            and self.property == other.property
            and self.params == other.params
        )

    def __hash__(self) -> int:
        # Parameter values may be unhashable; keys are enough to stay consistent with __eq__.
        return hash((self.rule, self.property, frozenset(self.params)))

    def with_property(self, property: str | None) -> Ailment:
        """Return a copy of this ailment attributed to another property."""
        if property == self.property:
            return self
        return Ailment(rule=self.rule, property=property, params=dict(self.params))

    def describe(self) -> str:
        """Human-readable one-liner, e.g. ``age: MIN_VALUE (min=0)``."""
        target = self.property if self.property is not None else "<object>"
        if not self.params:
            return f"{target}: {self.rule}"
        rendered = ", ".join(f"{key}={value!r}" for key, value in sorted(self.params.items()))
        return f"{target}: {self.rule} ({rendered})"
