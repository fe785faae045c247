"""Pydantic data models shared across validoctor components."""

from validoctor.models.ailment import Ailment

__all__ = [
    "Ailment",
]
