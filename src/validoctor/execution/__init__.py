"""Execution trees of rule batches."""

from validoctor.execution.batch import ExecutionBatch
from validoctor.execution.definition import ExaminationDefinition

__all__ = [
    "ExaminationDefinition",
    "ExecutionBatch",
]
