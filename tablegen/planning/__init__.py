"""
Planning package: type-to-generator mapping and batch-mutation planning.

Nothing in this package talks to a database; plans are rendered and executed
by ``tablegen.rendering`` and ``tablegen.executor``.
"""

from tablegen.planning.planner import (
    DeletePlan,
    GenerationPlan,
    InsertPlan,
    MutationPlanner,
    SamplingSelector,
    UpdatePlan,
    chunk_sizes,
    validate_counts,
)
from tablegen.planning.registry import ValueGeneratorRegistry
from tablegen.planning.strings import StringSynthesizer

__all__ = [
    "DeletePlan",
    "GenerationPlan",
    "InsertPlan",
    "MutationPlanner",
    "SamplingSelector",
    "StringSynthesizer",
    "UpdatePlan",
    "ValueGeneratorRegistry",
    "chunk_sizes",
    "validate_counts",
]
