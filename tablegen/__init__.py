"""
tablegen - schema-driven synthetic workloads for relational tables.

Given a table's column metadata, tablegen produces randomized INSERT, UPDATE
and DELETE workloads scaled to caller-specified volumes:

- Column types map to value-generation rules (random integers, bounded
  strings, time offsets, scaled decimals; sequence values for primary keys)
- Inserts run as set-based statements in committed chunks
- Updates and deletes target rows picked by randomized ranking on the key

Plans are engine-neutral; the PostgreSQL renderer and executor turn them into
statements.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from tablegen.config import Settings, get_settings
from tablegen.domain.models import ColumnCatalog, ColumnDescriptor, TypeCategory
from tablegen.errors import (
    GenerationError,
    InvalidArgument,
    MissingPrimaryKey,
    UnknownTable,
    UnsupportedColumnType,
)
from tablegen.executor import BatchExecutor, GenerationResult
from tablegen.generator import generate
from tablegen.planning import MutationPlanner, StringSynthesizer, ValueGeneratorRegistry
from tablegen.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Entry point
    "generate",
    # Domain
    "ColumnCatalog",
    "ColumnDescriptor",
    "TypeCategory",
    # Planning and execution
    "MutationPlanner",
    "StringSynthesizer",
    "ValueGeneratorRegistry",
    "BatchExecutor",
    "GenerationResult",
    # Errors
    "GenerationError",
    "InvalidArgument",
    "MissingPrimaryKey",
    "UnknownTable",
    "UnsupportedColumnType",
    # Logging
    "configure_logging",
    "get_logger",
]
