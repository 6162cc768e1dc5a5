"""
Domain models for tablegen.

Defines the column descriptor read from the catalog, the closed set of type
categories that drive value generation, and the per-table ``ColumnCatalog``
that the planner consumes.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field


class TypeCategory(str, Enum):
    """Generation-relevant classification of a declared column type."""

    TEMPORAL = "temporal"
    CHARACTER = "character"
    SMALL_INTEGER = "small_integer"
    LARGE_NUMERIC = "large_numeric"
    UNSUPPORTED = "unsupported"


_CATEGORY_MEMBERS = {
    TypeCategory.TEMPORAL: (
        "DATE",
        "TIME",
        "SECONDDATE",
        "TIMESTAMP",
        "TIME WITHOUT TIME ZONE",
        "TIME WITH TIME ZONE",
        "TIMESTAMP WITHOUT TIME ZONE",
        "TIMESTAMP WITH TIME ZONE",
    ),
    TypeCategory.CHARACTER: (
        "NVARCHAR",
        "VARCHAR",
        "ALPHANUM",
        "SHORTTEXT",
        "NCLOB",
        "CLOB",
        "CHARACTER VARYING",
        "CHARACTER",
        "CHAR",
        "TEXT",
    ),
    TypeCategory.SMALL_INTEGER: ("INTEGER", "TINYINT", "SMALLINT", "INT", "INT2", "INT4"),
    TypeCategory.LARGE_NUMERIC: (
        "BIGINT",
        "SMALLDECIMAL",
        "DECIMAL",
        "REAL",
        "DOUBLE",
        "NUMERIC",
        "DOUBLE PRECISION",
        "FLOAT",
        "INT8",
    ),
}

TYPE_CATEGORIES = {
    type_name: category
    for category, members in _CATEGORY_MEMBERS.items()
    for type_name in members
}

INTEGER_COMPATIBLE_TYPES = frozenset(
    {"INTEGER", "TINYINT", "SMALLINT", "BIGINT", "INT", "INT2", "INT4", "INT8"}
)


def normalize_type_name(type_name: str) -> str:
    return " ".join(type_name.strip().upper().split())


def classify(type_name: str) -> TypeCategory:
    """Map a declared type name to its category (``UNSUPPORTED`` when unknown)."""
    return TYPE_CATEGORIES.get(normalize_type_name(type_name), TypeCategory.UNSUPPORTED)


class ColumnDescriptor(BaseModel):
    """
    One column of the target table, as read from the metadata catalog.
    """

    name: str = Field(..., min_length=1, description="Column identifier.")
    position: int = Field(..., ge=1, description="1-based ordinal; defines projection order.")
    type_name: str = Field(..., description="Declared type name as reported by the catalog.")
    length: Optional[int] = Field(
        None, ge=0, description="Max character length (character types only)."
    )
    scale: Optional[int] = Field(
        None, ge=0, description="Digits after the decimal point (numeric types only)."
    )
    is_primary_key: bool = Field(False, description="Part of the table's primary key.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    @property
    def category(self) -> TypeCategory:
        return classify(self.type_name)

    @property
    def is_integer_compatible(self) -> bool:
        return normalize_type_name(self.type_name) in INTEGER_COMPATIBLE_TYPES


class ColumnCatalog(BaseModel):
    """
    Ordered column descriptors of a single table.

    Columns are kept sorted by ``position`` regardless of the order they were
    supplied in.
    """

    schema_name: str
    table_name: str
    columns: tuple[ColumnDescriptor, ...] = ()

    model_config = {"frozen": True}

    @classmethod
    def of(
        cls, schema_name: str, table_name: str, columns: Sequence[ColumnDescriptor]
    ) -> "ColumnCatalog":
        ordered = tuple(sorted(columns, key=lambda c: c.position))
        return cls(schema_name=schema_name, table_name=table_name, columns=ordered)

    @property
    def qualified_name(self) -> str:
        return f"{self.schema_name}.{self.table_name}"

    @property
    def primary_key(self) -> List[ColumnDescriptor]:
        return [c for c in self.columns if c.is_primary_key]

    @property
    def non_key_columns(self) -> List[ColumnDescriptor]:
        return [c for c in self.columns if not c.is_primary_key]

    @property
    def sampling_key(self) -> Optional[ColumnDescriptor]:
        """First-positioned primary-key column; later key columns are ignored."""
        keys = self.primary_key
        return keys[0] if keys else None

    @property
    def integer_key_columns(self) -> List[ColumnDescriptor]:
        return [c for c in self.primary_key if c.is_integer_compatible]


__all__ = [
    "TypeCategory",
    "TYPE_CATEGORIES",
    "INTEGER_COMPATIBLE_TYPES",
    "classify",
    "normalize_type_name",
    "ColumnDescriptor",
    "ColumnCatalog",
]
