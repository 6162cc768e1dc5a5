from __future__ import annotations

import pytest
from pydantic import ValidationError

from tablegen.domain.models import ColumnCatalog, TypeCategory, classify


@pytest.mark.parametrize(
    "type_name, expected",
    [
        ("DATE", TypeCategory.TEMPORAL),
        ("SECONDDATE", TypeCategory.TEMPORAL),
        ("timestamp without time zone", TypeCategory.TEMPORAL),
        ("NVARCHAR", TypeCategory.CHARACTER),
        ("ALPHANUM", TypeCategory.CHARACTER),
        ("character varying", TypeCategory.CHARACTER),
        ("NCLOB", TypeCategory.CHARACTER),
        ("TINYINT", TypeCategory.SMALL_INTEGER),
        ("integer", TypeCategory.SMALL_INTEGER),
        ("BIGINT", TypeCategory.LARGE_NUMERIC),
        ("SMALLDECIMAL", TypeCategory.LARGE_NUMERIC),
        ("double precision", TypeCategory.LARGE_NUMERIC),
        ("BLOB", TypeCategory.UNSUPPORTED),
        ("BOOLEAN", TypeCategory.UNSUPPORTED),
        ("", TypeCategory.UNSUPPORTED),
    ],
)
def test_classify(type_name: str, expected: TypeCategory) -> None:
    assert classify(type_name) is expected


def test_classify_normalizes_whitespace() -> None:
    assert classify("  Timestamp   with  time zone ") is TypeCategory.TEMPORAL


def test_integer_compatibility(make_column) -> None:
    assert make_column("a", 1, "BIGINT").is_integer_compatible
    assert make_column("a", 1, "smallint").is_integer_compatible
    assert not make_column("a", 1, "DECIMAL").is_integer_compatible
    assert not make_column("a", 1, "TIMESTAMP").is_integer_compatible


def test_descriptor_is_immutable(make_column) -> None:
    column = make_column("a", 1, "INTEGER")
    with pytest.raises(ValidationError):
        column.name = "b"  # type: ignore[misc]


def test_descriptor_rejects_zero_position(make_column) -> None:
    with pytest.raises(ValidationError):
        make_column("a", 0, "INTEGER")


def test_catalog_orders_by_position(wide_catalog: ColumnCatalog) -> None:
    positions = [c.position for c in wide_catalog.columns]
    assert positions == sorted(positions)
    assert wide_catalog.columns[0].name == "id"


def test_catalog_key_helpers(make_column) -> None:
    catalog = ColumnCatalog.of(
        "s",
        "t",
        [
            make_column("ts", 1, "TIMESTAMP", is_primary_key=True),
            make_column("n", 2, "INTEGER", is_primary_key=True),
            make_column("v", 3, "VARCHAR", length=3),
        ],
    )
    assert catalog.qualified_name == "s.t"
    assert [c.name for c in catalog.primary_key] == ["ts", "n"]
    assert [c.name for c in catalog.non_key_columns] == ["v"]
    assert [c.name for c in catalog.integer_key_columns] == ["n"]
    # Only the first-positioned key column is used for sampling.
    assert catalog.sampling_key is not None
    assert catalog.sampling_key.name == "ts"


def test_catalog_without_key(make_column) -> None:
    catalog = ColumnCatalog.of("s", "t", [make_column("a", 1, "INTEGER")])
    assert catalog.sampling_key is None
    assert catalog.integer_key_columns == []
