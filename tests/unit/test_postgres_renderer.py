from __future__ import annotations

from typing import Any

import pytest
from psycopg import sql

from tablegen.domain.expressions import (
    RandomDecimal,
    RandomInteger,
    RandomString,
    RandomTimeOffset,
    SequenceRef,
    SequenceTimeOffset,
    SequenceValue,
    Truncated,
)
from tablegen.domain.models import ColumnCatalog
from tablegen.planning.planner import MutationPlanner, SamplingSelector
from tablegen.rendering.postgres import PostgresRenderer
from tablegen.row_sources import SeriesRowSource

SEQUENCE = SequenceRef("tablegen_seq_abc")


def flatten(composable: Any) -> str:
    """Approximate SQL text without a connection (identifiers double-quoted, literals repr'd)."""
    if isinstance(composable, sql.Composed):
        return "".join(flatten(part) for part in composable._obj)
    if isinstance(composable, sql.SQL):
        return composable._obj
    if isinstance(composable, sql.Identifier):
        return ".".join(f'"{name}"' for name in composable._obj)
    if isinstance(composable, sql.Literal):
        return repr(composable._obj)
    raise TypeError(composable)


@pytest.fixture
def renderer() -> PostgresRenderer:
    return PostgresRenderer()


@pytest.mark.parametrize(
    "expression, expected",
    [
        (SequenceValue(SEQUENCE), "nextval('tablegen_seq_abc')"),
        (RandomInteger(1_000_000), "floor(random() * 1000000)::integer"),
        (RandomDecimal(1000, 2), "trunc((random() * 1000)::numeric, 2)"),
        (
            RandomTimeOffset(100_000_000),
            "(now() - make_interval(secs => floor(random() * 100000000)))",
        ),
        (
            SequenceTimeOffset(SEQUENCE, 1),
            "(now() - make_interval(secs => (nextval('tablegen_seq_abc') * 1)::double precision))",
        ),
        (RandomString(0), "''"),
    ],
)
def test_expression_rendering(renderer, expression, expected: str) -> None:
    assert flatten(renderer.expression(expression)) == expected


def test_random_string_repeats_one_draw_per_character(renderer) -> None:
    text = flatten(renderer.expression(RandomString(3)))
    assert text.count("substr(") == 3
    assert text.count(" || ") == 2
    assert "floor(random() * 53)::integer + 1" in text


def test_truncated_wraps_in_left(renderer) -> None:
    text = flatten(renderer.expression(Truncated(RandomString(4), 2)))
    assert text.startswith("left((substr(")
    assert text.endswith(", 2)")


def test_unknown_expression_raises(renderer) -> None:
    with pytest.raises(TypeError):
        renderer.expression(object())  # type: ignore[arg-type]


def test_insert_statement(renderer, t1s_catalog: ColumnCatalog) -> None:
    plan = MutationPlanner().plan_insert(t1s_catalog, 2, 3)
    text = flatten(renderer.insert(plan, SeriesRowSource().rows_clause(2)))
    assert text.startswith('INSERT INTO "TEST"."T1S" ("A", "B", "C", "D") SELECT nextval(')
    assert text.endswith("FROM generate_series(1, 2) AS g(n)")
    assert "left(" in text


def test_delete_statement_samples_by_first_key(renderer, t1s_catalog: ColumnCatalog) -> None:
    plan = MutationPlanner().plan_delete(t1s_catalog, 5)
    text = flatten(renderer.delete(plan))
    assert text == (
        'DELETE FROM "TEST"."T1S" WHERE "A" IN ('
        'SELECT "A" FROM (SELECT "A", row_number() OVER (ORDER BY random() * "A") AS rn '
        'FROM "TEST"."T1S") AS ranked WHERE ranked.rn <= 5)'
    )


def test_sampling_on_temporal_key_ranks_by_random_alone(renderer, make_column) -> None:
    catalog = ColumnCatalog.of(
        "s",
        "t",
        [
            make_column("ts", 1, "TIMESTAMP", is_primary_key=True),
            make_column("n", 2, "INTEGER", is_primary_key=True),
        ],
    )
    text = flatten(renderer.sampled_keys(catalog, SamplingSelector(catalog.sampling_key, 2)))
    assert "ORDER BY random()) AS rn" in text
    assert "ranked.rn <= 2" in text


def test_update_statement_sets_non_key_columns(renderer, t1s_catalog: ColumnCatalog) -> None:
    plan = MutationPlanner().plan_update(t1s_catalog, 1, 3)
    text = flatten(renderer.update(plan))
    assert text.startswith('UPDATE "TEST"."T1S" AS t SET "B" = left(')
    assert '"A" =' not in text.split(" FROM (")[0]
    assert text.endswith('AS s WHERE t."A" = s."A"')
    assert "ranked.rn <= 1" in text


def test_sequence_lifecycle_statements(renderer, t1s_catalog: ColumnCatalog) -> None:
    assert flatten(renderer.create_sequence(SEQUENCE, 42)) == (
        'CREATE TEMPORARY SEQUENCE "tablegen_seq_abc" START WITH 42'
    )
    assert flatten(renderer.drop_sequence(SEQUENCE)) == 'DROP SEQUENCE IF EXISTS "tablegen_seq_abc"'
    assert flatten(renderer.max_key(t1s_catalog, t1s_catalog.integer_key_columns)) == (
        'SELECT GREATEST(COALESCE(MAX("A"), 0)) FROM "TEST"."T1S"'
    )
