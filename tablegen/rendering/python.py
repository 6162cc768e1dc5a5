"""
In-process evaluation of generation expressions.

Mirrors the semantics of the PostgreSQL renderer (alphabet, ranges, truncation,
sequence offsets) so a projection can be previewed without touching the
database.

Usage:
    from tablegen.rendering.python import evaluate_rows

    rows = evaluate_rows(plan.projection, count=5, seed=42)
"""

from __future__ import annotations

import itertools
import math
import random
from datetime import UTC, datetime, timedelta
from decimal import ROUND_DOWN, Decimal
from typing import Any, Dict, Iterator, List, Optional, Sequence

from tablegen.domain.expressions import (
    ColumnExpression,
    Expression,
    RandomDecimal,
    RandomInteger,
    RandomString,
    RandomTimeOffset,
    SequenceTimeOffset,
    SequenceValue,
    Truncated,
)
from tablegen.domain.models import normalize_type_name


class PythonEvaluator:
    """
    Evaluate expression descriptors with a local RNG and local sequences.

    Each named sequence starts at ``sequence_start`` and advances by one per
    evaluation, like a database sequence.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        now: Optional[datetime] = None,
        sequence_start: int = 1,
    ) -> None:
        self.rng = rng or random.Random()
        self.now = now or datetime.now(UTC)
        self.sequence_start = sequence_start
        self._sequences: Dict[str, Iterator[int]] = {}

    def _nextval(self, name: str) -> int:
        counter = self._sequences.setdefault(name, itertools.count(self.sequence_start))
        return next(counter)

    def evaluate(self, expression: Expression) -> Any:
        if isinstance(expression, SequenceValue):
            return self._nextval(expression.sequence.name)
        if isinstance(expression, SequenceTimeOffset):
            offset = self._nextval(expression.sequence.name) * expression.step_seconds
            return self.now - timedelta(seconds=offset)
        if isinstance(expression, RandomTimeOffset):
            offset = math.floor(self.rng.random() * expression.span_seconds)
            return self.now - timedelta(seconds=offset)
        if isinstance(expression, Truncated):
            return self.evaluate(expression.inner)[: expression.length]
        if isinstance(expression, RandomString):
            return "".join(self.rng.choice(expression.alphabet) for _ in range(expression.length))
        if isinstance(expression, RandomInteger):
            return math.floor(self.rng.random() * expression.upper)
        if isinstance(expression, RandomDecimal):
            value = Decimal(repr(self.rng.random() * expression.upper))
            return value.quantize(Decimal(1).scaleb(-expression.scale), rounding=ROUND_DOWN)
        raise TypeError(f"Unknown expression descriptor: {expression!r}")

    def evaluate_row(self, projection: Sequence[ColumnExpression]) -> Dict[str, Any]:
        row: Dict[str, Any] = {}
        for item in projection:
            value = self.evaluate(item.expression)
            if isinstance(value, datetime):
                value = _coerce_temporal(value, item.column.type_name)
            row[item.column.name] = value
        return row


def _coerce_temporal(value: datetime, type_name: str) -> Any:
    type_name = normalize_type_name(type_name)
    if type_name == "DATE":
        return value.date()
    if type_name.startswith("TIME") and not type_name.startswith("TIMESTAMP"):
        return value.time()
    return value


def evaluate_rows(
    projection: Sequence[ColumnExpression],
    count: int,
    seed: Optional[int] = None,
    now: Optional[datetime] = None,
    sequence_start: int = 1,
) -> List[Dict[str, Any]]:
    """Evaluate ``projection`` ``count`` times and return the rows as dicts."""
    evaluator = PythonEvaluator(random.Random(seed), now=now, sequence_start=sequence_start)
    return [evaluator.evaluate_row(projection) for _ in range(count)]


__all__ = ["PythonEvaluator", "evaluate_rows"]
