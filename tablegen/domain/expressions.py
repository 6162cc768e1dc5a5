"""
Generation-expression descriptors.

Each class describes one value-generation rule. Descriptors are plain values:
they carry no engine syntax and draw no randomness themselves. A renderer
(``tablegen.rendering``) turns them into SQL or evaluates them in-process, once
per generated row.
"""
from __future__ import annotations

import string
from dataclasses import dataclass
from typing import Union

from tablegen.domain.models import ColumnDescriptor

ALPHABET = string.ascii_lowercase + string.ascii_uppercase + " "


@dataclass(frozen=True)
class SequenceRef:
    """Request-scoped source of strictly increasing integers."""

    name: str


@dataclass(frozen=True)
class SequenceValue:
    """Next value of the sequence."""

    sequence: SequenceRef


@dataclass(frozen=True)
class SequenceTimeOffset:
    """``now - next_sequence_value * step_seconds``."""

    sequence: SequenceRef
    step_seconds: int


@dataclass(frozen=True)
class RandomTimeOffset:
    """``now - uniform_random(0, span_seconds)`` seconds."""

    span_seconds: int


@dataclass(frozen=True)
class RandomString:
    """Exactly ``length`` independent uniform draws over ``alphabet``."""

    length: int
    alphabet: str = ALPHABET


@dataclass(frozen=True)
class Truncated:
    """Left-most ``length`` characters of ``inner``."""

    inner: RandomString
    length: int


@dataclass(frozen=True)
class RandomInteger:
    """Uniform integer in ``[0, upper)``."""

    upper: int


@dataclass(frozen=True)
class RandomDecimal:
    """Uniform value in ``[0, upper)`` rounded to ``scale`` fractional digits."""

    upper: int
    scale: int


Expression = Union[
    SequenceValue,
    SequenceTimeOffset,
    RandomTimeOffset,
    RandomString,
    Truncated,
    RandomInteger,
    RandomDecimal,
]


@dataclass(frozen=True)
class ColumnExpression:
    """A generation expression bound to its target column."""

    column: ColumnDescriptor
    expression: Expression

    @property
    def uses_sequence(self) -> bool:
        return isinstance(self.expression, (SequenceValue, SequenceTimeOffset))


def describe(expression: Expression) -> str:
    """Human-readable summary of a rule (used by the CLI plan view)."""
    if isinstance(expression, SequenceValue):
        return f"nextval({expression.sequence.name})"
    if isinstance(expression, SequenceTimeOffset):
        return f"now - nextval({expression.sequence.name}) * {expression.step_seconds}s"
    if isinstance(expression, RandomTimeOffset):
        return f"now - random(0, {expression.span_seconds:,})s"
    if isinstance(expression, Truncated):
        return f"left({describe(expression.inner)}, {expression.length})"
    if isinstance(expression, RandomString):
        return f"random string[{expression.length}]"
    if isinstance(expression, RandomInteger):
        return f"random int [0, {expression.upper:,})"
    if isinstance(expression, RandomDecimal):
        return f"round(random [0, {expression.upper:,}), {expression.scale})"
    raise TypeError(f"Unknown expression descriptor: {expression!r}")


__all__ = [
    "ALPHABET",
    "SequenceRef",
    "SequenceValue",
    "SequenceTimeOffset",
    "RandomTimeOffset",
    "RandomString",
    "Truncated",
    "RandomInteger",
    "RandomDecimal",
    "Expression",
    "ColumnExpression",
    "describe",
]
