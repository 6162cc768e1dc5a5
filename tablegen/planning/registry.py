"""
Column-type to generation-rule mapping.

``ValueGeneratorRegistry.expression_for`` is a pure function of the column, the
string synthesizer and the request's sequence: primary-key columns are always
sequence-derived, every other supported column gets a uniformly random value
within a type-appropriate range.
"""
from __future__ import annotations

from typing import assert_never

from tablegen.domain.expressions import (
    Expression,
    RandomDecimal,
    RandomInteger,
    RandomTimeOffset,
    SequenceRef,
    SequenceTimeOffset,
    SequenceValue,
    Truncated,
)
from tablegen.domain.models import ColumnDescriptor, TypeCategory, normalize_type_name
from tablegen.errors import UnsupportedColumnType
from tablegen.planning.strings import StringSynthesizer

TEMPORAL_SPAN_SECONDS = 100_000_000
TEMPORAL_KEY_STEP_SECONDS = 1
SMALL_INTEGER_UPPER = 1_000_000
LARGE_NUMERIC_UPPER = 1000

# Narrow integer types would overflow on [0, 1_000_000).
_INTEGER_CAPACITY = {
    "TINYINT": 256,
    "SMALLINT": 32_768,
    "INT2": 32_768,
}


class ValueGeneratorRegistry:
    """Maps a column descriptor to its generation expression."""

    def __init__(
        self,
        temporal_span_seconds: int = TEMPORAL_SPAN_SECONDS,
        temporal_key_step_seconds: int = TEMPORAL_KEY_STEP_SECONDS,
        small_integer_upper: int = SMALL_INTEGER_UPPER,
        large_numeric_upper: int = LARGE_NUMERIC_UPPER,
    ) -> None:
        self.temporal_span_seconds = temporal_span_seconds
        self.temporal_key_step_seconds = temporal_key_step_seconds
        self.small_integer_upper = small_integer_upper
        self.large_numeric_upper = large_numeric_upper

    def expression_for(
        self,
        column: ColumnDescriptor,
        string_synth: StringSynthesizer,
        sequence: SequenceRef,
    ) -> Expression:
        """
        Return the generation expression for ``column``.

        Raises
        ------
        UnsupportedColumnType
            If the column's declared type has no generation rule.
        """
        category = column.category
        if category is TypeCategory.UNSUPPORTED:
            raise UnsupportedColumnType(column.type_name, column.name)

        if column.is_primary_key:
            if category is TypeCategory.TEMPORAL:
                return SequenceTimeOffset(sequence, self.temporal_key_step_seconds)
            return SequenceValue(sequence)

        if category is TypeCategory.TEMPORAL:
            return RandomTimeOffset(self.temporal_span_seconds)
        if category is TypeCategory.CHARACTER:
            generated = string_synth.build()
            if column.length is None:
                return generated
            return Truncated(generated, column.length)
        if category is TypeCategory.SMALL_INTEGER:
            capacity = _INTEGER_CAPACITY.get(normalize_type_name(column.type_name))
            upper = min(self.small_integer_upper, capacity or self.small_integer_upper)
            return RandomInteger(upper)
        if category is TypeCategory.LARGE_NUMERIC:
            # Truncated, not rounded: rounding could reach the exclusive upper bound.
            return RandomDecimal(self.large_numeric_upper, column.scale or 0)
        assert_never(category)


__all__ = [
    "ValueGeneratorRegistry",
    "TEMPORAL_SPAN_SECONDS",
    "TEMPORAL_KEY_STEP_SECONDS",
    "SMALL_INTEGER_UPPER",
    "LARGE_NUMERIC_UPPER",
]
