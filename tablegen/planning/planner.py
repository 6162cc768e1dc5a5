"""
Batch-mutation planner.

Turns a ``ColumnCatalog`` and the requested insert/update/delete volumes into
engine-neutral plans:

- ``InsertPlan``: one projection (an expression per column, in position order)
  reused unchanged for every chunk, plus the chunk layout.
- ``UpdatePlan``: a SET projection over the non-key columns and the sampling
  selector picking the rows to rewrite.
- ``DeletePlan``: the sampling selector picking the rows to remove.

All validation happens here, so every ``GenerationError`` is raised before a
single statement reaches the database.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Optional, Tuple

from tablegen.domain.expressions import ColumnExpression, SequenceRef
from tablegen.domain.models import ColumnCatalog, ColumnDescriptor
from tablegen.errors import InvalidArgument, MissingPrimaryKey
from tablegen.planning.registry import ValueGeneratorRegistry
from tablegen.planning.strings import StringSynthesizer
from tablegen.utils.logging import get_logger

DEFAULT_CHUNK_SIZE = 1_000_000

log = get_logger(__name__)


def chunk_sizes(requested_count: int, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Tuple[int, ...]:
    """
    Split ``requested_count`` into full chunks plus a trailing remainder.

    >>> chunk_sizes(2_500_000)
    (1000000, 1000000, 500000)
    """
    if requested_count < 0:
        raise InvalidArgument("insert_count", requested_count)
    if chunk_size <= 0:
        raise InvalidArgument("chunk_size", chunk_size, "must be > 0")
    full, remainder = divmod(requested_count, chunk_size)
    sizes = [chunk_size] * full
    if remainder:
        sizes.append(remainder)
    return tuple(sizes)


def validate_counts(
    insert_count: int, max_string_size: int, delete_count: int, update_count: int
) -> None:
    """Reject negative request parameters."""
    for name, value in (
        ("insert_count", insert_count),
        ("max_string_size", max_string_size),
        ("delete_count", delete_count),
        ("update_count", update_count),
    ):
        if value < 0:
            raise InvalidArgument(name, value)


def _new_sequence() -> SequenceRef:
    return SequenceRef(f"tablegen_seq_{uuid.uuid4().hex[:12]}")


@dataclass(frozen=True)
class SamplingSelector:
    """
    Pick ``limit`` rows at random: rank rows by ``row_number()`` over
    ``random() * key`` and keep the first ``limit`` ranks.
    """

    key: ColumnDescriptor
    limit: int

    @property
    def is_empty(self) -> bool:
        return self.limit == 0


@dataclass(frozen=True)
class InsertPlan:
    catalog: ColumnCatalog
    projection: Tuple[ColumnExpression, ...]
    chunk_sizes: Tuple[int, ...]
    sequence: Optional[SequenceRef] = None

    @property
    def chunk_count(self) -> int:
        return len(self.chunk_sizes)

    @property
    def total_rows(self) -> int:
        return sum(self.chunk_sizes)

    @property
    def is_empty(self) -> bool:
        return not self.chunk_sizes


@dataclass(frozen=True)
class UpdatePlan:
    catalog: ColumnCatalog
    assignments: Tuple[ColumnExpression, ...]
    selector: SamplingSelector

    @property
    def is_empty(self) -> bool:
        return self.selector.is_empty or not self.assignments


@dataclass(frozen=True)
class DeletePlan:
    catalog: ColumnCatalog
    selector: SamplingSelector

    @property
    def is_empty(self) -> bool:
        return self.selector.is_empty


@dataclass(frozen=True)
class GenerationPlan:
    """Insert, delete and update plans for one request, executed in that order."""

    insert: InsertPlan
    delete: DeletePlan
    update: UpdatePlan

    @property
    def is_empty(self) -> bool:
        return self.insert.is_empty and self.delete.is_empty and self.update.is_empty


class MutationPlanner:
    """
    Central orchestrator of the planning phase.

    Parameters
    ----------
    registry : ValueGeneratorRegistry, optional
        Column-to-expression mapping. Defaults to the standard value ranges.
    chunk_size : int
        Maximum rows per insert chunk (and per commit).
    """

    def __init__(
        self,
        registry: Optional[ValueGeneratorRegistry] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if chunk_size <= 0:
            raise InvalidArgument("chunk_size", chunk_size, "must be > 0")
        self.registry = registry or ValueGeneratorRegistry()
        self.chunk_size = chunk_size

    def sampling_key(self, catalog: ColumnCatalog) -> ColumnDescriptor:
        """
        Validate the primary key and return the column used for row targeting.

        Only the first-positioned key column is used; the rest of a composite
        key is ignored.
        """
        key = catalog.sampling_key
        if key is None:
            raise MissingPrimaryKey(catalog.qualified_name)
        if not catalog.integer_key_columns:
            raise MissingPrimaryKey(
                catalog.qualified_name, "no integer-compatible primary-key column"
            )
        return key

    def _projection(
        self,
        columns: list[ColumnDescriptor],
        max_string_size: int,
        sequence: SequenceRef,
    ) -> Tuple[ColumnExpression, ...]:
        string_synth = StringSynthesizer(max_string_size)
        return tuple(
            ColumnExpression(column, self.registry.expression_for(column, string_synth, sequence))
            for column in columns
        )

    def check_columns(self, catalog: ColumnCatalog, max_string_size: int) -> None:
        """
        Resolve a rule for every column so an unsupported type aborts the
        whole request, including delete-only ones.
        """
        self._projection(list(catalog.columns), max_string_size, _new_sequence())

    def plan_insert(
        self, catalog: ColumnCatalog, requested_count: int, max_string_size: int
    ) -> InsertPlan:
        sizes = chunk_sizes(requested_count, self.chunk_size)
        if not sizes:
            return InsertPlan(catalog=catalog, projection=(), chunk_sizes=())

        self.sampling_key(catalog)
        sequence = _new_sequence()
        projection = self._projection(list(catalog.columns), max_string_size, sequence)
        uses_sequence = any(item.uses_sequence for item in projection)
        log.debug(
            "Insert plan built",
            extra={
                "table": catalog.qualified_name,
                "rows": requested_count,
                "chunks": len(sizes),
            },
        )
        return InsertPlan(
            catalog=catalog,
            projection=projection,
            chunk_sizes=sizes,
            sequence=sequence if uses_sequence else None,
        )

    def plan_sampling(self, key: ColumnDescriptor, n: int, name: str = "count") -> SamplingSelector:
        if n < 0:
            raise InvalidArgument(name, n)
        return SamplingSelector(key=key, limit=n)

    def plan_delete(self, catalog: ColumnCatalog, n: int) -> DeletePlan:
        if n < 0:
            raise InvalidArgument("delete_count", n)
        key = self.sampling_key(catalog)
        return DeletePlan(catalog=catalog, selector=self.plan_sampling(key, n, "delete_count"))

    def plan_update(self, catalog: ColumnCatalog, n: int, max_string_size: int) -> UpdatePlan:
        if n < 0:
            raise InvalidArgument("update_count", n)
        key = self.sampling_key(catalog)
        selector = self.plan_sampling(key, n, "update_count")
        if selector.is_empty:
            return UpdatePlan(catalog=catalog, assignments=(), selector=selector)

        # Key columns are excluded, so no sequence is ever consumed here.
        assignments = self._projection(catalog.non_key_columns, max_string_size, _new_sequence())
        if not assignments:
            log.warning(
                "Update skipped: table has no non-key columns",
                extra={"table": catalog.qualified_name},
            )
        return UpdatePlan(catalog=catalog, assignments=assignments, selector=selector)

    def plan(
        self,
        catalog: ColumnCatalog,
        insert_count: int,
        max_string_size: int,
        delete_count: int,
        update_count: int,
    ) -> GenerationPlan:
        """Validate every argument, then build all three plans."""
        validate_counts(insert_count, max_string_size, delete_count, update_count)
        self.sampling_key(catalog)
        self.check_columns(catalog, max_string_size)

        return GenerationPlan(
            insert=self.plan_insert(catalog, insert_count, max_string_size),
            delete=self.plan_delete(catalog, delete_count),
            update=self.plan_update(catalog, update_count, max_string_size),
        )


__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "chunk_sizes",
    "validate_counts",
    "SamplingSelector",
    "InsertPlan",
    "UpdatePlan",
    "DeletePlan",
    "GenerationPlan",
    "MutationPlanner",
]
