"""
Candidate-row sources for chunked inserts.

Exports the row source protocol, the concrete sources, and a small registry
used by the executor and the CLI.
"""

from __future__ import annotations

from typing import Callable, Dict, List

from tablegen.row_sources.abstract import AbstractRowSource, RowSource
from tablegen.row_sources.cross_join import CrossJoinRowSource
from tablegen.row_sources.series import SeriesRowSource


def _row_source_factories() -> Dict[str, Callable[[], RowSource]]:
    """Registry of available row sources."""
    return {
        "series": lambda: SeriesRowSource(),
        "cross_join": lambda: CrossJoinRowSource(),
    }


def available_row_sources() -> List[str]:
    """List available row source names."""
    return sorted(_row_source_factories().keys())


def resolve_row_source(name: str) -> RowSource:
    factories = _row_source_factories()
    if name not in factories:
        raise ValueError(f"Unknown row source '{name}'. Available: {', '.join(factories)}")
    return factories[name]()


__all__ = [
    "AbstractRowSource",
    "CrossJoinRowSource",
    "RowSource",
    "SeriesRowSource",
    "available_row_sources",
    "resolve_row_source",
]
