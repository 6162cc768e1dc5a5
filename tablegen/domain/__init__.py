"""
Domain package for tablegen.

Exports the column model, type categories and expression descriptors shared by
the planner and the renderers. Keep this package free of database I/O.
"""

from tablegen.domain.expressions import ColumnExpression, Expression, SequenceRef
from tablegen.domain.models import ColumnCatalog, ColumnDescriptor, TypeCategory, classify

__all__ = [
    "ColumnCatalog",
    "ColumnDescriptor",
    "ColumnExpression",
    "Expression",
    "SequenceRef",
    "TypeCategory",
    "classify",
]
