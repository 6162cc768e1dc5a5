"""
Rendering package: engine-specific translation of generation plans.

``postgres`` renders plans as ``psycopg.sql`` statements; ``python`` evaluates
projections in-process for previews.
"""

from tablegen.rendering.postgres import PostgresRenderer
from tablegen.rendering.python import PythonEvaluator, evaluate_rows

__all__ = ["PostgresRenderer", "PythonEvaluator", "evaluate_rows"]
