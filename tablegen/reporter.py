from __future__ import annotations

from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from tablegen.domain.expressions import describe
from tablegen.executor import GenerationResult
from tablegen.planning.planner import GenerationPlan


def print_plan(plan: GenerationPlan, console: Optional[Console] = None) -> None:
    """
    Render the per-column generation rules and the mutation layout.
    """
    console = console or Console()
    catalog = plan.insert.catalog
    rules = {item.column.name: describe(item.expression) for item in plan.insert.projection}
    updates = {item.column.name: describe(item.expression) for item in plan.update.assignments}

    table = Table(title=f"Generation plan: {catalog.qualified_name}", box=box.ROUNDED)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Column", style="cyan", no_wrap=True)
    table.add_column("Type", style="magenta")
    table.add_column("Category", style="blue")
    table.add_column("Key", justify="center", style="yellow")
    table.add_column("Insert rule", style="green")
    table.add_column("Update rule", style="green")

    for column in catalog.columns:
        table.add_row(
            str(column.position),
            column.name,
            column.type_name,
            column.category.value,
            "PK" if column.is_primary_key else "",
            rules.get(column.name, "-"),
            updates.get(column.name, "-"),
        )
    console.print(table)

    sizes = ", ".join(f"{size:,}" for size in plan.insert.chunk_sizes) or "none"
    console.print(f"Insert: {plan.insert.total_rows:,} rows in {plan.insert.chunk_count} chunk(s) ({sizes})")
    console.print(
        f"Delete: {plan.delete.selector.limit:,} | Update: {plan.update.selector.limit:,} "
        f"(sampled by [cyan]{plan.delete.selector.key.name}[/cyan])"
    )


def print_rows(rows: List[Dict[str, Any]], title: str = "Preview", console: Optional[Console] = None) -> None:
    """
    Render evaluated sample rows.
    """
    console = console or Console()
    if not rows:
        console.print("[yellow]No rows to display.[/yellow]")
        return

    table = Table(title=title, box=box.ROUNDED)
    for name in rows[0]:
        table.add_column(name, overflow="fold")
    for row in rows:
        table.add_row(*(repr(value) if isinstance(value, str) else str(value) for value in row.values()))
    console.print(table)


def print_result(result: GenerationResult, console: Optional[Console] = None) -> None:
    """
    Render per-phase row counts and timings of a completed run.
    """
    console = console or Console()
    table = Table(
        title=f"Generation complete: {result.get('table', '?')}",
        box=box.ROUNDED,
        caption=f"row source: {result.get('row_source', '?')} | insert chunks: {result.get('chunks', 0)}",
    )
    table.add_column("Phase", style="cyan", no_wrap=True)
    table.add_column("Rows", justify="right", style="magenta")
    table.add_column("Duration (s)", justify="right", style="green")
    table.add_column("Throughput (rows/s)", justify="right", style="bold green")

    for phase in result.get("phases", []):
        table.add_row(
            phase["label"],
            f"{phase['rows']:,}",
            f"{phase['duration_seconds']:.3f}",
            f"{phase['rows_per_second']:,.1f}",
        )
    console.print(table)


__all__ = ["print_plan", "print_rows", "print_result"]
