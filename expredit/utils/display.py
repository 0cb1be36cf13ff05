"""Rich console display utilities for expression trees and candidates."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from expredit.core.fragment import CompoundType, ExpressionFragment
from expredit.core.parser import ParseOutcome
from expredit.moves.engine import CandidateTree

console = Console()

_KIND_STYLES = {
    CompoundType.ADDITIVE: "green",
    CompoundType.MULTIPLICATIVE: "yellow",
    CompoundType.PARENTHETICAL: "magenta",
    CompoundType.LITERAL: "cyan",
}


def _label(node: ExpressionFragment) -> str:
    style = _KIND_STYLES[node.kind]
    if node.kind == CompoundType.LITERAL:
        return f"[{style}]{node.literal}[/{style}]"
    return f"[{style}]{node.marker}[/{style}] [dim]{node.to_flat_string()}[/dim]"


def build_rich_tree(fragment: ExpressionFragment) -> Tree:
    tree = Tree(_label(fragment))

    def add(branch: Tree, node: ExpressionFragment) -> None:
        for child in node.children:
            add(branch.add(_label(child)), child)

    add(tree, fragment)
    return tree


def display_fragment(fragment: ExpressionFragment, indented: bool = False) -> None:
    """Display a tree in a panel, with its flat form as the title."""
    console.print(Panel(
        build_rich_tree(fragment),
        title=f"Expression: {fragment.to_flat_string()}",
        border_style="blue",
    ))
    if indented:
        console.print(Panel(
            fragment.to_indented_string().replace("\t", "    ").rstrip("\n"),
            title="Indented form",
            border_style="dim",
        ))


def display_parse_error(outcome: ParseOutcome) -> None:
    console.print(
        f"[red]Cannot parse {escape(repr(outcome.text))}: {escape(outcome.message)}[/red] "
        f"[dim]({outcome.kind.value})[/dim]"
    )


def display_candidates(
    focused: ExpressionFragment,
    candidates: list[CandidateTree],
    limit: int = 20,
    current: int | None = None,
) -> None:
    """Display candidate placements as a table."""
    table = Table(title=f"Placements of {focused.to_flat_string()}")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Position", style="green", justify="right")
    table.add_column("Candidate", style="cyan", overflow="fold")

    for i, candidate in enumerate(candidates[:limit]):
        marker = " [yellow](current)[/yellow]" if candidate.position == current else ""
        table.add_row(str(i), str(candidate.position), candidate.flat + marker)

    console.print(table)
    if len(candidates) > limit:
        console.print(f"  ... and {len(candidates) - limit} more candidates")


def display_check_results(rows: list[dict[str, str]]) -> None:
    """Display round-trip check results, one row per input line."""
    table = Table(title="Round-trip check")
    table.add_column("Line", style="dim", justify="right")
    table.add_column("Input", style="cyan", overflow="fold")
    table.add_column("Flat form", overflow="fold")
    table.add_column("Status")

    for row in rows:
        status = row["status"]
        style = "green" if status == "OK" else "red"
        table.add_row(row["line"], escape(row["input"]), row["flat"], f"[{style}]{escape(status)}[/{style}]")

    console.print(table)
