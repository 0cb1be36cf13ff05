"""CLI interface for the expression reordering engine.

Usage:
    expredit parse "2*x + 3*y + (7+6*z)" --indented
    expredit candidates "2*x+3*y+4*z" --focus 2
    expredit move "2*x+3*y+4*z" --focus 2 --to 0
    expredit check expressions.txt
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

import click
from rich.console import Console

from expredit.config import EditorConfig

console = Console()


def _configure_logging(level: str) -> None:
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=numeric_level,
        format="[%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _parse_focus(ctx: click.Context, param: click.Parameter, value: str) -> tuple[int, ...]:
    """Dotted child-index path from the root: "" is the root, "3.0" the first child of child 3."""
    value = value.strip()
    if not value:
        return ()
    try:
        return tuple(int(part) for part in value.split("."))
    except ValueError:
        raise click.BadParameter(f"expected dotted child indices like 3.0, got {value!r}")


@click.group()
@click.option("--log-level", default=None, help="Logging level (default: EXPREDIT_LOG_LEVEL or WARNING)")
@click.pass_context
def main(ctx: click.Context, log_level: str | None) -> None:
    """Parse arithmetic expressions and reorder their sub-expressions."""
    config = EditorConfig.from_env()
    if log_level:
        config = replace(config, log_level=log_level.upper())
    _configure_logging(config.log_level)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@main.command()
@click.argument("text")
@click.option("--indented/--no-indented", default=None, help="Also show the indented tree form")
@click.option("--json", "as_json", is_flag=True, help="Print the tree as JSON instead")
@click.pass_context
def parse(ctx: click.Context, text: str, indented: bool | None, as_json: bool) -> None:
    """Parse TEXT and show its canonical tree."""
    from expredit.core.parser import try_parse
    from expredit.utils.display import display_fragment, display_parse_error

    config: EditorConfig = ctx.obj["config"]
    outcome = try_parse(text)
    if not outcome.ok:
        display_parse_error(outcome)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(outcome.tree.to_dict(), indent=2))
        return

    display_fragment(outcome.tree, indented=config.show_indented if indented is None else indented)


@main.command()
@click.argument("text")
@click.option("--focus", required=True, callback=_parse_focus, help="Dotted child-index path of the node to move")
@click.pass_context
def candidates(ctx: click.Context, text: str, focus: tuple[int, ...]) -> None:
    """List every placement of the focused node among its siblings."""
    from expredit.core.parser import try_parse
    from expredit.editor.session import ReorderSession
    from expredit.utils.display import display_candidates, display_parse_error

    config: EditorConfig = ctx.obj["config"]
    outcome = try_parse(text)
    if not outcome.ok:
        display_parse_error(outcome)
        sys.exit(1)

    session = ReorderSession(outcome.tree, config)
    try:
        focused = session.select_path(focus)
    except IndexError as exc:
        console.print(f"[red]Bad focus path: {exc}[/red]")
        sys.exit(2)

    results = session.candidates()
    if not results:
        console.print("[yellow]The root expression has no siblings to move among.[/yellow]")
        return

    display_candidates(focused, results, limit=config.max_preview, current=focused.index_in_parent())


@main.command()
@click.argument("text")
@click.option("--focus", required=True, callback=_parse_focus, help="Dotted child-index path of the node to move")
@click.option("--to", "position", required=True, type=int, help="New index among the siblings")
@click.pass_context
def move(ctx: click.Context, text: str, focus: tuple[int, ...], position: int) -> None:
    """Move the focused node to a new position and print the result."""
    from expredit.core.parser import try_parse
    from expredit.editor.session import ReorderSession
    from expredit.utils.display import display_parse_error

    config: EditorConfig = ctx.obj["config"]
    outcome = try_parse(text)
    if not outcome.ok:
        display_parse_error(outcome)
        sys.exit(1)

    session = ReorderSession(outcome.tree, config)
    try:
        session.select_path(focus)
        session.move_to(position)
    except LookupError as exc:
        console.print(f"[red]Cannot move: {exc}[/red]")
        sys.exit(2)

    click.echo(session.commit())


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def check(path: Path) -> None:
    """Round-trip every expression in PATH through parse and flat form.

    Blank lines and lines starting with '#' are skipped. Exits 1 if any line
    fails to parse or does not survive the round trip.
    """
    from expredit.core.parser import try_parse
    from expredit.utils.display import display_check_results

    rows: list[dict[str, str]] = []
    failures = 0

    for number, line in enumerate(path.read_text(encoding="utf-8").splitlines(), 1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        outcome = try_parse(stripped)
        if not outcome.ok:
            rows.append({"line": str(number), "input": stripped, "flat": "", "status": outcome.kind.value})
            failures += 1
            continue

        flat = outcome.tree.to_flat_string()
        again = try_parse(flat)
        status = "OK" if again.ok and again.tree == outcome.tree else "MISMATCH"
        if status != "OK":
            failures += 1
        rows.append({"line": str(number), "input": stripped, "flat": flat, "status": status})

    display_check_results(rows)
    console.print(f"\n[bold]{len(rows) - failures}/{len(rows)} expressions passed[/bold]")
    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
