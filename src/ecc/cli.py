"""ECC CLI: presentation layer.

Thin adapter: all resolution logic lives in ``ecc.core``.  The CLI builds
the baseline from flags / environment, owns one
:class:`~ecc.core.resolver.EditorConfigContext` per invocation, and formats
output.
"""

from __future__ import annotations

import json
from pathlib import Path

import structlog
import typer
from pydantic import ValidationError
from rich import print
from rich.table import Table

from ecc.core.errors import ECCError
from ecc.core.logging import configure_logging
from ecc.core.models import Found
from ecc.core.resolver import EditorConfigContext
from ecc.core.settings import Settings

logger = structlog.get_logger()

app = typer.Typer(help="Resolve doc-comment formatting options from .editorconfig cascades.")


# ── Callback (runs before every command) ────────────────────
@app.callback(invoke_without_command=True)
def _main_callback(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    log_level: str = typer.Option("WARNING", "--log-level", envvar="ECC_LOG_LEVEL", help="Log level."),
    log_json: bool = typer.Option(True, "--log-json/--log-text", envvar="ECC_LOG_JSON", help="JSON or human logs."),
    max_line_width: int | None = typer.Option(None, "--max-line-width", help="Baseline code line width."),
    max_comment_width: int | None = typer.Option(None, "--max-comment-width", help="Baseline comment width."),
    hanging_indent: int | None = typer.Option(None, "--hanging-indent", help="Baseline hanging indent."),
    tab_width: int | None = typer.Option(None, "--tab-width", help="Baseline tab width."),
) -> None:
    """Configure logging + baseline, then store the context for sub-commands."""
    configure_logging(level=log_level, json_output=log_json)
    flags = {
        "max_line_width": max_line_width,
        "max_comment_width": max_comment_width,
        "hanging_indent": hanging_indent,
        "tab_width": tab_width,
    }
    overrides = {k: v for k, v in flags.items() if v is not None}
    try:
        settings = Settings(log_level=log_level, log_json=log_json, **overrides)
    except ValidationError as exc:
        print(f"[red]ERROR:[/red] invalid baseline options: {exc.error_count()} error(s)")
        for err in exc.errors():
            print(f"  {'.'.join(str(p) for p in err['loc'])}: {err['msg']}")
        raise typer.Exit(code=2)

    ctx.ensure_object(dict)
    ctx.obj["context"] = EditorConfigContext(settings.baseline())

    # If no sub-command given, show help.
    if ctx.invoked_subcommand is None:
        print(ctx.get_help())


def _context(ctx: typer.Context) -> EditorConfigContext:
    return ctx.obj["context"]


# ── Commands ────────────────────────────────────────────────
@app.command()
def show(
    ctx: typer.Context,
    files: list[Path] = typer.Argument(..., help="Source files to resolve options for."),
    as_json: bool = typer.Option(False, "--json", help="Print a JSON list instead of a table."),
) -> None:
    """Show the effective formatting options for each file."""
    resolver = _context(ctx)
    try:
        resolved = [(f, resolver.get_options(f)) for f in files]
    except ECCError as exc:
        print(f"[red]ERROR:[/red] {exc}")
        raise typer.Exit(code=1)

    if as_json:
        payload = [{"file": str(f), **opts.model_dump()} for f, opts in resolved]
        typer.echo(json.dumps(payload, indent=2))
        return

    table = Table(title="Formatting options", show_lines=False)
    table.add_column("File", style="bold")
    table.add_column("Line width", justify="right")
    table.add_column("Comment width", justify="right")
    table.add_column("Hanging indent", justify="right")
    table.add_column("Tab width", justify="right")
    table.add_column("Collapse 1-line")
    for f, opts in resolved:
        table.add_row(
            str(f),
            str(opts.max_line_width),
            str(opts.max_comment_width),
            str(opts.hanging_indent),
            str(opts.tab_width),
            "[green]yes[/green]" if opts.collapse_single_line else "[yellow]no[/yellow]",
        )
    print(table)
    logger.info("options_shown", files=len(resolved))


@app.command()
def locate(
    ctx: typer.Context,
    path: Path = typer.Argument(Path("."), help="File or directory to start from."),
) -> None:
    """Show the chain of .editorconfig files governing PATH (nearest first)."""
    directory = path if path.is_dir() else path.absolute().parent
    try:
        resolution = _context(ctx).resolve(directory)
    except ECCError as exc:
        print(f"[red]ERROR:[/red] {exc}")
        raise typer.Exit(code=1)

    if not isinstance(resolution, Found):
        print(f"[yellow]No .editorconfig governs[/yellow] {directory}")
        return

    for depth, node in enumerate(resolution.node.chain()):
        marker = "  (root)" if node.root else ""
        typer.echo(f"{'  ' * depth}{node.source}  ({len(node.sections)} sections){marker}")


@app.command()
def value(
    ctx: typer.Context,
    file: Path = typer.Argument(help="Source file whose governing config is consulted."),
    key: str = typer.Argument(help="Property name, e.g. max_line_length."),
    glob: str = typer.Option("*.kt", "--glob", "-g", help="File-type glob a section must name."),
    no_wildcard: bool = typer.Option(False, "--no-wildcard", help="Ignore bare [*] sections."),
) -> None:
    """Print the raw cascaded value of KEY for FILE."""
    try:
        raw = _context(ctx).get_value(file, key, glob, include_wildcard=not no_wildcard)
    except ECCError as exc:
        print(f"[red]ERROR:[/red] {exc}")
        raise typer.Exit(code=1)

    if raw is None:
        print(f"[yellow]{key}[/yellow] is not set for {glob}")
        raise typer.Exit(code=1)
    typer.echo(raw)


# ── Entrypoint ──────────────────────────────────────────────
def main() -> None:  # noqa: D103
    app()
