"""Primary Typer application wiring the file discovery CLI."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
import yaml
from rich.table import Table

from filediscovery.search.compiler import compile_where_clause
from filediscovery.search.describe import describe_filters
from filediscovery.search.errors import FileSearchError
from filediscovery.search.filters import BaseFileFilter
from filediscovery.search.main import load_filter_file, search_case

from .common import abort, configure_state, console, get_state

app = typer.Typer(
    add_completion=False,
    help="""
    Select files from a case by size, path, data source, keyword list, type
    and central repository frequency.
    """.strip(),
    no_args_is_help=True,
)


def _load_filters(filters_file: Path) -> List[BaseFileFilter]:
    try:
        return load_filter_file(filters_file)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as exc:
        abort(exc)


@app.callback()
def main(
    ctx: typer.Context,
    environment: Optional[str] = typer.Option(
        None,
        "--environment",
        "-e",
        help="Active configuration environment (development, testing, production).",
        show_default=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Emit debug logging.",
    ),
) -> None:
    """Configure shared CLI state prior to executing subcommands."""

    configure_state(ctx, environment=environment, verbose=verbose)


@app.command("describe")
def describe_command(
    filters_file: Path = typer.Argument(..., help="YAML file listing the filters to apply."),
) -> None:
    """Print a description of each filter and the compiled case database query."""

    filters = _load_filters(filters_file)
    for index, description in enumerate(describe_filters(filters), start=1):
        console.print(f"{index}. {description}", highlight=False, markup=False)
    try:
        where_clause = compile_where_clause(filters)
    except FileSearchError as exc:
        abort(exc)
    console.print("Case database query:", style="bold")
    console.print(where_clause, highlight=False, markup=False, soft_wrap=True)


@app.command("search")
def search_command(
    ctx: typer.Context,
    filters_file: Path = typer.Argument(..., help="YAML file listing the filters to apply."),
    case_db: Optional[str] = typer.Option(
        None,
        "--case-db",
        help="SQLAlchemy URL of the case database (defaults to stores.case_database_url).",
        show_default=False,
    ),
    central_repo: Optional[str] = typer.Option(
        None,
        "--central-repo",
        help="SQLAlchemy URL of the central repository (defaults to stores.central_repository_url).",
        show_default=False,
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        min=1,
        help="Worker threads for central repository lookups.",
        show_default=False,
    ),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        min=1,
        help="Maximum number of rows to display.",
        show_default=False,
    ),
) -> None:
    """Run the filters against the case and list the matching files."""

    state = get_state(ctx)
    filters = _load_filters(filters_file)
    try:
        results = search_case(
            filters,
            settings=state.settings,
            case_database_url=case_db,
            central_repository_url=central_repo,
            max_workers=workers,
        )
    except FileSearchError as exc:
        abort(exc)

    display_limit = limit or state.settings.policies.search.max_results_displayed
    table = Table(title="Matching files")
    table.add_column("Path", overflow="fold")
    table.add_column("Size", justify="right")
    table.add_column("MIME type")
    table.add_column("Frequency")
    table.add_column("Occurrences", justify="right")
    for result in results[:display_limit]:
        record = result.record
        table.add_row(
            f"{record.parent_path}{record.name}",
            str(record.size),
            record.mime_type or "-",
            result.frequency.name,
            "-" if result.occurrence_count is None else str(result.occurrence_count),
        )
    if results:
        console.print(table)
    console.print(f"{len(results)} file(s) matched", highlight=False)


__all__ = ["app"]
