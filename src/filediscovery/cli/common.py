"""Shared helpers used across the file discovery CLI modules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from filediscovery.config.settings import Settings
from filediscovery.utils.logging import configure_logging, get_logger

console = Console()
_LOGGER = get_logger(module=__name__)


class CLIError(RuntimeError):
    """Exception raised for user-facing CLI errors."""


@dataclass(slots=True)
class CLIState:
    """State object attached to ``typer.Context`` for downstream commands."""

    settings: Settings
    environment: str
    verbose: bool


def resolve_settings(environment: str | None) -> Settings:
    """Construct :class:`Settings` with the requested environment applied."""

    payload = {"environment": environment} if environment else {}
    return Settings(**payload)


def configure_state(ctx: typer.Context, *, environment: str | None, verbose: bool) -> None:
    """Populate ``ctx.obj`` with :class:`CLIState` and configure logging."""

    settings = resolve_settings(environment)
    configure_logging(settings, level="DEBUG" if verbose else None)
    ctx.obj = CLIState(settings=settings, environment=settings.environment, verbose=verbose)
    _LOGGER.debug("CLI state configured", environment=settings.environment, verbose=verbose)


def get_state(ctx: typer.Context) -> CLIState:
    """Return the :class:`CLIState` attached to the current context."""

    state = ctx.obj
    if not isinstance(state, CLIState):
        raise CLIError("CLI state has not been initialised")
    return state


def abort(exc: BaseException | str) -> NoReturn:
    """Render an error without a stack trace and exit with code 2."""

    console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}", highlight=False)
    raise typer.Exit(code=2)


__all__ = ["CLIError", "CLIState", "console", "configure_state", "get_state", "abort"]
