"""Run the file discovery CLI from a source checkout: ``python main.py search filters.yaml``."""

from __future__ import annotations

import sys
from typing import Sequence

import typer

from filediscovery.cli.main import app


def main(argv: Sequence[str] | None = None) -> int:
    """Invoke the Typer app and return its exit status instead of exiting."""

    args = list(sys.argv[1:] if argv is None else argv)
    try:
        # Outside standalone mode click returns the typer.Exit code.
        return app(prog_name="filediscovery", args=args, standalone_mode=False) or 0
    except typer.Exit as exc:  # pragma: no cover - exit code passthrough
        return exc.exit_code


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
