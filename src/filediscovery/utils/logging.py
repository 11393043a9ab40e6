"""Loguru sinks and context helpers for search runs."""

from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from typing import Any, Iterator

from loguru import logger

from ..config.settings import Settings, get_settings

_DEFAULT_EXTRA = {"search_id": "-", "stage": "-"}

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "search=<cyan>{extra[search_id]}</cyan> stage=<magenta>{extra[stage]}</magenta> | "
    "<level>{message}</level>"
)

logger.configure(extra=_DEFAULT_EXTRA)


def _write_stderr(message: str) -> None:
    # Resolved per call so redirected streams are honoured.
    sys.stderr.write(message)


def configure_logging(settings: Settings | None = None, level: str | None = None) -> None:
    """Replace the active sinks with the ones described by ``policies.logging``.

    ``level`` overrides the configured level (the CLI passes ``DEBUG`` for
    ``--verbose``). The rotating file sink is only added when enabled.
    """

    cfg = settings or get_settings()
    policy = cfg.policies.logging
    threshold = level or policy.level

    logger.remove()
    logger.configure(extra=_DEFAULT_EXTRA)
    logger.add(_write_stderr, level=threshold, format=_FORMAT, backtrace=False, diagnose=False)
    if not policy.file_enabled:
        return
    cfg.log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        cfg.log_file,
        level=threshold,
        format=_FORMAT,
        rotation=policy.rotation,
        retention=policy.retention,
        enqueue=True,
    )


def get_logger(**context: Any):
    """Return the shared logger bound to ``context``."""

    return logger.bind(**context)


@contextmanager
def logging_context(**context: Any) -> Iterator[Any]:
    """Attach ``context`` to every record emitted inside the block."""

    with logger.contextualize(**context):
        yield logger


@contextmanager
def log_timing(step: str, *, logger_=logger) -> Iterator[None]:
    """Emit a debug record with the wall time spent in the block."""

    started = time.perf_counter()
    try:
        yield
    finally:
        logger_.debug("Step timing", step=step, seconds=round(time.perf_counter() - started, 6))


__all__ = ["configure_logging", "get_logger", "logging_context", "log_timing"]
