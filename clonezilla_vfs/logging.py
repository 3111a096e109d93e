from __future__ import annotations

import os
import sys
import time
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from loguru import Logger

from loguru import logger

DEFAULT_LOG_DIR = Path(
    os.environ.get(
        "CLONEZILLA_VFS_LOG_DIR",
        Path.home() / ".local" / "state" / "clonezilla-vfs" / "logs",
    )
)


def setup_logging(
    *,
    debug: bool = False,
    trace: bool = False,
    log_dir: Path | None = None,
) -> Logger:
    """
    Setup logging with separate sinks for different log levels.

    Log Files:
    - operations.log: INFO+ events (7 day retention)
    - debug.log: DEBUG+ events when debug or trace is enabled (3 day retention)
    - structured.jsonl: Structured JSON logs for analysis (7 day retention)

    Args:
        debug: Enable DEBUG level logging
        trace: Enable TRACE level logging, including raw tool output
        log_dir: Custom log directory (defaults to ~/.local/state/clonezilla-vfs/logs)
    """
    logger.remove()
    logger.configure(extra={"job_id": "-", "tags": [], "source": "APP"})

    if trace:
        console_level = "TRACE"
    elif debug:
        console_level = "DEBUG"
    else:
        console_level = "INFO"

    # Console (stderr)
    logger.add(
        sys.stderr,
        level=console_level,
        backtrace=False,
        diagnose=False,
        colorize=True,
        format=(
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{extra[source]: <10}</cyan> | "
            "{message}"
        ),
    )

    log_dir = log_dir or DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.add(
        log_dir / "operations.log",
        level="INFO",
        rotation="5 MB",
        retention="7 days",
        compression="zip",
        backtrace=False,
        diagnose=False,
        format=(
            "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
            "{level: <8} | "
            "{extra[source]: <10} | "
            "{extra[job_id]: <20} | "
            "{message}"
        ),
    )

    if debug or trace:
        logger.add(
            log_dir / "debug.log",
            level="TRACE" if trace else "DEBUG",
            rotation="10 MB",
            retention="3 days",
            compression="zip",
            backtrace=True,
            diagnose=True,
            format=(
                "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
                "{level: <8} | "
                "{extra[source]: <10} | "
                "{extra[job_id]: <20} | "
                "{extra[tags]} | "
                "{message}"
            ),
        )

    logger.add(
        log_dir / "structured.jsonl",
        level="INFO",
        rotation="10 MB",
        retention="7 days",
        compression="zip",
        serialize=True,
        format="{message}",
    )

    return logger


def get_logger(
    *,
    job_id: str | None = None,
    tags: Iterable[str] | None = None,
    source: str | None = None,
) -> Logger:
    """
    Get a logger with bound context.

    Args:
        job_id: Job identifier for tracking operations
        tags: Tags for filtering (e.g., ["sevenzip", "listing"])
        source: Source component (e.g., "7z", "container")

    Returns:
        Logger with bound context
    """
    extras: dict[str, object] = {}
    if job_id is not None:
        extras["job_id"] = job_id
    if tags is not None:
        extras["tags"] = list(tags)
    if source is not None:
        extras["source"] = source
    return logger.bind(**extras)


@contextmanager
def operation_context(operation: str, **details):
    """
    Context manager for tracking operations with automatic timing.

    Logs operation start, completion and failure with the duration.

    Example:
        with operation_context("classify", path="/images/2024-01-01") as log:
            kind = classify(path)
            log.debug(f"Classified as {kind.value}")
    """
    job_id = f"{operation}-{uuid.uuid4().hex[:8]}"

    with logger.contextualize(job_id=job_id, operation=operation, **details):
        start_time = time.time()
        log = logger.bind(source=operation, job_id=job_id, tags=[operation])

        log.info(f"{operation.capitalize()} started", **details)

        try:
            yield log
            duration = time.time() - start_time
            log.success(
                f"{operation.capitalize()} completed", duration_seconds=round(duration, 2)
            )
        except Exception as e:
            duration = time.time() - start_time
            log.error(
                f"{operation.capitalize()} failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_seconds=round(duration, 2),
            )
            raise


class LoggerFactory:
    """
    Factory for creating domain-specific loggers with automatic context.
    """

    @staticmethod
    def for_sevenzip() -> Logger:
        """Logger for 7-Zip invocations and listing parsing."""
        return logger.bind(source="7z", tags=["sevenzip", "archive"])

    @staticmethod
    def for_tool_output() -> Logger:
        """Logger for raw output lines of external tools (TRACE only)."""
        return logger.bind(source="7z", tags=["sevenzip", "tool-output"])

    @staticmethod
    def for_containers(job_id: str | None = None) -> Logger:
        """Logger for container classification and construction."""
        if job_id is None:
            job_id = f"container-{uuid.uuid4().hex[:8]}"
        return logger.bind(
            job_id=job_id, source="container", tags=["container", "image"]
        )

    @staticmethod
    def for_cache() -> Logger:
        """Logger for cache folder management."""
        return logger.bind(source="cache", tags=["cache"])
