"""Logging utilities for PancakePath."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog


@dataclass
class ProcessingStats:
    """Statistics from a processing run."""

    input_count: int = 0
    processed_count: int = 0
    removed_count: int = 0
    thin_removed_count: int = 0
    outlines_added: int = 0
    error_count: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    stage_timings_ms: dict[str, float] = field(default_factory=dict)
    start_time: float | None = None
    end_time: float | None = None
    was_cancelled: bool = False

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def output_count(self) -> int:
        """Items left after processing, outlines included."""
        return self.processed_count + self.outlines_added


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Reconfiguring replaces the handlers installed by an earlier call
    for handler in list(root_logger.handlers):
        if getattr(handler, "_pancakepath", False):
            root_logger.removeHandler(handler)
            handler.close()

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        file_handler._pancakepath = True  # type: ignore[attr-defined]
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    console_handler._pancakepath = True  # type: ignore[attr-defined]
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("pancakepath")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class ProcessingLogger:
    """Logger for tracking pipeline progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = ProcessingStats()

    def log_stage_start(self, stage: str, items: int) -> None:
        """Log start of a pipeline stage."""
        self._logger.debug("Stage started", stage=stage, items=items)

    def log_stage_complete(self, stage: str, duration_ms: float, **details: object) -> None:
        """Log a finished pipeline stage."""
        self._logger.info(
            "Stage complete",
            stage=stage,
            duration_ms=round(duration_ms, 2),
            **details,
        )
        self._stats.stage_timings_ms[stage] = duration_ms

    def log_item_removed(self, item_name: str, reason: str) -> None:
        """Log an item that vanished during processing."""
        self._logger.debug("Item removed", item=item_name, reason=reason)
        self._stats.removed_count += 1

    def log_stage_error(
        self,
        stage: str,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log a pipeline stage error."""
        self._logger.error(
            "Stage failed",
            stage=stage,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((stage, str(error)))

    def log_cancelled(self, stage: str, processed: int, pending: int) -> None:
        """Log cooperative cancellation."""
        self._logger.info("Processing cancelled", stage=stage, processed=processed, pending=pending)
        self._stats.was_cancelled = True

    @property
    def stats(self) -> ProcessingStats:
        """Get current processing statistics."""
        return self._stats
