"""Logging utilities for Isomill."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog


@dataclass
class GenerationStats:
    """Statistics from one toolpath generation run."""

    region_count: int = 0
    pass_count: int = 0
    clipped_passes: int = 0
    toolpath_count: int = 0
    point_count: int = 0
    rings_emitted: int = 0
    skipped_regions: list[int] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def contention(self) -> bool:
        """Whether any pass was clipped short of its requested clearance."""
        return self.clipped_passes > 0

    @property
    def duration_seconds(self) -> float:
        """Calculate generation duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


# Handlers installed by configure_logging, replaced on every call.
_installed_handlers: list[logging.Handler] = []


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Calling it again replaces the handlers of the previous call.

    Args:
        log_file: Path to log file (console only if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        _installed_handlers.append(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    _installed_handlers.append(console_handler)

    root_logger.setLevel(logging.DEBUG)
    for handler in _installed_handlers:
        root_logger.addHandler(handler)

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

    logger = structlog.get_logger("isomill")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class GenerationLogger:
    """Logger for tracking generation progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger, stats: GenerationStats) -> None:
        self._logger = logger
        self._stats = stats

    def log_region_start(self, index: int, passes: int) -> None:
        """Log start of region processing."""
        self._logger.debug("Offsetting region", region=index, passes=passes)

    def log_pass_clipped(self, index: int, pass_index: int) -> None:
        """Log a pass cut short by the region's cell or the mask."""
        self._logger.debug("Pass clipped", region=index, pass_index=pass_index)
        self._stats.clipped_passes += 1

    def log_region_skipped(self, index: int, reason: str) -> None:
        """Log a region without any pass polygon."""
        self._logger.debug("Region skipped", region=index, reason=reason)
        self._stats.skipped_regions.append(index)

    def log_region_complete(self, index: int, passes: int) -> None:
        """Log successful region processing."""
        self._logger.debug("Region offset", region=index, passes=passes)
        self._stats.region_count += 1
        self._stats.pass_count += passes

    def log_contention(self) -> None:
        """Log the best-effort clearance warning."""
        self._logger.warning(
            "Clearance requirements not fulfilled, best effort used",
            clipped_passes=self._stats.clipped_passes,
        )

    @property
    def stats(self) -> GenerationStats:
        """Get current generation statistics."""
        return self._stats
