"""
Structured logging configuration for pixel-evolve.
Provides consistent logging across all components with JSON output support.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from evolution.errors import require

PACKAGE_LOGGERS = ["pixel_evolve", "evolution", "imaging", "monitoring"]
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class StructuredFormatter(logging.Formatter):
    """JSON-formatted log output for structured logging."""

    EXTRA_FIELDS = (
        "event_type",
        "generation",
        "fitness",
        "genome_id",
        "parent_pool_size",
        "genome_pool_size",
        "duration_ms",
        "path",
    )

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in self.EXTRA_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class HumanFormatter(logging.Formatter):
    """Human-readable log format for console output."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.now().strftime("%H:%M:%S")
        level = record.levelname[:4]

        if self.use_colors:
            color = self.COLORS.get(record.levelname, "")
            level = f"{color}{level}{self.RESET}"

        msg = record.getMessage()

        extras = []
        if hasattr(record, "genome_id"):
            extras.append(f"genome={str(record.genome_id)[:8]}")
        if hasattr(record, "duration_ms"):
            extras.append(f"took={record.duration_ms}ms")

        extra_str = f" [{', '.join(extras)}]" if extras else ""
        line = f"{ts} {level} {record.name}: {msg}{extra_str}"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class EvolutionLogger:
    """Specialized logger for evolution events with structured context."""

    def __init__(self, name: str = "pixel_evolve"):
        self.logger = logging.getLogger(name)
        self._context: Dict[str, Any] = {}

    def set_context(self, **kwargs) -> None:
        """Set persistent context for all log messages."""
        self._context.update(kwargs)

    def clear_context(self) -> None:
        """Clear all context."""
        self._context.clear()

    def _log(self, level: int, msg: str, **kwargs) -> None:
        """Log with context."""
        extra = {**self._context, **kwargs}
        self.logger.log(level, msg, extra=extra)

    def debug(self, msg: str, **kwargs) -> None:
        self._log(logging.DEBUG, msg, **kwargs)

    def info(self, msg: str, **kwargs) -> None:
        self._log(logging.INFO, msg, **kwargs)

    def warning(self, msg: str, **kwargs) -> None:
        self._log(logging.WARNING, msg, **kwargs)

    def error(self, msg: str, **kwargs) -> None:
        self._log(logging.ERROR, msg, **kwargs)

    # Evolution-specific logging methods
    def generation_progress(
        self,
        generation: int,
        fitness: float,
        parent_pool_size: int,
        genome_pool_size: int,
    ) -> None:
        self.info(
            f"generation {generation} | loss {fitness:.4f}",
            event_type="generation_progress",
            generation=generation,
            fitness=fitness,
            parent_pool_size=parent_pool_size,
            genome_pool_size=genome_pool_size,
        )

    def evolution_complete(
        self, generations: int, best_fitness: float, total_duration_ms: int
    ) -> None:
        self.info(
            f"Evolution complete after {generations} generations",
            event_type="evolution_complete",
            generation=generations,
            fitness=best_fitness,
            duration_ms=total_duration_ms,
        )

    def snapshot_written(self, path: Path, genome_id: str, fitness: float) -> None:
        self.info(
            f"Saved fittest genome to {path}",
            event_type="snapshot_written",
            path=str(path),
            genome_id=genome_id,
            fitness=fitness,
        )


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[Path] = None,
    use_colors: bool = True,
) -> None:
    """Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Use JSON format for console output
        log_file: Optional file path for log output
        use_colors: Use colors in console output (ignored if json_output=True)

    Raises:
        InvalidConfigError: if level is not a known log level
    """
    require(level.upper() in LOG_LEVELS, f"Unknown log level: {level}", level=level)
    numeric_level = getattr(logging, level.upper())

    console_handler = logging.StreamHandler(sys.stderr)
    if json_output:
        console_handler.setFormatter(StructuredFormatter())
    else:
        console_handler.setFormatter(HumanFormatter(use_colors=use_colors))
    handlers: List[logging.Handler] = [console_handler]

    # File handler (always JSON for machine parsing)
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(StructuredFormatter())
        handlers.append(file_handler)

    for name in PACKAGE_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(numeric_level)
        logger.handlers.clear()
        for handler in handlers:
            logger.addHandler(handler)


def get_logger(name: str) -> EvolutionLogger:
    """Get a structured logger instance."""
    return EvolutionLogger(name)
