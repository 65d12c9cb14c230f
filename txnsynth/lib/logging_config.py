"""Logging configuration for the transaction generator.

Log records go to stderr so that stdout stays reserved for the JSON
generation metadata. Plain-text output is the default; ``json_format=True``
switches to one JSON object per record for log aggregation.
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from typing import Any

_ROOT_LOGGER = "txnsynth"


@dataclass
class GenerationMetadata:
    """Metadata about a generation run, printed as JSON to stdout.

    Attributes:
        records_generated: Number of transaction records produced.
        seed: Random seed used for this run.
        start_date: Start of the transaction date range (YYYY-MM-DD).
        end_date: End of the transaction date range (YYYY-MM-DD).
        accounts: Number of unique accounts generated.
        currency: Currency of every generated amount.
        format: Output file format (parquet or csv).
        output_path: Path to the generated output file.
        duration_seconds: Wall-clock time for generation in seconds.
    """

    records_generated: int
    seed: int
    start_date: str
    end_date: str
    accounts: int
    currency: str
    format: str
    output_path: str
    duration_seconds: float
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    def to_json(self) -> str:
        """Serialize metadata to a JSON string.

        Returns:
            JSON string representation of the metadata.
        """
        return json.dumps(asdict(self), indent=2)


class JSONFormatter(logging.Formatter):
    """Format log records as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a JSON string.

        Args:
            record: The log record to format.

        Returns:
            JSON-formatted string with standard fields.
        """
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "component": "generator",
        }

        if hasattr(record, "seed"):
            log_entry["seed"] = record.seed
        if hasattr(record, "extra_data"):
            log_entry["data"] = record.extra_data

        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]),
            }

        return json.dumps(log_entry, default=str)


def setup_logging(level: str | int = "INFO", *, json_format: bool = False) -> logging.Logger:
    """Configure and return the package logger.

    Repeated calls replace the handler instead of stacking duplicates.

    Args:
        level: Logging level name (DEBUG, INFO, ...) or numeric level.
        json_format: Emit JSON records instead of plain text.

    Returns:
        Configured ``txnsynth`` logger.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger under the package namespace.

    Args:
        name: The module name for the child logger.

    Returns:
        A child logger that inherits the package configuration.
    """
    return logging.getLogger(f"{_ROOT_LOGGER}.{name}")
