"""Unit tests for logging setup and run metadata."""

from __future__ import annotations

import json
import logging
import sys

from txnsynth.lib.logging_config import (
    GenerationMetadata,
    JSONFormatter,
    get_logger,
    setup_logging,
)


class TestSetupLogging:
    """Tests for the package logger configuration."""

    def test_repeated_setup_keeps_one_handler(self) -> None:
        setup_logging()
        logger = setup_logging("DEBUG")
        assert logger.name == "txnsynth"
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

    def test_json_format_selects_json_formatter(self) -> None:
        logger = setup_logging(json_format=True)
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)
        setup_logging()

    def test_child_logger_namespace(self) -> None:
        assert get_logger("distributions.amount").name == "txnsynth.distributions.amount"


class TestJSONFormatter:
    """Tests for structured log records."""

    def test_fields(self) -> None:
        record = logging.LogRecord(
            "txnsynth.generator", logging.INFO, __file__, 1, "Generated %d rows", (5,), None,
        )
        record.seed = 42
        entry = json.loads(JSONFormatter().format(record))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "txnsynth.generator"
        assert entry["message"] == "Generated 5 rows"
        assert entry["seed"] == 42

    def test_exception_details(self) -> None:
        try:
            raise ValueError("bad weights")
        except ValueError:
            record = logging.LogRecord(
                "txnsynth", logging.ERROR, __file__, 1, "failed", (), sys.exc_info(),
            )
        entry = json.loads(JSONFormatter().format(record))
        assert entry["exception"] == {"type": "ValueError", "message": "bad weights"}


class TestGenerationMetadata:
    """Tests for the JSON run summary."""

    def test_to_json(self) -> None:
        metadata = GenerationMetadata(
            records_generated=10,
            seed=1,
            start_date="2024-01-01",
            end_date="2024-01-07",
            accounts=5,
            currency="USD",
            format="csv",
            output_path="out.csv",
            duration_seconds=0.1,
        )
        payload = json.loads(metadata.to_json())
        assert payload["records_generated"] == 10
        assert payload["currency"] == "USD"
        assert "timestamp" in payload
