"""Unit tests for input parameter validation."""

from __future__ import annotations

from datetime import date, timedelta

from txnsynth.lib.validators import ValidatedParams, validate_params
from txnsynth.models.money import Currency


def _validate(**overrides: object) -> ValidatedParams | list:
    params: dict[str, object] = {
        "count": 100,
        "start_date": None,
        "end_date": None,
        "accounts": 10,
        "currency": "USD",
        "output_format": "parquet",
        "seed": 42,
    }
    params.update(overrides)
    return validate_params(**params)  # type: ignore[arg-type]


class TestValidateParams:
    """Tests for the validate_params function."""

    def test_valid_defaults(self) -> None:
        """Default parameters should validate successfully."""
        result = _validate(count=10_000, accounts=100)
        assert isinstance(result, ValidatedParams)
        assert result.count == 10_000
        assert result.seed == 42
        assert result.currency is Currency.USD

    def test_default_date_range_is_last_90_days(self) -> None:
        result = _validate()
        assert isinstance(result, ValidatedParams)
        assert result.end_date == date.today()
        assert result.start_date == date.today() - timedelta(days=90)

    def test_negative_count_rejected(self) -> None:
        result = _validate(count=-1)
        assert isinstance(result, list)
        assert any(e.field == "count" for e in result)

    def test_zero_count_accepted(self) -> None:
        """Zero count must be accepted (produces empty file with schema)."""
        result = _validate(count=0)
        assert isinstance(result, ValidatedParams)
        assert result.count == 0
        assert result.accounts == 10

    def test_invalid_start_date_format(self) -> None:
        result = _validate(start_date="not-a-date")
        assert isinstance(result, list)
        assert any(e.field == "start_date" for e in result)

    def test_invalid_end_date_format(self) -> None:
        result = _validate(end_date="2025/01/01")
        assert isinstance(result, list)
        assert any(e.field == "end_date" for e in result)

    def test_end_before_start_rejected(self) -> None:
        result = _validate(start_date="2025-12-31", end_date="2025-01-01")
        assert isinstance(result, list)
        assert any(e.field == "date_range" for e in result)

    def test_same_start_end_accepted(self) -> None:
        """Same start and end date (single day) must be accepted."""
        result = _validate(start_date="2025-06-15", end_date="2025-06-15")
        assert isinstance(result, ValidatedParams)
        assert result.start_date == result.end_date

    def test_invalid_format_rejected(self) -> None:
        result = _validate(output_format="json")
        assert isinstance(result, list)
        assert any(e.field == "format" for e in result)

    def test_zero_accounts_rejected(self) -> None:
        result = _validate(accounts=0)
        assert isinstance(result, list)
        assert any(e.field == "accounts" for e in result)

    def test_accounts_capped_at_count(self) -> None:
        """Accounts cannot exceed the number of transactions."""
        result = _validate(count=5, accounts=100)
        assert isinstance(result, ValidatedParams)
        assert result.accounts == 5

    def test_currency_case_insensitive(self) -> None:
        result = _validate(currency="jpy")
        assert isinstance(result, ValidatedParams)
        assert result.currency is Currency.JPY

    def test_unknown_currency_rejected(self) -> None:
        result = _validate(currency="XYZ")
        assert isinstance(result, list)
        assert any(e.field == "currency" for e in result)

    def test_multiple_errors_reported(self) -> None:
        result = _validate(count=-5, output_format="xml", currency="ABC")
        assert isinstance(result, list)
        assert {e.field for e in result} == {"count", "format", "currency"}

    def test_seed_generated_when_missing(self) -> None:
        result = _validate(seed=None)
        assert isinstance(result, ValidatedParams)
        assert 0 <= result.seed < 2**31
