"""Input parameter validation for the transaction generator."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from txnsynth.models.money import Currency


@dataclass
class ValidationError:
    """Represents a single validation failure.

    Attributes:
        field: Name of the invalid parameter.
        message: Human-readable error description.
    """

    field: str
    message: str


@dataclass
class ValidatedParams:
    """Validated and normalized generation parameters.

    Attributes:
        count: Number of transactions to generate.
        start_date: Start of the date range (inclusive).
        end_date: End of the date range (inclusive).
        accounts: Number of unique accounts.
        currency: Currency of every generated amount.
        format: Output format ('parquet' or 'csv').
        seed: Random seed (may be auto-generated).
    """

    count: int
    start_date: date
    end_date: date
    accounts: int
    currency: Currency
    format: str
    seed: int


def _parse_date(field_name: str, value: str, errors: list[ValidationError]) -> date | None:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        errors.append(
            ValidationError(field_name, f"Invalid date format '{value}', expected YYYY-MM-DD")
        )
        return None


def validate_params(
    *,
    count: int,
    start_date: str | None,
    end_date: str | None,
    accounts: int,
    currency: str,
    output_format: str,
    seed: int | None,
) -> ValidatedParams | list[ValidationError]:
    """Validate and normalize all generation parameters.

    Args:
        count: Requested number of transactions.
        start_date: Start date string (YYYY-MM-DD) or None for 90 days ago.
        end_date: End date string (YYYY-MM-DD) or None for today.
        accounts: Requested number of unique accounts.
        currency: Currency code (e.g. 'USD', 'JPY').
        output_format: Output format string ('parquet' or 'csv').
        seed: Random seed or None for auto-generated.

    Returns:
        ValidatedParams on success, or a list of ValidationError on failure.
    """
    errors: list[ValidationError] = []

    if count < 0:
        errors.append(ValidationError("count", f"Count must be >= 0, got {count}"))

    today = date.today()
    parsed_start = (
        _parse_date("start_date", start_date, errors)
        if start_date is not None
        else today - timedelta(days=90)
    )
    parsed_end = _parse_date("end_date", end_date, errors) if end_date is not None else today

    if parsed_start is not None and parsed_end is not None and parsed_start > parsed_end:
        errors.append(
            ValidationError(
                "date_range",
                f"Start date ({parsed_start}) must be before or equal to "
                f"end date ({parsed_end})",
            )
        )

    if accounts < 1:
        errors.append(
            ValidationError("accounts", f"Account count must be >= 1, got {accounts}")
        )

    normalized_currency = currency.upper()
    if normalized_currency not in Currency.__members__:
        errors.append(
            ValidationError(
                "currency",
                f"Unsupported currency '{currency}', "
                f"must be one of: {', '.join(Currency.__members__)}",
            )
        )

    valid_formats = {"parquet", "csv"}
    if output_format not in valid_formats:
        errors.append(
            ValidationError(
                "format",
                f"Invalid format '{output_format}', "
                f"must be one of: {', '.join(sorted(valid_formats))}",
            )
        )

    if errors:
        return errors

    # Accounts cannot exceed the number of transactions
    effective_accounts = min(accounts, count) if count > 0 else accounts
    effective_seed = seed if seed is not None else secrets.randbelow(2**31)

    return ValidatedParams(
        count=count,
        start_date=parsed_start,  # type: ignore[arg-type]
        end_date=parsed_end,  # type: ignore[arg-type]
        accounts=effective_accounts,
        currency=Currency(normalized_currency),
        format=output_format,
        seed=effective_seed,
    )
