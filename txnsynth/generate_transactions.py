"""Synthetic card and transfer transaction generator.

Draws amounts, timestamps, merchants, transaction types and statuses from
configurable distributions and writes the records as Parquet (default) or
CSV files with timestamped filenames.

Usage:
    txnsynth-generate [OPTIONS]

Examples:
    txnsynth-generate
    txnsynth-generate --count 50000 --seed 42
    txnsynth-generate --format csv --start-date 2025-01-01 --end-date 2025-12-31
    txnsynth-generate --currency JPY --config config/generator.yaml
"""

from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import numpy as np
import polars as pl
import yaml

from txnsynth.distributions.amount import TransactionAmountDistribution
from txnsynth.distributions.base import InvalidConfigurationError, SamplingExhaustedError
from txnsynth.distributions.discrete import DiscreteDistribution
from txnsynth.distributions.factory import (
    create_status_distribution,
    create_transaction_type_distribution,
)
from txnsynth.distributions.timestamps import TransactionTimeDistribution
from txnsynth.lib.config_loader import (
    DEFAULT_CONFIG_PATH,
    build_amount_distribution,
    build_card_network_distribution,
    build_time_distribution,
    load_config,
)
from txnsynth.lib.logging_config import GenerationMetadata, get_logger, setup_logging
from txnsynth.lib.validators import ValidatedParams, validate_params
from txnsynth.models.account import Account, generate_accounts
from txnsynth.models.merchant import MerchantCatalog, load_merchant_catalog, select_merchants
from txnsynth.models.transaction import (
    CardTransaction,
    Transaction,
    TransactionSchema,
    TransactionStatus,
    TransactionType,
    build_transaction_dataframe,
    generate_transaction_ids,
)

logger = get_logger("generator")

DEFAULT_OUTPUT_DIR = "data/raw"
CHUNK_THRESHOLD = 1_000_000
CHUNK_SIZE = 500_000


@dataclass
class GenerationContext:
    """Samplers and reference data shared by every chunk of a run.

    All samplers draw from the same seeded generator, so a run is fully
    determined by its seed, parameters and configuration.
    """

    rng: np.random.Generator
    accounts: list[Account]
    catalog: MerchantCatalog
    amounts: TransactionAmountDistribution
    timestamps: TransactionTimeDistribution
    transaction_types: DiscreteDistribution[TransactionType]
    statuses: DiscreteDistribution[TransactionStatus]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments for transaction generation.

    Args:
        argv: Command-line arguments. Defaults to sys.argv[1:].

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Generate synthetic financial transaction data.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  txnsynth-generate\n"
            "  txnsynth-generate --count 50000 --seed 42\n"
            "  txnsynth-generate --format csv --currency EUR\n"
            "  txnsynth-generate --start-date 2025-01-01 --end-date 2025-12-31\n"
        ),
    )
    parser.add_argument(
        "--count",
        type=int,
        default=10_000,
        help="Number of transactions to generate (default: 10000)",
    )
    parser.add_argument(
        "--start-date",
        type=str,
        default=None,
        help="Start date for transactions in YYYY-MM-DD format (default: 90 days ago)",
    )
    parser.add_argument(
        "--end-date",
        type=str,
        default=None,
        help="End date for transactions in YYYY-MM-DD format (default: today)",
    )
    parser.add_argument(
        "--accounts",
        type=int,
        default=None,
        help="Number of unique accounts (default: from config, else 100)",
    )
    parser.add_argument(
        "--currency",
        type=str,
        default=None,
        help="Currency code of generated amounts (default: from config, else USD)",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["parquet", "csv"],
        default="parquet",
        help="Output format: parquet or csv (default: parquet)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible generation (default: random)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=DEFAULT_OUTPUT_DIR,
        help=f"Output directory (default: {DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help=f"YAML distribution config (default: {DEFAULT_CONFIG_PATH} if present)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit log records as JSON on stderr",
    )
    return parser.parse_args(argv)


def _load_run_config(config_arg: str | None) -> dict[str, Any]:
    """Load the explicit config, else the default file if it exists, else nothing."""
    if config_arg is not None:
        return load_config(Path(config_arg))
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    logger.info("No config file found, using built-in distributions")
    return {}


def build_context(params: ValidatedParams, config: dict[str, Any]) -> GenerationContext:
    """Build every sampler of a run from one generator seeded with ``params.seed``.

    Args:
        params: Validated generation parameters.
        config: Validated configuration dictionary (may be empty).

    Returns:
        GenerationContext ready for chunk generation.
    """
    rng = np.random.default_rng(params.seed)
    networks = build_card_network_distribution(config, rng)
    return GenerationContext(
        rng=rng,
        accounts=generate_accounts(rng, params.accounts, seed=params.seed, card_networks=networks),
        catalog=load_merchant_catalog(),
        amounts=build_amount_distribution(config, params.currency, rng),
        timestamps=build_time_distribution(
            config, params.start_date, params.end_date, rng, tz=UTC,
        ),
        transaction_types=create_transaction_type_distribution(rng),
        statuses=create_status_distribution(rng),
    )


def _generate_chunk(context: GenerationContext, chunk_size: int) -> pl.DataFrame:
    """Generate a single chunk of transactions.

    Card payments are charged to the paying account's card network.

    Args:
        context: Shared samplers (their generator advances across chunks).
        chunk_size: Number of records to generate in this chunk.

    Returns:
        Polars DataFrame with chunk_size transaction records.
    """
    rng = context.rng
    merchants = select_merchants(rng, context.catalog, chunk_size)
    transaction_ids = generate_transaction_ids(rng, chunk_size)
    account_assignments = rng.integers(0, len(context.accounts), size=chunk_size)

    transactions: list[Transaction] = []
    for i in range(chunk_size):
        account = context.accounts[account_assignments[i]]
        transaction_type = context.transaction_types.sample()
        if isinstance(transaction_type, CardTransaction):
            transaction_type = replace(transaction_type, network=account.card_network)

        transactions.append(
            Transaction(
                transaction_id=transaction_ids[i],
                timestamp=context.timestamps.sample(),
                amount=context.amounts.sample(merchants[i]),
                merchant=merchants[i],
                account_id=account.account_id,
                transaction_type=transaction_type,
                status=context.statuses.sample(),
            )
        )

    return build_transaction_dataframe(transactions)


def generate_transactions(
    params: ValidatedParams, output_dir: Path, config: dict[str, Any] | None = None,
) -> tuple[pl.DataFrame, Path]:
    """Generate synthetic transactions and write to file.

    Datasets larger than CHUNK_THRESHOLD records are generated in chunks
    of CHUNK_SIZE.

    Args:
        params: Validated generation parameters.
        output_dir: Directory to write output file.
        config: Validated distribution configuration. Defaults to the
            built-in distributions.

    Returns:
        Tuple of (generated DataFrame, output file path). The DataFrame is
        empty for chunked runs, whose data is only on disk.
    """
    if params.count == 0:
        logger.info("Generating 0 records, producing empty file with schema")
        df = pl.DataFrame(schema=TransactionSchema.polars_schema())
        output_path = _write_output(df, params.format, output_dir)
        return df, output_path

    logger.info(
        "Generating %d %s transactions across %d accounts",
        params.count,
        params.currency,
        params.accounts,
        extra={"seed": params.seed},
    )
    context = build_context(params, config or {})
    logger.debug("Amounts: %s", context.amounts)
    logger.debug("Timestamps: %s", context.timestamps)

    if params.count > CHUNK_THRESHOLD:
        logger.info(
            "Large dataset (%d records), using chunked generation with chunk size %d",
            params.count,
            CHUNK_SIZE,
        )
        output_path = _write_chunked(context, params, output_dir)
        df = pl.DataFrame(schema=TransactionSchema.polars_schema())
        return df, output_path

    df = _generate_chunk(context, params.count)
    output_path = _write_output(df, params.format, output_dir)
    return df, output_path


def _output_path(output_dir: Path, fmt: str) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    timestamp_str = datetime.now().strftime("%Y%m%d_%H%M%S")
    return output_dir / f"transactions_{timestamp_str}.{fmt}"


def _write_chunked(
    context: GenerationContext, params: ValidatedParams, output_dir: Path,
) -> Path:
    """Write large datasets in chunks.

    CSV chunks are appended to the file as they are generated. Parquet
    chunks are collected and written as a single file.

    Args:
        context: Shared samplers.
        params: Validated generation parameters.
        output_dir: Directory to write the file.

    Returns:
        Path to the written file.
    """
    output_path = _output_path(output_dir, params.format)

    remaining = params.count
    chunk_num = 0
    chunks: list[pl.DataFrame] = []

    while remaining > 0:
        chunk_size = min(CHUNK_SIZE, remaining)
        chunk_num += 1
        logger.info("Generating chunk %d (%d records)", chunk_num, chunk_size)

        chunk_df = _generate_chunk(context, chunk_size)

        if params.format == "csv":
            if chunk_num == 1:
                chunk_df.write_csv(output_path)
            else:
                with open(output_path, "a", encoding="utf-8") as f:
                    f.write(chunk_df.write_csv(file=None, include_header=False))
        else:
            chunks.append(chunk_df)

        remaining -= chunk_size

    if params.format == "parquet" and chunks:
        pl.concat(chunks).write_parquet(output_path)

    return output_path


def _write_output(df: pl.DataFrame, fmt: str, output_dir: Path) -> Path:
    """Write DataFrame to file in the specified format.

    Args:
        df: Polars DataFrame to write.
        fmt: Output format ('parquet' or 'csv').
        output_dir: Directory to write the file (created if missing).

    Returns:
        Path to the written file.
    """
    output_path = _output_path(output_dir, fmt)
    if fmt == "parquet":
        df.write_parquet(output_path)
    else:
        df.write_csv(output_path)
    return output_path


def main(argv: list[str] | None = None) -> int:
    """Main entry point for transaction generation.

    Args:
        argv: Command-line arguments. Defaults to sys.argv[1:].

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    args = parse_args(argv)
    setup_logging(args.log_level, json_format=args.json_logs)

    try:
        config = _load_run_config(args.config)
    except (FileNotFoundError, InvalidConfigurationError, yaml.YAMLError) as exc:
        logger.error("Configuration error: %s", exc)
        return 1

    generator_config = config.get("generator") or {}
    requested_accounts = (
        args.accounts if args.accounts is not None else generator_config.get("accounts", 100)
    )
    result = validate_params(
        count=args.count,
        start_date=args.start_date,
        end_date=args.end_date,
        accounts=requested_accounts,
        currency=args.currency or generator_config.get("currency", "USD"),
        output_format=args.format,
        seed=args.seed,
    )

    if isinstance(result, list):
        for error in result:
            logger.error("Validation error [%s]: %s", error.field, error.message)
        return 1

    params = result

    if requested_accounts > params.accounts and params.count > 0:
        logger.warning(
            "Account count capped from %d to %d (cannot exceed transaction count)",
            requested_accounts,
            params.accounts,
        )

    start_time = time.monotonic()
    output_dir = Path(args.output_dir)

    try:
        _df, output_path = generate_transactions(params, output_dir, config)
    except (InvalidConfigurationError, SamplingExhaustedError) as exc:
        logger.error("Generation failed: %s", exc)
        return 1
    except Exception:
        logger.exception("Generation failed")
        return 1

    duration = time.monotonic() - start_time

    metadata = GenerationMetadata(
        records_generated=params.count,
        seed=params.seed,
        start_date=str(params.start_date),
        end_date=str(params.end_date),
        accounts=params.accounts,
        currency=params.currency.value,
        format=params.format,
        output_path=str(output_path),
        duration_seconds=round(duration, 2),
    )
    print(metadata.to_json())

    return 0


if __name__ == "__main__":
    sys.exit(main())
