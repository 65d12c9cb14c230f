"""YAML configuration loading for the transaction generator.

The config file declares the amount distributions per merchant category,
hourly-weight overrides per day of week and the card network mix. Values
are validated on load; builders then turn the sections into samplers.
"""

from __future__ import annotations

from datetime import date, tzinfo
from pathlib import Path
from typing import Any

import yaml
from numpy.random import Generator

from txnsynth.distributions.amount import TransactionAmountDistribution, require_non_negative
from txnsynth.distributions.base import InvalidConfigurationError
from txnsynth.distributions.discrete import DiscreteDistribution
from txnsynth.distributions.factory import (
    create_card_network_distribution,
    numeric_distribution_from_config,
)
from txnsynth.distributions.timestamps import HOURS_PER_DAY, TransactionTimeDistribution, Weekday
from txnsynth.lib.logging_config import get_logger
from txnsynth.models.money import Currency

logger = get_logger("config_loader")

DEFAULT_CONFIG_PATH = Path("config/generator.yaml")


def load_config(config_path: Path) -> dict[str, Any]:
    """Load and validate configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Parsed configuration dictionary.

    Raises:
        FileNotFoundError: If config file does not exist.
        InvalidConfigurationError: If config values are invalid.
    """
    if not config_path.exists():
        msg = f"Config file not found: {config_path}"
        raise FileNotFoundError(msg)

    with open(config_path, encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    _validate_config(config)
    logger.info("Config loaded from %s", config_path)
    return config


def _section(config: dict[str, Any], name: str) -> dict[str, Any]:
    value = config.get(name) or {}
    if not isinstance(value, dict):
        msg = f"Config section '{name}' must be a mapping, got {type(value).__name__}"
        raise InvalidConfigurationError(msg)
    return value


def _validate_config(config: Any) -> None:
    """Validate configuration values.

    Distribution parameters are checked by building each distribution once.

    Args:
        config: Configuration dictionary to validate.

    Raises:
        InvalidConfigurationError: If any config value is invalid.
    """
    if not isinstance(config, dict):
        msg = f"Config root must be a mapping, got {type(config).__name__}"
        raise InvalidConfigurationError(msg)

    gen = _section(config, "generator")
    currency = str(gen.get("currency", Currency.USD.value)).strip().upper()
    if currency not in Currency.__members__:
        msg = f"Currency must be one of {', '.join(Currency.__members__)}, got {currency!r}"
        raise InvalidConfigurationError(msg)

    accounts = gen.get("accounts", 100)
    if not isinstance(accounts, int) or accounts < 1:
        msg = f"Account count must be a positive integer, got {accounts!r}"
        raise InvalidConfigurationError(msg)

    amounts = _section(config, "amounts")
    if "default" in amounts:
        require_non_negative("Default", numeric_distribution_from_config(amounts["default"]))
    categories = amounts.get("categories") or {}
    if not isinstance(categories, dict):
        msg = "Config 'amounts.categories' must map MCC codes to distributions"
        raise InvalidConfigurationError(msg)
    for mcc, dist_config in categories.items():
        if not str(mcc).strip():
            msg = "Config 'amounts.categories' contains a blank MCC code"
            raise InvalidConfigurationError(msg)
        require_non_negative(f"MCC {mcc}", numeric_distribution_from_config(dist_config))

    for day, weights in _section(config, "hourly_weights").items():
        weekday = Weekday.parse(day)
        if not isinstance(weights, list) or len(weights) != HOURS_PER_DAY:
            msg = f"Hourly weights for {weekday.name} must be a list of {HOURS_PER_DAY} numbers"
            raise InvalidConfigurationError(msg)
        numeric = all(isinstance(w, (int, float)) and w >= 0 for w in weights)
        if not numeric or not sum(weights) > 0:
            msg = f"Hourly weights for {weekday.name} must be non-negative and not all zero"
            raise InvalidConfigurationError(msg)

    networks = _section(config, "card_networks")
    for network, weight in networks.items():
        if not isinstance(weight, (int, float)) or weight <= 0:
            msg = f"Card network weight for {network} must be positive, got {weight!r}"
            raise InvalidConfigurationError(msg)


def build_amount_distribution(
    config: dict[str, Any],
    currency: Currency,
    rng: Generator | None = None,
) -> TransactionAmountDistribution:
    """Build the amount sampler, applying the config's default and category overrides.

    Args:
        config: Validated configuration dictionary.
        currency: Currency of the sampled amounts.
        rng: Random generator shared by every distribution built here.

    Returns:
        A TransactionAmountDistribution with the configured overrides.
    """
    amounts = _section(config, "amounts")
    default = None
    if "default" in amounts:
        default = numeric_distribution_from_config(amounts["default"], rng)

    sampler = TransactionAmountDistribution(currency, default, rng=rng)
    for mcc, dist_config in (amounts.get("categories") or {}).items():
        sampler.set_category_distribution(str(mcc), numeric_distribution_from_config(dist_config, rng))
    return sampler


def build_time_distribution(
    config: dict[str, Any],
    start_date: date,
    end_date: date,
    rng: Generator | None = None,
    tz: tzinfo | None = None,
) -> TransactionTimeDistribution:
    """Build the timestamp sampler with the config's hourly-weight overrides."""
    return TransactionTimeDistribution(
        start_date,
        end_date,
        _section(config, "hourly_weights"),
        rng=rng,
        tz=tz,
    )


def build_card_network_distribution(
    config: dict[str, Any], rng: Generator | None = None,
) -> DiscreteDistribution[str]:
    """Build the card network mix, or the stock market-share mix if unset."""
    networks = _section(config, "card_networks")
    if not networks:
        return create_card_network_distribution(rng)
    return DiscreteDistribution("CardNetwork", networks, rng=rng)
