"""Factories for the distributions used in transaction generation.

Besides ready-made samplers for common attributes, this module keeps a
registry of numeric distribution builders keyed by ``kind`` so that
distributions can be declared in YAML configuration::

    {"kind": "lognormal", "mean": 65.0, "stddev": 40.0, "min": 5.0, "max": 500.0}
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from datetime import date, tzinfo
from typing import Any

from numpy.random import Generator

from txnsynth.distributions.amount import TransactionAmountDistribution
from txnsynth.distributions.base import InvalidConfigurationError, NumericDistribution
from txnsynth.distributions.continuous import (
    ExponentialDistribution,
    LogNormalDistribution,
    NormalDistribution,
    ParetoDistribution,
)
from txnsynth.distributions.discrete import DiscreteDistribution
from txnsynth.distributions.timestamps import TransactionTimeDistribution
from txnsynth.models.money import Currency
from txnsynth.models.transaction import (
    CardTransaction,
    CardType,
    TransactionStatus,
    TransactionType,
    TransferTransaction,
)

NumericBuilder = Callable[[Mapping[str, Any], Generator | None], NumericDistribution]

# Registry of config builders, keyed by distribution kind
_registry: dict[str, NumericBuilder] = {}


def register_distribution(kind: str) -> Callable[[NumericBuilder], NumericBuilder]:
    """Register a builder for ``{"kind": kind, ...}`` config mappings."""

    def _inner(builder: NumericBuilder) -> NumericBuilder:
        _registry[kind] = builder
        return builder

    return _inner


def registered_kinds() -> list[str]:
    return sorted(_registry)


def numeric_distribution_from_config(
    config: Mapping[str, Any], rng: Generator | None = None,
) -> NumericDistribution:
    """Build a numeric distribution from a config mapping.

    Args:
        config: Mapping with a ``kind`` key plus that kind's parameters.
            Bounds use the keys ``min`` and ``max`` and default to unbounded.
        rng: Random generator for the new distribution.

    Returns:
        The configured distribution.

    Raises:
        InvalidConfigurationError: If the kind is unknown, a required
            parameter is missing, or a parameter is out of range.
    """
    if not isinstance(config, Mapping):
        msg = f"Distribution config must be a mapping, got {type(config).__name__}"
        raise InvalidConfigurationError(msg)
    kind = config.get("kind")
    try:
        builder = _registry[kind]
    except (KeyError, TypeError):
        msg = f"Unknown distribution kind {kind!r}; supported: {registered_kinds()}"
        raise InvalidConfigurationError(msg) from None
    try:
        return builder(config, rng)
    except InvalidConfigurationError:
        raise
    except KeyError as exc:
        msg = f"{kind} distribution config is missing {exc.args[0]!r}"
        raise InvalidConfigurationError(msg) from None
    except (TypeError, ValueError) as exc:
        msg = f"Invalid {kind} distribution config: {exc}"
        raise InvalidConfigurationError(msg) from exc


def _bounds(config: Mapping[str, Any], default_min: float = -math.inf) -> tuple[float, float]:
    return float(config.get("min", default_min)), float(config.get("max", math.inf))


@register_distribution("normal")
def _normal_from_config(config: Mapping[str, Any], rng: Generator | None) -> NumericDistribution:
    minimum, maximum = _bounds(config)
    return NormalDistribution(config["mean"], config["stddev"], minimum, maximum, rng=rng)


@register_distribution("lognormal")
def _lognormal_from_config(config: Mapping[str, Any], rng: Generator | None) -> NumericDistribution:
    # Either the underlying (mu, sigma) or the desired arithmetic (mean, stddev)
    minimum, maximum = _bounds(config, default_min=0.0)
    if "mu" in config or "sigma" in config:
        return LogNormalDistribution(config["mu"], config["sigma"], minimum, maximum, rng=rng)
    return LogNormalDistribution.from_mean_and_stddev(
        config["mean"], config["stddev"], minimum, maximum, rng=rng,
    )


@register_distribution("exponential")
def _exponential_from_config(config: Mapping[str, Any], rng: Generator | None) -> NumericDistribution:
    minimum, maximum = _bounds(config, default_min=0.0)
    return ExponentialDistribution(config["mean"], minimum, maximum, rng=rng)


@register_distribution("pareto")
def _pareto_from_config(config: Mapping[str, Any], rng: Generator | None) -> NumericDistribution:
    return ParetoDistribution(
        config["scale"], config["shape"], float(config.get("max", math.inf)), rng=rng,
    )


def create_amount_distribution(
    currency: Currency, rng: Generator | None = None,
) -> TransactionAmountDistribution:
    return TransactionAmountDistribution(currency, rng=rng)


def create_transaction_type_distribution(
    rng: Generator | None = None,
) -> DiscreteDistribution[TransactionType]:
    """Card payments 80% (online, contactless, in person), transfers 20%."""
    weights: dict[TransactionType, float] = {
        CardTransaction.ecommerce("VISA"): 0.30,
        CardTransaction.contactless("VISA"): 0.30,
        CardTransaction.standard("VISA"): 0.20,
        TransferTransaction.ach(""): 0.15,
        TransferTransaction.wire(False, "PAYMENT"): 0.05,
    }
    return DiscreteDistribution("TransactionType", weights, rng=rng)


def create_card_network_distribution(rng: Generator | None = None) -> DiscreteDistribution[str]:
    """Card networks weighted by approximate market share."""
    weights = {
        "VISA": 0.35,
        "MASTERCARD": 0.30,
        "AMEX": 0.15,
        "DISCOVER": 0.10,
        "JCB": 0.05,
        "UNIONPAY": 0.05,
    }
    return DiscreteDistribution("CardNetwork", weights, rng=rng)


def create_card_type_distribution(rng: Generator | None = None) -> DiscreteDistribution[CardType]:
    weights = {
        CardType.CREDIT: 0.50,
        CardType.DEBIT: 0.40,
        CardType.PREPAID: 0.08,
        CardType.GIFT: 0.02,
    }
    return DiscreteDistribution("CardType", weights, rng=rng)


def create_status_distribution(
    rng: Generator | None = None,
) -> DiscreteDistribution[TransactionStatus]:
    weights = {
        TransactionStatus.COMPLETED: 0.92,
        TransactionStatus.PENDING: 0.05,
        TransactionStatus.DECLINED: 0.02,
        TransactionStatus.FAILED: 0.01,
    }
    return DiscreteDistribution("TransactionStatus", weights, rng=rng)


def create_time_distribution(
    start_date: date,
    end_date: date,
    rng: Generator | None = None,
    tz: tzinfo | None = None,
) -> TransactionTimeDistribution:
    return TransactionTimeDistribution(start_date, end_date, rng=rng, tz=tz)


def create_lognormal_distribution(
    mean: float, stddev: float, minimum: float, maximum: float, rng: Generator | None = None,
) -> NumericDistribution:
    """Log-normal matching the desired arithmetic mean and stddev."""
    return LogNormalDistribution.from_mean_and_stddev(mean, stddev, minimum, maximum, rng=rng)


def create_normal_distribution(
    mean: float, stddev: float, minimum: float, maximum: float, rng: Generator | None = None,
) -> NumericDistribution:
    return NormalDistribution(mean, stddev, minimum, maximum, rng=rng)


def create_exponential_distribution(
    mean: float, minimum: float, rng: Generator | None = None,
) -> NumericDistribution:
    return ExponentialDistribution(mean, minimum, rng=rng)


def create_pareto_distribution(
    minimum: float, shape: float, maximum: float, rng: Generator | None = None,
) -> NumericDistribution:
    """Pareto whose scale (and therefore minimum) is ``minimum``."""
    return ParetoDistribution(minimum, shape, maximum, rng=rng)
