"""Transaction amount sampler conditioned on merchant category."""

from __future__ import annotations

import math

from numpy.random import Generator

from txnsynth.distributions.base import Distribution, InvalidConfigurationError, NumericDistribution
from txnsynth.distributions.continuous import LogNormalDistribution, NormalDistribution
from txnsynth.lib.logging_config import get_logger
from txnsynth.models.merchant import Merchant
from txnsynth.models.money import Currency, Money

logger = get_logger("distributions.amount")

# Share of amounts rewritten to a psychological price ending.
PRICE_PATTERN_PROBABILITY: float = 0.7
# Given a rewrite, share ending in .99 (the rest end in .95).
NINETY_NINE_PROBABILITY: float = 0.8


def default_amount_distribution(rng: Generator | None = None) -> NumericDistribution:
    """General spending: log-normal, mean 50, stddev 75, bounded to [1, 5000]."""
    return LogNormalDistribution.from_mean_and_stddev(50.0, 75.0, 1.0, 5000.0, rng=rng)


def default_category_distributions(rng: Generator | None = None) -> dict[str, NumericDistribution]:
    """Build the stock per-MCC amount distributions.

    Args:
        rng: Random generator shared by every distribution in the table.

    Returns:
        Mapping of merchant category code to amount distribution.
    """
    return {
        # Grocery stores: clustered around smaller baskets
        "5411": LogNormalDistribution.from_mean_and_stddev(65.0, 40.0, 5.0, 500.0, rng=rng),
        # Restaurants
        "5812": LogNormalDistribution.from_mean_and_stddev(35.0, 25.0, 5.0, 300.0, rng=rng),
        # Gas stations: symmetric around a typical fill-up
        "5541": NormalDistribution(45.0, 15.0, 10.0, 150.0, rng=rng),
        # Department stores
        "5311": LogNormalDistribution.from_mean_and_stddev(85.0, 100.0, 10.0, 1000.0, rng=rng),
        # Electronics
        "5732": LogNormalDistribution.from_mean_and_stddev(250.0, 300.0, 20.0, 5000.0, rng=rng),
        # Utility bills
        "4900": NormalDistribution(120.0, 50.0, 20.0, 500.0, rng=rng),
        # Travel: high amounts, high variance
        "4722": LogNormalDistribution.from_mean_and_stddev(500.0, 700.0, 50.0, 10000.0, rng=rng),
        # Healthcare
        "8099": LogNormalDistribution.from_mean_and_stddev(150.0, 200.0, 20.0, 3000.0, rng=rng),
    }


def require_non_negative(label: str, distribution: NumericDistribution) -> None:
    """Reject amount distributions that can draw below zero."""
    if distribution.minimum < 0:
        msg = f"{label} amount distribution must have a minimum >= 0, got {distribution.minimum}"
        raise InvalidConfigurationError(msg)


class TransactionAmountDistribution(Distribution[Money]):
    """Sample realistic transaction amounts for a currency.

    The raw amount comes from the distribution registered for the
    merchant's category code, falling back to the default distribution.
    The raw value then goes through a price-ending pass: with probability
    0.7 it becomes ``floor(amount) + 0.99`` (80%) or ``+ 0.95`` (20%).
    The result is returned as ``Money`` scaled to the currency.

    The category table is meant to be configured before sampling starts;
    ``set_category_distribution`` is not safe to call while other threads
    sample.
    """

    name = "TransactionAmount"

    def __init__(
        self,
        currency: Currency,
        default_distribution: NumericDistribution | None = None,
        *,
        rng: Generator | None = None,
    ) -> None:
        """Initialize the sampler with the stock category table.

        Args:
            currency: Currency of every sampled amount.
            default_distribution: Used for merchants without a registered
                category. Defaults to ``default_amount_distribution``.
            rng: Random generator for the price-ending pass. The built-in
                distributions share it, so one seed fixes the whole sequence.
        """
        super().__init__(rng=rng)
        self._currency = Currency(currency)
        if default_distribution is not None:
            require_non_negative("Default", default_distribution)
        self._default = (
            default_distribution
            if default_distribution is not None
            else default_amount_distribution(self._rng)
        )
        self._by_category = default_category_distributions(self._rng)

    @property
    def currency(self) -> Currency:
        return self._currency

    @property
    def default_distribution(self) -> NumericDistribution:
        return self._default

    @property
    def categories(self) -> list[str]:
        """Merchant category codes with a registered distribution."""
        return sorted(self._by_category)

    def set_category_distribution(
        self, mcc: str, distribution: NumericDistribution,
    ) -> TransactionAmountDistribution:
        """Register or replace the distribution for a merchant category.

        Args:
            mcc: Merchant category code.
            distribution: Distribution of raw amounts for that category.

        Returns:
            This sampler, for chaining.

        Raises:
            InvalidConfigurationError: If ``mcc`` is blank or
                ``distribution`` is not a NumericDistribution
                or can draw negative amounts.
        """
        if not isinstance(mcc, str) or not mcc.strip():
            msg = f"Merchant category code must be a non-empty string, got {mcc!r}"
            raise InvalidConfigurationError(msg)
        if not isinstance(distribution, NumericDistribution):
            msg = (
                f"Distribution for MCC {mcc} must be a NumericDistribution, "
                f"got {type(distribution).__name__}"
            )
            raise InvalidConfigurationError(msg)
        require_non_negative(f"MCC {mcc}", distribution)

        replaced = mcc in self._by_category
        self._by_category[mcc] = distribution
        logger.debug(
            "%s amount distribution for MCC %s: %s",
            "Replaced" if replaced else "Registered",
            mcc,
            distribution,
        )
        return self

    def distribution_for(self, mcc: str | None) -> NumericDistribution:
        """Return the distribution used for ``mcc`` (the default when unregistered)."""
        if mcc is None:
            return self._default
        return self._by_category.get(mcc, self._default)

    def apply_price_pattern(self, amount: float) -> float:
        """Rewrite ``amount`` to a .99/.95 ending with probability 0.7."""
        if self._rng.random() < PRICE_PATTERN_PROBABILITY:
            amount = math.floor(amount)
            if self._rng.random() < NINETY_NINE_PROBABILITY:
                amount += 0.99
            else:
                amount += 0.95
        return amount

    def sample(self, merchant: Merchant | None = None) -> Money:
        """Sample an amount, conditioned on the merchant's category if given.

        Args:
            merchant: Merchant receiving the payment. ``None`` uses the
                default distribution.

        Returns:
            Amount scaled to the currency's fraction digits (HALF_UP).
        """
        distribution = self.distribution_for(merchant.mcc if merchant is not None else None)
        amount = self.apply_price_pattern(distribution.sample())
        return Money.of(amount, self._currency)

    @property
    def description(self) -> str:
        return (
            f"Transaction amount distribution in {self._currency} "
            f"with {len(self._by_category)} merchant categories"
        )
