"""Unit tests for distribution factories and the config registry."""

from __future__ import annotations

from collections import Counter
from datetime import UTC, date

import numpy as np
import pytest

from txnsynth.distributions import factory
from txnsynth.distributions.amount import TransactionAmountDistribution
from txnsynth.distributions.base import InvalidConfigurationError
from txnsynth.distributions.continuous import (
    ExponentialDistribution,
    LogNormalDistribution,
    NormalDistribution,
    ParetoDistribution,
)
from txnsynth.distributions.factory import (
    create_amount_distribution,
    create_card_network_distribution,
    create_card_type_distribution,
    create_exponential_distribution,
    create_lognormal_distribution,
    create_normal_distribution,
    create_pareto_distribution,
    create_status_distribution,
    create_time_distribution,
    create_transaction_type_distribution,
    numeric_distribution_from_config,
    register_distribution,
    registered_kinds,
)
from txnsynth.distributions.timestamps import TransactionTimeDistribution
from txnsynth.models.money import Currency
from txnsynth.models.transaction import (
    CardTransaction,
    CardType,
    TransactionStatus,
    TransferTransaction,
)


class TestNumericDistributionFromConfig:
    """Tests for building numeric distributions from config mappings."""

    def test_registered_kinds(self) -> None:
        assert registered_kinds() == ["exponential", "lognormal", "normal", "pareto"]

    def test_normal(self) -> None:
        dist = numeric_distribution_from_config(
            {"kind": "normal", "mean": 45, "stddev": 15, "min": 10, "max": 150},
        )
        assert isinstance(dist, NormalDistribution)
        assert (dist.mean, dist.stddev, dist.minimum, dist.maximum) == (45, 15, 10, 150)

    def test_lognormal_from_mu_sigma(self) -> None:
        dist = numeric_distribution_from_config({"kind": "lognormal", "mu": 3.0, "sigma": 0.5})
        assert isinstance(dist, LogNormalDistribution)
        assert dist.mu == 3.0
        assert dist.sigma == 0.5
        assert dist.minimum == 0.0

    def test_lognormal_from_mean_stddev(self) -> None:
        dist = numeric_distribution_from_config(
            {"kind": "lognormal", "mean": 65.0, "stddev": 40.0, "min": 5.0, "max": 500.0},
        )
        assert dist.mean == pytest.approx(65.0)
        assert dist.stddev == pytest.approx(40.0)
        assert dist.maximum == 500.0

    def test_exponential_minimum_defaults_to_zero(self) -> None:
        dist = numeric_distribution_from_config({"kind": "exponential", "mean": 3.0})
        assert isinstance(dist, ExponentialDistribution)
        assert dist.minimum == 0.0

    def test_pareto(self) -> None:
        dist = numeric_distribution_from_config(
            {"kind": "pareto", "scale": 5.0, "shape": 1.8, "max": 2000.0},
        )
        assert isinstance(dist, ParetoDistribution)
        assert dist.minimum == 5.0
        assert dist.maximum == 2000.0

    def test_rng_is_injected(self) -> None:
        rng = np.random.default_rng(1)
        dist = numeric_distribution_from_config({"kind": "normal", "mean": 0, "stddev": 1}, rng)
        assert dist.rng is rng

    def test_unknown_kind_rejected(self) -> None:
        with pytest.raises(InvalidConfigurationError, match="Unknown distribution kind 'weibull'"):
            numeric_distribution_from_config({"kind": "weibull"})

    def test_missing_kind_rejected(self) -> None:
        with pytest.raises(InvalidConfigurationError, match="Unknown distribution kind"):
            numeric_distribution_from_config({"mean": 1.0})

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(InvalidConfigurationError, match="mapping"):
            numeric_distribution_from_config(["normal", 1, 2])  # type: ignore[arg-type]

    def test_missing_parameter_rejected(self) -> None:
        with pytest.raises(InvalidConfigurationError, match="missing 'stddev'"):
            numeric_distribution_from_config({"kind": "normal", "mean": 1.0})

    def test_out_of_range_parameter_rejected(self) -> None:
        with pytest.raises(InvalidConfigurationError, match="stddev"):
            numeric_distribution_from_config({"kind": "normal", "mean": 1.0, "stddev": -2.0})

    def test_non_numeric_parameter_rejected(self) -> None:
        with pytest.raises(InvalidConfigurationError, match="Invalid normal"):
            numeric_distribution_from_config({"kind": "normal", "mean": "lots", "stddev": 1.0})

    def test_register_custom_kind(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A registered builder becomes available to config lookups."""
        monkeypatch.setattr(factory, "_registry", dict(factory._registry))

        @register_distribution("standard_normal")
        def _standard_normal(config, rng):  # noqa: ANN001, ANN202
            return NormalDistribution(0.0, 1.0, rng=rng)

        assert "standard_normal" in registered_kinds()
        dist = numeric_distribution_from_config({"kind": "standard_normal"})
        assert dist.mean == 0.0


class TestCategoricalFactories:
    """Tests for the stock categorical distributions."""

    def test_transaction_types(self) -> None:
        dist = create_transaction_type_distribution()
        assert len(dist) == 5
        assert dist.probability_of(CardTransaction.ecommerce("VISA")) == 0.30
        assert dist.probability_of(CardTransaction.contactless("VISA")) == 0.30
        assert dist.probability_of(CardTransaction.standard("VISA")) == 0.20
        assert dist.probability_of(TransferTransaction.ach("")) == 0.15
        assert dist.probability_of(TransferTransaction.wire(False, "PAYMENT")) == 0.05

    def test_card_share_near_eighty_percent(self) -> None:
        dist = create_transaction_type_distribution(np.random.default_rng(42))
        cards = sum(isinstance(t, CardTransaction) for t in dist.sample_many(20_000))
        assert abs(cards / 20_000 - 0.8) < 0.02

    def test_card_networks(self) -> None:
        dist = create_card_network_distribution()
        assert dist.values == ["VISA", "MASTERCARD", "AMEX", "DISCOVER", "JCB", "UNIONPAY"]
        assert sum(dist.probabilities.values()) == pytest.approx(1.0)

    def test_card_types(self) -> None:
        dist = create_card_type_distribution(np.random.default_rng(42))
        counts = Counter(dist.sample_many(20_000))
        assert set(counts) <= {CardType.CREDIT, CardType.DEBIT, CardType.PREPAID, CardType.GIFT}
        assert abs(counts[CardType.CREDIT] / 20_000 - 0.5) < 0.02

    def test_statuses(self) -> None:
        dist = create_status_distribution()
        assert dist.probability_of(TransactionStatus.COMPLETED) == 0.92
        assert dist.probability_of(TransactionStatus.REFUNDED) == 0.0
        assert sum(dist.probabilities.values()) == pytest.approx(1.0)


class TestShortcutFactories:
    """Tests for the convenience constructors."""

    def test_amount(self) -> None:
        dist = create_amount_distribution(Currency.EUR)
        assert isinstance(dist, TransactionAmountDistribution)
        assert dist.currency is Currency.EUR

    def test_time(self) -> None:
        dist = create_time_distribution(date(2024, 1, 1), date(2024, 1, 31), tz=UTC)
        assert isinstance(dist, TransactionTimeDistribution)
        assert dist.days_in_range == 31
        assert dist.sample().tzinfo is UTC

    def test_lognormal(self) -> None:
        dist = create_lognormal_distribution(100.0, 50.0, 1.0, 1000.0)
        assert dist.mean == pytest.approx(100.0)
        assert (dist.minimum, dist.maximum) == (1.0, 1000.0)

    def test_normal(self) -> None:
        dist = create_normal_distribution(10.0, 2.0, 0.0, 20.0)
        assert isinstance(dist, NormalDistribution)

    def test_exponential(self) -> None:
        dist = create_exponential_distribution(30.0, 1.0)
        assert dist.mean == 30.0
        assert dist.minimum == 1.0

    def test_pareto_minimum_is_scale(self) -> None:
        dist = create_pareto_distribution(10.0, 2.0, 100.0)
        assert isinstance(dist, ParetoDistribution)
        assert dist.scale == dist.minimum == 10.0
        assert dist.maximum == 100.0
