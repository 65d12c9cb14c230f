"""Unit tests for the weekday/weekend TransactionTimeDistribution."""

from __future__ import annotations

from collections import Counter
from datetime import UTC, date

import numpy as np
import pytest

from txnsynth.distributions.base import InvalidConfigurationError
from txnsynth.distributions.timestamps import (
    DEFAULT_WEEKDAY_WEIGHTS,
    DEFAULT_WEEKEND_WEIGHTS,
    HOURS_PER_DAY,
    TransactionTimeDistribution,
    Weekday,
)

# 2024-01-01 is a Monday
WEEK_START = date(2024, 1, 1)
WEEK_END = date(2024, 1, 7)


def _only_hour(hour: int) -> list[float]:
    weights = [0.0] * HOURS_PER_DAY
    weights[hour] = 1.0
    return weights


class _TopOfRange:
    """Generator stand-in whose uniform draw is always 1.0."""

    def random(self) -> float:
        return 1.0


class TestWeekday:
    """Tests for day-of-week parsing."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("saturday", Weekday.SATURDAY), (" Monday ", Weekday.MONDAY), (6, Weekday.SUNDAY),
         (Weekday.FRIDAY, Weekday.FRIDAY)],
    )
    def test_parse(self, value: Weekday | int | str, expected: Weekday) -> None:
        assert Weekday.parse(value) is expected

    @pytest.mark.parametrize("value", ["funday", 7, -1])
    def test_parse_rejects_unknown_day(self, value: int | str) -> None:
        with pytest.raises(InvalidConfigurationError):
            Weekday.parse(value)

    def test_is_weekend(self) -> None:
        assert Weekday.SATURDAY.is_weekend
        assert Weekday.SUNDAY.is_weekend
        assert not Weekday.FRIDAY.is_weekend

    def test_matches_date_weekday(self) -> None:
        assert Weekday(WEEK_START.weekday()) is Weekday.MONDAY


class TestTransactionTimeDistribution:
    """Tests for date, hour and timestamp sampling."""

    def test_samples_within_range(self) -> None:
        dist = TransactionTimeDistribution(WEEK_START, WEEK_END, rng=np.random.default_rng(42))
        for ts in dist.sample_many(2_000):
            assert WEEK_START <= ts.date() <= WEEK_END

    def test_all_days_covered(self) -> None:
        """Dates are uniform, so a week-long range hits every day."""
        dist = TransactionTimeDistribution(WEEK_START, WEEK_END, rng=np.random.default_rng(42))
        days = Counter(dist.sample_date() for _ in range(7_000))
        assert len(days) == 7
        assert all(800 < n < 1_200 for n in days.values())

    def test_lunch_hour_busier_than_night(self) -> None:
        """Hour 12 must be sampled far more often than hour 2."""
        dist = TransactionTimeDistribution(WEEK_START, WEEK_END, rng=np.random.default_rng(42))
        hours = Counter(ts.hour for ts in dist.sample_many(10_000))
        assert hours[12] > hours[2]
        assert hours[12] > 5 * hours[2]

    def test_hour_shares_follow_weekday_profile(self) -> None:
        """On a weekday, the hour-12 share approaches weight[12] / total."""
        dist = TransactionTimeDistribution(WEEK_START, WEEK_START, rng=np.random.default_rng(42))
        hours = Counter(dist.sample_hour(Weekday.MONDAY) for _ in range(50_000))
        expected = DEFAULT_WEEKDAY_WEIGHTS[12] / sum(DEFAULT_WEEKDAY_WEIGHTS)
        assert abs(hours[12] / 50_000 - expected) < 0.01

    def test_rounding_overflow_stays_on_weighted_hour(self) -> None:
        """A draw at the very top of the range never lands on a trailing zero-weight hour."""
        dist = TransactionTimeDistribution(WEEK_START, WEEK_START, rng=_TopOfRange())
        dist.set_hourly_weights(Weekday.MONDAY, _only_hour(3))
        assert dist.sample_hour(Weekday.MONDAY) == 3

    def test_single_day_range(self) -> None:
        dist = TransactionTimeDistribution(WEEK_START, WEEK_START, rng=np.random.default_rng(42))
        assert dist.days_in_range == 1
        assert {ts.date() for ts in dist.sample_many(100)} == {WEEK_START}

    def test_minutes_and_seconds_in_range(self) -> None:
        dist = TransactionTimeDistribution(WEEK_START, WEEK_END, rng=np.random.default_rng(42))
        for ts in dist.sample_many(1_000):
            assert 0 <= ts.minute < 60
            assert 0 <= ts.second < 60
            assert ts.microsecond == 0

    def test_timezone_attached(self) -> None:
        dist = TransactionTimeDistribution(WEEK_START, WEEK_END, rng=np.random.default_rng(1), tz=UTC)
        assert dist.sample().tzinfo is UTC

    def test_naive_by_default(self) -> None:
        dist = TransactionTimeDistribution(WEEK_START, WEEK_END, rng=np.random.default_rng(1))
        assert dist.sample().tzinfo is None

    def test_inverted_range_rejected(self) -> None:
        with pytest.raises(InvalidConfigurationError, match="on or after"):
            TransactionTimeDistribution(WEEK_END, WEEK_START)

    def test_default_profiles(self) -> None:
        dist = TransactionTimeDistribution(WEEK_START, WEEK_END)
        assert dist.hourly_weights("monday") == list(DEFAULT_WEEKDAY_WEIGHTS)
        assert dist.hourly_weights(Weekday.SUNDAY) == list(DEFAULT_WEEKEND_WEIGHTS)

    def test_hourly_weights_returns_copy(self) -> None:
        dist = TransactionTimeDistribution(WEEK_START, WEEK_END)
        weights = dist.hourly_weights(0)
        weights[0] = 999.0
        assert dist.hourly_weights(0)[0] == DEFAULT_WEEKDAY_WEIGHTS[0]

    def test_set_hourly_weights_overrides_one_day(self) -> None:
        """Only the overridden day changes; the setter chains."""
        dist = TransactionTimeDistribution(WEEK_START, WEEK_END, rng=np.random.default_rng(42))
        assert dist.set_hourly_weights("saturday", _only_hour(3)) is dist

        for ts in dist.sample_many(2_000):
            if ts.weekday() == Weekday.SATURDAY:
                assert ts.hour == 3
        assert dist.hourly_weights("friday") == list(DEFAULT_WEEKDAY_WEIGHTS)

    def test_constructor_overrides(self) -> None:
        overrides = {day: _only_hour(22) for day in Weekday}
        dist = TransactionTimeDistribution(
            WEEK_START, WEEK_END, overrides, rng=np.random.default_rng(42),
        )
        assert {ts.hour for ts in dist.sample_many(500)} == {22}

    @pytest.mark.parametrize(
        "weights",
        [[1.0] * 23, [1.0] * 25, [-1.0] + [1.0] * 23, [0.0] * 24, [float("nan")] + [1.0] * 23],
    )
    def test_invalid_hourly_weights_rejected(self, weights: list[float]) -> None:
        """Profiles need 24 finite, non-negative weights, not all zero."""
        dist = TransactionTimeDistribution(WEEK_START, WEEK_END)
        with pytest.raises(InvalidConfigurationError, match="MONDAY"):
            dist.set_hourly_weights(Weekday.MONDAY, weights)

    def test_unknown_day_rejected(self) -> None:
        dist = TransactionTimeDistribution(WEEK_START, WEEK_END)
        with pytest.raises(InvalidConfigurationError, match="day of week"):
            dist.set_hourly_weights("someday", [1.0] * 24)

    def test_description(self) -> None:
        dist = TransactionTimeDistribution(WEEK_START, WEEK_END)
        assert dist.description == (
            "Time distribution from 2024-01-01 to 2024-01-07 with daily patterns"
        )

    def test_reproducible_with_same_seed(self) -> None:
        a = TransactionTimeDistribution(WEEK_START, WEEK_END, rng=np.random.default_rng(3))
        b = TransactionTimeDistribution(WEEK_START, WEEK_END, rng=np.random.default_rng(3))
        assert a.sample_many(100) == b.sample_many(100)
