"""Transaction timestamp sampler with weekday/weekend hourly patterns."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date, datetime, timedelta, tzinfo
from enum import IntEnum

import numpy as np
from numpy.random import Generator

from txnsynth.distributions.base import Distribution, InvalidConfigurationError
from txnsynth.lib.logging_config import get_logger

logger = get_logger("distributions.timestamps")

HOURS_PER_DAY = 24


class Weekday(IntEnum):
    """Day of week, numbered like ``date.weekday()``."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def is_weekend(self) -> bool:
        return self >= Weekday.SATURDAY

    @classmethod
    def parse(cls, value: Weekday | int | str) -> Weekday:
        """Accept a Weekday, a 0-6 index, or a case-insensitive day name."""
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                msg = f"Unknown day of week {value!r}"
                raise InvalidConfigurationError(msg) from None
        try:
            return cls(value)
        except ValueError:
            msg = f"Day of week must be 0 (Monday) to 6 (Sunday), got {value!r}"
            raise InvalidConfigurationError(msg) from None


# Low overnight, rising through the morning, lunch peak, tapering evening.
DEFAULT_WEEKDAY_WEIGHTS: tuple[float, ...] = (
    0.2, 0.1, 0.1, 0.1, 0.2, 0.5, 1.0, 2.0,  # 00-07
    3.0, 3.5, 4.0, 4.5, 5.0, 4.5, 4.0, 3.5,  # 08-15
    3.0, 3.0, 2.5, 2.0, 1.5, 1.0, 0.5, 0.3,  # 16-23
)

# Later start, flatter, afternoon peak.
DEFAULT_WEEKEND_WEIGHTS: tuple[float, ...] = (
    0.3, 0.2, 0.1, 0.1, 0.1, 0.2, 0.5, 1.0,  # 00-07
    1.5, 2.0, 2.5, 3.0, 3.5, 4.0, 4.0, 3.5,  # 08-15
    3.0, 2.5, 2.0, 1.5, 1.0, 0.8, 0.5, 0.4,  # 16-23
)


def _validate_hourly_weights(day: Weekday, weights: Sequence[float]) -> np.ndarray:
    values = np.asarray(weights, dtype=np.float64)
    if values.ndim != 1 or values.size != HOURS_PER_DAY:
        msg = (
            f"Hourly weights for {day.name} must have exactly {HOURS_PER_DAY} values, "
            f"got {values.size}"
        )
        raise InvalidConfigurationError(msg)
    if not np.all(np.isfinite(values)) or np.any(values < 0):
        msg = f"Hourly weights for {day.name} must be finite and non-negative"
        raise InvalidConfigurationError(msg)
    if values.sum() <= 0:
        msg = f"Hourly weights for {day.name} must not all be zero"
        raise InvalidConfigurationError(msg)
    return values


class TransactionTimeDistribution(Distribution[datetime]):
    """Sample transaction timestamps within an inclusive date range.

    The calendar date is uniform over the range. The hour follows the
    24-weight profile of that date's day of week, picked by walking the
    cumulative weights. Minute and second are uniform.

    Profiles are meant to be configured before sampling starts;
    ``set_hourly_weights`` is not safe to call while other threads sample.
    """

    name = "TransactionTime"

    def __init__(
        self,
        start_date: date,
        end_date: date,
        hourly_weights: Mapping[Weekday | int | str, Sequence[float]] | None = None,
        *,
        rng: Generator | None = None,
        tz: tzinfo | None = None,
    ) -> None:
        """Initialize the sampler.

        Args:
            start_date: First date of the range (inclusive).
            end_date: Last date of the range (inclusive).
            hourly_weights: Per-day profile overrides applied on top of the
                weekday/weekend defaults.
            rng: Random generator to use.
            tz: Time zone attached to sampled datetimes (naive if None).

        Raises:
            InvalidConfigurationError: If the range is inverted or an
                override is not a valid 24-weight profile.
        """
        super().__init__(rng=rng)
        if end_date < start_date:
            msg = f"End date ({end_date}) must be on or after start date ({start_date})"
            raise InvalidConfigurationError(msg)

        self._start_date = start_date
        self._end_date = end_date
        self._days = (end_date - start_date).days + 1
        self._tz = tz

        self._hourly: dict[Weekday, np.ndarray] = {}
        self._cumulative: dict[Weekday, np.ndarray] = {}
        self._last_hour: dict[Weekday, int] = {}
        for day in Weekday:
            default = DEFAULT_WEEKEND_WEIGHTS if day.is_weekend else DEFAULT_WEEKDAY_WEIGHTS
            self._store(day, _validate_hourly_weights(day, default))
        for day, weights in (hourly_weights or {}).items():
            self.set_hourly_weights(day, weights)

    def _store(self, day: Weekday, weights: np.ndarray) -> None:
        self._hourly[day] = weights
        self._cumulative[day] = np.cumsum(weights)
        self._last_hour[day] = int(np.flatnonzero(weights)[-1])

    @property
    def start_date(self) -> date:
        return self._start_date

    @property
    def end_date(self) -> date:
        return self._end_date

    @property
    def days_in_range(self) -> int:
        return self._days

    def hourly_weights(self, day: Weekday | int | str) -> list[float]:
        """Return a copy of the 24-weight profile for ``day``."""
        return self._hourly[Weekday.parse(day)].tolist()

    def set_hourly_weights(
        self, day: Weekday | int | str, weights: Sequence[float],
    ) -> TransactionTimeDistribution:
        """Replace the hourly profile of one day of week.

        Args:
            day: Day to override (Weekday, 0-6 index, or day name).
            weights: Exactly 24 non-negative weights, one per hour.

        Returns:
            This sampler, for chaining.

        Raises:
            InvalidConfigurationError: If the day is unknown or the weights
                are not a valid 24-weight profile.
        """
        weekday = Weekday.parse(day)
        self._store(weekday, _validate_hourly_weights(weekday, weights))
        logger.debug("Replaced hourly weights for %s", weekday.name)
        return self

    def sample_date(self) -> date:
        offset = int(self._rng.integers(0, self._days))
        return self._start_date + timedelta(days=offset)

    def sample_hour(self, day: Weekday | int) -> int:
        """Pick an hour of day from ``day``'s profile by cumulative-weight walk."""
        cumulative = self._cumulative[Weekday(day)]
        u = self._rng.random() * cumulative[-1]
        hour = int(np.searchsorted(cumulative, u, side="right"))
        # u * total may round up past the last hour with weight
        return min(hour, self._last_hour[Weekday(day)])

    def sample(self) -> datetime:
        day = self.sample_date()
        hour = self.sample_hour(day.weekday())
        minute = int(self._rng.integers(0, 60))
        second = int(self._rng.integers(0, 60))
        return datetime(day.year, day.month, day.day, hour, minute, second, tzinfo=self._tz)

    @property
    def description(self) -> str:
        return f"Time distribution from {self._start_date} to {self._end_date} with daily patterns"
