"""Distribution contracts shared by every sampler.

A distribution owns a NumPy ``Generator`` unless the caller injects one via
``rng=``. Passing the same generator to several distributions makes a whole
generation run reproducible from a single seed.
"""

from __future__ import annotations

import abc
import math
from collections.abc import Mapping
from typing import Generic, TypeVar

import numpy as np
from numpy.random import Generator

T = TypeVar("T")

# Upper bound on draws per accepted sample for truncated distributions.
DEFAULT_MAX_ATTEMPTS: int = 10_000


class InvalidConfigurationError(ValueError):
    """Raised when a distribution is built or reconfigured with invalid parameters."""


class SamplingExhaustedError(RuntimeError):
    """Raised when rejection sampling cannot land inside the truncation bounds."""


class Distribution(abc.ABC, Generic[T]):
    """A source of independent samples of type ``T``.

    Attributes:
        name: Short diagnostic name of the distribution.
    """

    name: str = "Distribution"

    def __init__(self, *, rng: Generator | None = None) -> None:
        self._rng = rng if rng is not None else np.random.default_rng()

    @property
    def rng(self) -> Generator:
        """Return the random generator backing this distribution."""
        return self._rng

    @abc.abstractmethod
    def sample(self) -> T:
        """Draw a single value."""

    @property
    @abc.abstractmethod
    def description(self) -> str:
        """Human-readable summary of the distribution parameters."""

    def sample_many(self, count: int) -> list[T]:
        """Draw ``count`` independent values.

        Args:
            count: Number of values to draw (must be >= 0).

        Returns:
            List of sampled values, in draw order.
        """
        if count < 0:
            msg = f"count must be >= 0, got {count}"
            raise ValueError(msg)
        return [self.sample() for _ in range(count)]

    def __str__(self) -> str:
        return f"{self.name}: {self.description}"


class NumericDistribution(Distribution[float]):
    """A continuous, real-valued distribution truncated to ``[minimum, maximum]``.

    Subclasses provide the native sampling routine through ``_draw``. Samples
    outside the bounds are rejected and redrawn, up to ``max_attempts`` draws
    per accepted value.

    Attributes:
        name: Short diagnostic name of the distribution family.
    """

    name = "Numeric"

    def __init__(
        self,
        minimum: float = -math.inf,
        maximum: float = math.inf,
        *,
        rng: Generator | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        """Initialize the truncation bounds and random source.

        Args:
            minimum: Lower bound (inclusive). May be ``-inf``.
            maximum: Upper bound (inclusive). May be ``+inf``.
            rng: Random generator to use. A fresh one is created if omitted.
            max_attempts: Maximum draws per accepted sample.

        Raises:
            InvalidConfigurationError: If the bounds are NaN or inverted, or
                if ``max_attempts`` is not positive.
        """
        super().__init__(rng=rng)
        minimum = float(minimum)
        maximum = float(maximum)
        if math.isnan(minimum) or math.isnan(maximum):
            msg = f"{self.name} bounds must not be NaN"
            raise InvalidConfigurationError(msg)
        if minimum > maximum:
            msg = f"{self.name} minimum ({minimum}) must be <= maximum ({maximum})"
            raise InvalidConfigurationError(msg)
        if max_attempts < 1:
            msg = f"max_attempts must be >= 1, got {max_attempts}"
            raise InvalidConfigurationError(msg)
        self._minimum = minimum
        self._maximum = maximum
        self._max_attempts = max_attempts

    @property
    def minimum(self) -> float:
        """Smallest value that can be sampled (``-inf`` when unbounded)."""
        return self._minimum

    @property
    def maximum(self) -> float:
        """Largest value that can be sampled (``+inf`` when unbounded)."""
        return self._maximum

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    @property
    @abc.abstractmethod
    def mean(self) -> float:
        """Mean of the untruncated distribution (``inf`` if undefined)."""

    @property
    @abc.abstractmethod
    def stddev(self) -> float:
        """Standard deviation of the untruncated distribution (``inf`` if undefined)."""

    @abc.abstractmethod
    def density(self, value: float) -> float:
        """Return the native (untruncated) probability density at ``value``."""

    @abc.abstractmethod
    def _draw(self, size: int | None = None) -> float | np.ndarray:
        """Draw from the native, untruncated sampling routine."""

    def contains(self, value: float) -> bool:
        """Return True if ``value`` lies within the truncation bounds."""
        return self._minimum <= value <= self._maximum

    def sample(self) -> float:
        """Draw one value inside ``[minimum, maximum]`` by rejection sampling.

        Returns:
            The first native draw that falls within the bounds.

        Raises:
            SamplingExhaustedError: If ``max_attempts`` draws all fell
                outside the bounds.
        """
        for _ in range(self._max_attempts):
            value = float(self._draw())
            if self._minimum <= value <= self._maximum:
                return value
        msg = (
            f"{self.name} drew {self._max_attempts} values without landing in "
            f"[{self._minimum}, {self._maximum}]"
        )
        raise SamplingExhaustedError(msg)

    def sample_array(self, count: int) -> np.ndarray:
        """Draw ``count`` values inside the bounds as a NumPy array.

        Draws are made in vectorised rounds; each round redraws only the
        rejected slots. The attempt cap applies per slot.

        Args:
            count: Number of values to draw (must be >= 0).

        Returns:
            Float64 array of length ``count``.

        Raises:
            SamplingExhaustedError: If some slot could not be filled within
                ``max_attempts`` rounds.
        """
        if count < 0:
            msg = f"count must be >= 0, got {count}"
            raise ValueError(msg)

        out = np.empty(count, dtype=np.float64)
        pending = np.arange(count)
        for _ in range(self._max_attempts):
            if pending.size == 0:
                return out
            draws = np.asarray(self._draw(pending.size), dtype=np.float64)
            accepted = (draws >= self._minimum) & (draws <= self._maximum)
            out[pending[accepted]] = draws[accepted]
            pending = pending[~accepted]
        if pending.size == 0:
            return out
        msg = (
            f"{self.name} could not fill {pending.size} of {count} slots in "
            f"[{self._minimum}, {self._maximum}] within {self._max_attempts} rounds"
        )
        raise SamplingExhaustedError(msg)


def validate_weights(name: str, weights: Mapping[T, float]) -> dict[T, float]:
    """Copy a weight table, rejecting empty tables and non-positive weights.

    Args:
        name: Distribution name used in error messages.
        weights: Mapping of value to (unnormalised) weight.

    Returns:
        A new dict with the same iteration order and float weights.

    Raises:
        InvalidConfigurationError: If the table is empty or a weight is not
            a positive finite number.
    """
    if not weights:
        msg = f"{name} requires at least one weighted value"
        raise InvalidConfigurationError(msg)

    table: dict[T, float] = {}
    for value, weight in weights.items():
        weight = float(weight)
        if not math.isfinite(weight) or weight <= 0:
            msg = f"{name} weight for {value!r} must be a positive finite number, got {weight}"
            raise InvalidConfigurationError(msg)
        table[value] = weight
    return table
