"""Continuous distributions used to model amounts and intervals.

Every class samples natively through NumPy and enforces its truncation bounds
by rejection (see ``NumericDistribution.sample``). Densities come from the
matching ``scipy.stats`` family and ignore truncation.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.random import Generator
from scipy import stats

from txnsynth.distributions.base import (
    DEFAULT_MAX_ATTEMPTS,
    InvalidConfigurationError,
    NumericDistribution,
)


def _require_positive(family: str, label: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value) or value <= 0:
        msg = f"{family} {label} must be a positive finite number, got {value}"
        raise InvalidConfigurationError(msg)
    return value


def _require_finite(family: str, label: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value):
        msg = f"{family} {label} must be finite, got {value}"
        raise InvalidConfigurationError(msg)
    return value


class NormalDistribution(NumericDistribution):
    """Normal (Gaussian) distribution, optionally truncated.

    Suits quantities that cluster symmetrically around a typical value, such
    as fuel purchases or utility bills.
    """

    name = "Normal"

    def __init__(
        self,
        mean: float,
        stddev: float,
        minimum: float = -math.inf,
        maximum: float = math.inf,
        *,
        rng: Generator | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        """Initialize the distribution.

        Args:
            mean: Location of the peak.
            stddev: Standard deviation (must be > 0).
            minimum: Lower truncation bound (inclusive).
            maximum: Upper truncation bound (inclusive).
            rng: Random generator to use.
            max_attempts: Maximum draws per accepted sample.

        Raises:
            InvalidConfigurationError: If a parameter is out of range.
        """
        self._mean = _require_finite(self.name, "mean", mean)
        self._stddev = _require_positive(self.name, "stddev", stddev)
        super().__init__(minimum, maximum, rng=rng, max_attempts=max_attempts)
        self._frozen = stats.norm(loc=self._mean, scale=self._stddev)

    @property
    def mean(self) -> float:
        return self._mean

    @property
    def stddev(self) -> float:
        return self._stddev

    def density(self, value: float) -> float:
        return float(self._frozen.pdf(value))

    def _draw(self, size: int | None = None) -> float | np.ndarray:
        return self._rng.normal(self._mean, self._stddev, size=size)

    @property
    def description(self) -> str:
        return (
            f"mean={self._mean:.2f}, stddev={self._stddev:.2f}, "
            f"min={self.minimum:.2f}, max={self.maximum:.2f}"
        )


class LogNormalDistribution(NumericDistribution):
    """Log-normal distribution parameterised by the underlying normal.

    A sample is ``exp(N(mu, sigma))``, which gives the right-skewed, long
    tailed shape typical of purchase amounts. Use ``from_mean_and_stddev``
    to build one from the desired arithmetic moments instead.
    """

    name = "LogNormal"

    def __init__(
        self,
        mu: float,
        sigma: float,
        minimum: float = 0.0,
        maximum: float = math.inf,
        *,
        rng: Generator | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        """Initialize the distribution.

        Args:
            mu: Scale parameter (mean of the underlying normal).
            sigma: Shape parameter (stddev of the underlying normal, > 0).
            minimum: Lower truncation bound (inclusive).
            maximum: Upper truncation bound (inclusive).
            rng: Random generator to use.
            max_attempts: Maximum draws per accepted sample.

        Raises:
            InvalidConfigurationError: If a parameter is out of range.
        """
        self._mu = _require_finite(self.name, "mu", mu)
        self._sigma = _require_positive(self.name, "sigma", sigma)
        super().__init__(minimum, maximum, rng=rng, max_attempts=max_attempts)

        sigma_sq = self._sigma * self._sigma
        self._mean = math.exp(self._mu + sigma_sq / 2)
        self._stddev = math.sqrt((math.exp(sigma_sq) - 1) * math.exp(2 * self._mu + sigma_sq))
        self._frozen = stats.lognorm(s=self._sigma, scale=math.exp(self._mu))

    @classmethod
    def from_mean_and_stddev(
        cls,
        mean: float,
        stddev: float,
        minimum: float = 0.0,
        maximum: float = math.inf,
        *,
        rng: Generator | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> LogNormalDistribution:
        """Build a log-normal whose untruncated mean and stddev match the inputs.

        Uses ``sigma = sqrt(ln(stddev**2 / mean**2 + 1))`` and
        ``mu = ln(mean) - sigma**2 / 2``.

        Args:
            mean: Desired arithmetic mean (> 0).
            stddev: Desired arithmetic standard deviation (> 0).
            minimum: Lower truncation bound (inclusive).
            maximum: Upper truncation bound (inclusive).
            rng: Random generator to use.
            max_attempts: Maximum draws per accepted sample.

        Returns:
            A LogNormalDistribution with the derived ``mu`` and ``sigma``.

        Raises:
            InvalidConfigurationError: If ``mean`` or ``stddev`` is not positive.
        """
        mean = _require_positive(cls.name, "mean", mean)
        stddev = _require_positive(cls.name, "stddev", stddev)
        variance = stddev * stddev
        sigma = math.sqrt(math.log(variance / (mean * mean) + 1))
        mu = math.log(mean) - sigma * sigma / 2
        return cls(mu, sigma, minimum, maximum, rng=rng, max_attempts=max_attempts)

    @property
    def mu(self) -> float:
        return self._mu

    @property
    def sigma(self) -> float:
        return self._sigma

    @property
    def mean(self) -> float:
        return self._mean

    @property
    def stddev(self) -> float:
        return self._stddev

    def density(self, value: float) -> float:
        return float(self._frozen.pdf(value))

    def _draw(self, size: int | None = None) -> float | np.ndarray:
        return self._rng.lognormal(mean=self._mu, sigma=self._sigma, size=size)

    @property
    def description(self) -> str:
        return (
            f"mu={self._mu:.2f}, sigma={self._sigma:.2f}, mean={self._mean:.2f}, "
            f"stddev={self._stddev:.2f}, min={self.minimum:.2f}, max={self.maximum:.2f}"
        )


class ExponentialDistribution(NumericDistribution):
    """Exponential distribution with rate ``1 / mean``.

    Models waiting times such as the gap between consecutive transactions.
    """

    name = "Exponential"

    def __init__(
        self,
        mean: float,
        minimum: float = 0.0,
        maximum: float = math.inf,
        *,
        rng: Generator | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        self._mean = _require_positive(self.name, "mean", mean)
        super().__init__(minimum, maximum, rng=rng, max_attempts=max_attempts)
        self._frozen = stats.expon(scale=self._mean)

    @property
    def mean(self) -> float:
        return self._mean

    @property
    def stddev(self) -> float:
        # Exponential family: stddev equals the mean.
        return self._mean

    def density(self, value: float) -> float:
        return float(self._frozen.pdf(value))

    def _draw(self, size: int | None = None) -> float | np.ndarray:
        return self._rng.exponential(scale=self._mean, size=size)

    @property
    def description(self) -> str:
        return f"mean={self._mean:.2f}, min={self.minimum:.2f}, max={self.maximum:.2f}"


class ParetoDistribution(NumericDistribution):
    """Pareto (type I) distribution with support starting at ``scale``.

    Captures "80-20" behaviour: most values sit near the scale, a few are very
    large. Moments are infinite for small shapes: the mean when
    ``shape <= 1`` and the standard deviation when ``shape <= 2``.
    """

    name = "Pareto"

    def __init__(
        self,
        scale: float,
        shape: float,
        maximum: float = math.inf,
        *,
        rng: Generator | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        """Initialize the distribution.

        Args:
            scale: Scale parameter, which is also the minimum value (> 0).
            shape: Tail index (> 0). Smaller values give heavier tails.
            maximum: Upper truncation bound (inclusive, >= scale).
            rng: Random generator to use.
            max_attempts: Maximum draws per accepted sample.

        Raises:
            InvalidConfigurationError: If a parameter is out of range.
        """
        self._scale = _require_positive(self.name, "scale", scale)
        self._shape = _require_positive(self.name, "shape", shape)
        super().__init__(self._scale, maximum, rng=rng, max_attempts=max_attempts)
        self._frozen = stats.pareto(b=self._shape, scale=self._scale)

    @property
    def scale(self) -> float:
        return self._scale

    @property
    def shape(self) -> float:
        return self._shape

    @property
    def mean(self) -> float:
        if self._shape <= 1:
            return math.inf
        return self._shape * self._scale / (self._shape - 1)

    @property
    def stddev(self) -> float:
        if self._shape <= 2:
            return math.inf
        variance = (self._scale**2 * self._shape) / ((self._shape - 1) ** 2 * (self._shape - 2))
        return math.sqrt(variance)

    def density(self, value: float) -> float:
        return float(self._frozen.pdf(value))

    def _draw(self, size: int | None = None) -> float | np.ndarray:
        # NumPy's pareto() is the Lomax form; shift by one and scale for type I.
        return self._scale * (1.0 + self._rng.pareto(self._shape, size=size))

    @property
    def description(self) -> str:
        return (
            f"scale={self._scale:.2f}, shape={self._shape:.2f}, "
            f"min={self.minimum:.2f}, max={self.maximum:.2f}"
        )
