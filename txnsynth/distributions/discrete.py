"""Categorical distribution over a finite set of hashable values."""

from __future__ import annotations

from collections.abc import Mapping

import numpy as np
from numpy.random import Generator

from txnsynth.distributions.base import Distribution, T, validate_weights


class DiscreteDistribution(Distribution[T]):
    """Select one of a finite set of values with weighted probability.

    Useful for categorical attributes such as transaction types, card
    networks or card types. Weights need not sum to 1; they are normalised
    into a probability mass function at construction. Values are used as
    dictionary keys, so they must hash and compare structurally (enums,
    strings, frozen dataclasses).

    Attributes:
        name: Diagnostic name of the distribution.
    """

    def __init__(
        self,
        name: str,
        probabilities: Mapping[T, float],
        *,
        rng: Generator | None = None,
    ) -> None:
        """Initialize the distribution from a value-to-weight mapping.

        Args:
            name: Diagnostic name of the distribution.
            probabilities: Mapping of value to weight (positive, unnormalised).
            rng: Random generator to use.

        Raises:
            InvalidConfigurationError: If the mapping is empty or holds a
                non-positive weight.
        """
        super().__init__(rng=rng)
        self.name = name
        self._probabilities = validate_weights(name, probabilities)
        self._values: list[T] = list(self._probabilities)
        weights = np.fromiter(self._probabilities.values(), dtype=np.float64)
        self._pmf = weights / weights.sum()

    def sample(self) -> T:
        idx = self._rng.choice(len(self._values), p=self._pmf)
        return self._values[int(idx)]

    def probability_of(self, value: T) -> float:
        """Return the configured weight of ``value``, or 0.0 if it is unknown."""
        return self._probabilities.get(value, 0.0)

    @property
    def probabilities(self) -> dict[T, float]:
        """Return a copy of the configured value-to-weight table."""
        return dict(self._probabilities)

    @property
    def values(self) -> list[T]:
        return list(self._values)

    @property
    def description(self) -> str:
        return f"Discrete distribution with {len(self._values)} possible values"

    def __len__(self) -> int:
        return len(self._values)
