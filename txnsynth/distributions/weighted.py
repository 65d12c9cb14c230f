"""Cumulative-weight sampler for entities such as merchants or card types."""

from __future__ import annotations

from collections.abc import Callable, Mapping

import numpy as np
from numpy.random import Generator

from txnsynth.distributions.base import Distribution, T, validate_weights


class WeightedEntityDistribution(Distribution[T]):
    """Select entities by inverse-CDF lookup over cumulative weights.

    At construction the weights are prefix-summed in the mapping's iteration
    order, giving strictly increasing thresholds that end at the total
    weight. ``sample`` draws ``u`` uniformly in ``[0, total)`` and returns the
    entity whose threshold is the smallest one strictly greater than ``u``.

    Attributes:
        name: Diagnostic name of the distribution.
    """

    def __init__(
        self,
        name: str,
        weights: Mapping[T, float],
        label: Callable[[T], str] = str,
        *,
        rng: Generator | None = None,
    ) -> None:
        """Build the cumulative weight index.

        Args:
            name: Diagnostic name of the distribution.
            weights: Mapping of entity to weight (positive, additive).
            label: Converts an entity to a display string for diagnostics.
            rng: Random generator to use.

        Raises:
            InvalidConfigurationError: If the mapping is empty or holds a
                non-positive weight.
        """
        super().__init__(rng=rng)
        self.name = name
        self._label = label
        table = validate_weights(name, weights)
        self._entities: list[T] = list(table)
        self._thresholds = np.cumsum(np.fromiter(table.values(), dtype=np.float64))
        self._total_weight = float(self._thresholds[-1])

    @property
    def total_weight(self) -> float:
        """Sum of all weights (the last cumulative threshold)."""
        return self._total_weight

    @property
    def thresholds(self) -> list[float]:
        return self._thresholds.tolist()

    def sample(self) -> T:
        u = self._rng.random() * self._total_weight
        idx = int(np.searchsorted(self._thresholds, u, side="right"))
        # u * total may round up to the last threshold
        return self._entities[min(idx, len(self._entities) - 1)]

    @property
    def description(self) -> str:
        return f"Weighted distribution with {len(self._entities)} possible entities"

    def detailed_description(self) -> str:
        """Describe every entity with its weight and share of the total.

        Individual weights are recovered by subtracting consecutive
        thresholds, so entries appear in construction order.

        Returns:
            Multi-line string: the description followed by one
            ``"  - <label>: <weight> (<pct>%)"`` line per entity.
        """
        lines = [f"{self.description}:"]
        individual = np.diff(self._thresholds, prepend=0.0)
        for entity, weight in zip(self._entities, individual, strict=True):
            percentage = weight / self._total_weight * 100
            lines.append(f"  - {self._label(entity)}: {weight:.2f} ({percentage:.2f}%)")
        return "\n".join(lines) + "\n"

    def __len__(self) -> int:
        return len(self._entities)
