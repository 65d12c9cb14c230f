"""Merchant reference data loading and weighted merchant selection."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from numpy.random import Generator

from txnsynth.distributions.weighted import WeightedEntityDistribution

# Path to the merchant reference data file
_MERCHANTS_FILE = Path(__file__).parent.parent / "data" / "merchants.json"


@dataclass(frozen=True)
class Merchant:
    """A merchant entity from reference data.

    Attributes:
        merchant_id: Stable identifier (``MER-<mcc>-<nnn>``).
        merchant_name: Business name.
        category: Spending category this merchant belongs to.
        mcc: Merchant Category Code (4-digit string).
    """

    merchant_id: str
    merchant_name: str
    category: str
    mcc: str


@dataclass
class MerchantCatalog:
    """Loaded merchant catalog with weighted category selection.

    Attributes:
        categories: List of category names in file order.
        category_weights: Corresponding relative selection weights.
        merchants_by_category: Mapping of category name to list of merchants.
    """

    categories: list[str]
    category_weights: list[float]
    merchants_by_category: dict[str, list[Merchant]]

    @property
    def total_merchants(self) -> int:
        """Return total number of merchants across all categories."""
        return sum(len(m) for m in self.merchants_by_category.values())

    @property
    def merchants(self) -> list[Merchant]:
        return [m for cat in self.categories for m in self.merchants_by_category[cat]]

    def category_distribution(self, rng: Generator | None = None) -> WeightedEntityDistribution[str]:
        """Return a sampler over category names weighted by ``category_weights``."""
        return WeightedEntityDistribution(
            "MerchantCategory",
            dict(zip(self.categories, self.category_weights, strict=True)),
            rng=rng,
        )


def load_merchant_catalog(path: Path | None = None) -> MerchantCatalog:
    """Load merchant reference data from JSON file.

    Args:
        path: Path to merchants.json. Defaults to the packaged data file.

    Returns:
        MerchantCatalog with categories, weights, and merchants.

    Raises:
        FileNotFoundError: If the merchants.json file does not exist.
        KeyError: If a category or merchant entry misses a required field.
    """
    file_path = path or _MERCHANTS_FILE

    with open(file_path, encoding="utf-8") as f:
        data = json.load(f)

    categories: list[str] = []
    weights: list[float] = []
    merchants_by_category: dict[str, list[Merchant]] = {}

    for cat_data in data["categories"]:
        name = cat_data["name"]
        categories.append(name)
        weights.append(float(cat_data["weight"]))

        merchants_by_category[name] = [
            Merchant(
                merchant_id=f"MER-{m['mcc']}-{i:03d}",
                merchant_name=m["merchant_name"],
                category=name,
                mcc=m["mcc"],
            )
            for i, m in enumerate(cat_data["merchants"], start=1)
        ]

    return MerchantCatalog(
        categories=categories,
        category_weights=weights,
        merchants_by_category=merchants_by_category,
    )


def select_merchants(
    rng: Generator,
    catalog: MerchantCatalog,
    count: int,
) -> list[Merchant]:
    """Select merchants using weighted category selection, then uniform within category.

    Args:
        rng: NumPy random generator instance (seeded for reproducibility).
        catalog: Loaded merchant catalog with categories and weights.
        count: Number of merchants to select.

    Returns:
        List of selected Merchant instances (with repetition).
    """
    categories = catalog.category_distribution(rng)

    merchants: list[Merchant] = []
    for _ in range(count):
        cat_merchants = catalog.merchants_by_category[categories.sample()]
        idx = rng.integers(0, len(cat_merchants))
        merchants.append(cat_merchants[idx])

    return merchants
