"""Shared test fixtures for the synthetic transaction generator."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

_PROJECT_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def default_seed() -> int:
    """Provide a deterministic seed for reproducible tests."""
    return 42


@pytest.fixture
def rng(default_seed: int) -> np.random.Generator:
    """Provide a NumPy generator seeded with ``default_seed``."""
    return np.random.default_rng(default_seed)


@pytest.fixture
def small_count() -> int:
    """Provide a small record count for fast test execution."""
    return 100


@pytest.fixture
def config_dir() -> Path:
    """Provide the project's config directory."""
    return _PROJECT_ROOT / "config"


@pytest.fixture
def tmp_output_dir(tmp_path: Path) -> Path:
    """Provide a temporary output directory for generated files.

    Args:
        tmp_path: Pytest built-in temporary directory fixture.

    Returns:
        Path to a temporary 'raw' output directory.
    """
    output_dir = tmp_path / "data" / "raw"
    output_dir.mkdir(parents=True)
    return output_dir
