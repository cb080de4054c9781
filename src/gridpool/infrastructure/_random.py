"""
Seeded randomness source backed by `numpy.random.Generator`.

A single `Random` instance is typically created by the training script and
handed to every layer at construction time. Layers that need randomness
(e.g., for weight initialization) draw from it. Layers that do not (such as
`MaxPoolingLayer`) simply hold on to it.
"""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from ..domain._random import IRandom


class Random(IRandom):
    """
    Thin wrapper around `numpy.random.Generator` satisfying `IRandom`.

    Parameters
    ----------
    seed : int or None, optional
        Seed for the underlying generator. ``None`` draws fresh OS entropy.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._seed = seed
        self._gen = np.random.default_rng(seed)

    @property
    def seed(self) -> Optional[int]:
        """The seed this source was created with (``None`` if unseeded)."""
        return self._seed

    @property
    def generator(self) -> np.random.Generator:
        """The underlying NumPy generator."""
        return self._gen

    def uniform(self, low: float = 0.0, high: float = 1.0, size: Any = None) -> Any:
        return self._gen.uniform(low, high, size)

    def normal(self, mean: float = 0.0, std: float = 1.0, size: Any = None) -> Any:
        return self._gen.normal(mean, std, size)

    def randint(self, low: int, high: int, size: Any = None) -> Any:
        return self._gen.integers(low, high, size)

    def __repr__(self) -> str:
        return f"Random(seed={self._seed!r})"
