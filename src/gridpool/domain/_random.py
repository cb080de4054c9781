"""
Randomness source interface.

Layers of a network share a single pseudo-random source (for weight
initialization, dropout masks, and so on). This Protocol captures the small
surface they draw from, so the domain layer does not depend on NumPy.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class IRandom(Protocol):
    """
    Structural interface for a seeded pseudo-random source.
    """

    def uniform(self, low: float = 0.0, high: float = 1.0, size: Any = None) -> Any:
        """Draw samples from U[low, high)."""
        ...

    def normal(self, mean: float = 0.0, std: float = 1.0, size: Any = None) -> Any:
        """Draw samples from N(mean, std**2)."""
        ...

    def randint(self, low: int, high: int, size: Any = None) -> Any:
        """Draw integers from [low, high)."""
        ...
