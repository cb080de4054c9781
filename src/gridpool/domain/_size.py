"""
Grid size value type for gridpool.

This module defines `Size`, an immutable (rows, cols) pair used to describe
the geometry of a single feature map: the input grid, the pooling window,
and the pooled output grid.

Design notes
------------
- `Size` is a frozen dataclass so it can be shared freely between the layer,
  its topology, and its configuration without defensive copies.
- Integer-valued inputs are accepted from plain Python ints, NumPy integers,
  lists, and tuples via `Size.of`, mirroring how pooling hyperparameters are
  normalized to pairs elsewhere in the framework.
- This module contains no NumPy logic and is safe to import from any layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Integral
from typing import Sequence, Union

SizeLike = Union["Size", int, Sequence[int]]


@dataclass(frozen=True)
class Size:
    """
    Immutable 2D grid size.

    Attributes
    ----------
    rows : int
        Number of grid rows. Must be >= 1.
    cols : int
        Number of grid columns. Must be >= 1.
    """

    rows: int
    cols: int

    def __post_init__(self) -> None:
        for name in ("rows", "cols"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, Integral):
                raise ValueError(f"Size.{name} must be an integer, got {v!r}")
            if v < 1:
                raise ValueError(f"Size.{name} must be >= 1, got {v}")
            object.__setattr__(self, name, int(v))

    @classmethod
    def of(cls, value: SizeLike) -> "Size":
        """
        Normalize an int, a (rows, cols) pair, or a `Size` into a `Size`.

        Parameters
        ----------
        value : Size or int or Sequence[int]
            An int `k` is expanded to `(k, k)`.

        Returns
        -------
        Size
            The normalized size.

        Raises
        ------
        ValueError
            If a sequence does not have exactly two entries, or an entry is
            not a positive integer.
        """
        if isinstance(value, Size):
            return value
        if isinstance(value, Integral) and not isinstance(value, bool):
            return cls(int(value), int(value))
        if isinstance(value, (str, bytes)):
            raise ValueError(f"Cannot interpret {value!r} as a grid size")
        try:
            items = tuple(value)
        except TypeError as e:
            raise ValueError(f"Cannot interpret {value!r} as a grid size") from e
        if len(items) != 2:
            raise ValueError(f"Grid size needs exactly 2 entries, got {len(items)}")
        return cls(items[0], items[1])

    def total(self) -> int:
        """Return the number of cells, ``rows * cols``."""
        return self.rows * self.cols

    def divides(self, other: "Size") -> bool:
        """
        Return True if this size tiles `other` exactly along both axes.
        """
        return other.rows % self.rows == 0 and other.cols % self.cols == 0

    def __floordiv__(self, other: "Size") -> "Size":
        if not isinstance(other, Size):
            return NotImplemented
        return Size(self.rows // other.rows, self.cols // other.cols)

    def as_list(self) -> list[int]:
        """Return ``[rows, cols]`` (JSON-friendly)."""
        return [self.rows, self.cols]

    def __iter__(self):
        yield self.rows
        yield self.cols

    def __str__(self) -> str:
        return f"{self.rows}x{self.cols}"
