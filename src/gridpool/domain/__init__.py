"""
Domain layer: backend-free contracts, value types and errors.
"""

from ._errors import (
    DimensionMismatchError,
    GridPoolError,
    IncompatibleGeometryError,
    NoForwardContextError,
)
from ._layer import ILayer
from ._random import IRandom
from ._size import Size, SizeLike

__all__ = [
    "DimensionMismatchError",
    "GridPoolError",
    "ILayer",
    "IncompatibleGeometryError",
    "IRandom",
    "NoForwardContextError",
    "Size",
    "SizeLike",
]
