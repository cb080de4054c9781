"""
Layer- and shape-related exceptions for gridpool.

This module defines the error taxonomy used by pooling layers to reject
invalid construction parameters and malformed forward/backward calls.

All errors are raised *before* any layer state is mutated, so a rejected call
leaves the layer exactly as it was. None of them are retried or recovered from
inside the layer: a silently repaired shape or a backward pass without routing
information would corrupt gradient computation, so the caller (the enclosing
network) is always informed.
"""

from __future__ import annotations

from typing import Any


class GridPoolError(RuntimeError):
    """
    Base class for all gridpool layer errors.
    """


class IncompatibleGeometryError(GridPoolError, ValueError):
    """
    Raised at construction when the pooling window does not evenly tile the
    input grid.

    Attributes
    ----------
    input_size : Any
        The requested input grid size.
    pool_size : Any
        The requested pooling window size.
    """

    def __init__(self, input_size: Any, pool_size: Any) -> None:
        """
        Initialize the IncompatibleGeometryError.

        Parameters
        ----------
        input_size : Any
            Input grid size (rows, cols).
        pool_size : Any
            Pooling window size (rows, cols).
        """
        super().__init__(
            f"Input size {input_size} is not compatible with pool size "
            f"{pool_size}: rows and cols must be evenly divisible."
        )
        self.input_size = input_size
        self.pool_size = pool_size


class DimensionMismatchError(GridPoolError, ValueError):
    """
    Raised when an activation or error matrix does not match the layer's
    declared node counts (or the sample count cached by the last forward).

    Attributes
    ----------
    what : str
        Human-readable name of the offending dimension.
    expected : Any
        Expected value.
    got : Any
        Value actually received.
    """

    def __init__(self, what: str, expected: Any, got: Any) -> None:
        super().__init__(
            f"Dimension mismatch for {what}: expected {expected}, got {got}."
        )
        self.what = what
        self.expected = expected
        self.got = got


class NoForwardContextError(GridPoolError):
    """
    Raised when backward propagation is requested without a preceding forward
    call whose routing state is still valid.
    """

    def __init__(self, layer_name: str) -> None:
        super().__init__(
            f"{layer_name}.back_propagation() called without a matching "
            f"forward_propagation(); no winner state is available."
        )
        self.layer_name = layer_name
