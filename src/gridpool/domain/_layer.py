"""
Layer interface definitions.

This module defines the domain-level contract shared by every layer type of
a layered feed-forward trainer, using structural subtyping via
`typing.Protocol`.

Activations and errors are exchanged as 2D matrices laid out as
``(n_nodes, n_samples)``: one row per unit, one column per sample in the
batch.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ILayer(Protocol):
    """
    Domain-level layer interface.

    A layer transforms a batch of activations on the way forward and maps the
    upstream error back to the previous layer on the way back, updating its
    own learnable parameters as a side effect.

    Notes
    -----
    - Any object implementing both methods is considered a valid layer.
    - Safe to use with `isinstance` checks due to `@runtime_checkable`.
    """

    def forward_propagation(self, x: Any) -> Any:
        """
        Propagate a batch of activations forward.

        Parameters
        ----------
        x : array-like
            Matrix of shape (n_input, n_samples).

        Returns
        -------
        array-like
            Matrix of shape (n_output, n_samples).
        """
        ...

    def back_propagation(
        self, error: Any, eta: float = 0.1, momentum: float = 0.5
    ) -> Any:
        """
        Propagate the upstream error backward and update parameters.

        Parameters
        ----------
        error : array-like
            Matrix of shape (n_output, n_samples).
        eta : float, optional
            Learning rate.
        momentum : float, optional
            Momentum coefficient.

        Returns
        -------
        array-like
            Error for the previous layer, shape (n_input, n_samples).
        """
        ...
