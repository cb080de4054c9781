"""
Max pooling layer with per-feature-map affine calibration.

This module defines `MaxPoolingLayer`, a layer for a feed-forward trainer
that reduces each feature map by taking the maximum over fixed-size,
non-overlapping windows and then applies a learned ``scale * max + bias``
per feature map.

Data flow
---------
- `forward_propagation(x)` consumes a ``(n_input, n_samples)`` matrix,
  returns a ``(n_output, n_samples)`` matrix and records, per sample, which
  input won every window.
- `back_propagation(error, eta, momentum)` routes the upstream error through
  exactly those winners, returns the previous layer's error, and updates
  scale/bias in place with heavy-ball momentum.

State machine
-------------
    READY  --forward-->  PRIMED  --backward-->  READY
    PRIMED --forward-->  PRIMED   (previous winners discarded)

Backward is only valid in the PRIMED state.

Design notes
------------
- The connectivity graph is built once (`build_pooling_topology`) and never
  mutated. Per-call state (cached input/output, winner table) is replaced
  wholesale on each forward call.
- Every call is validated before any state is touched, so a rejected call
  leaves the layer unchanged.
- The randomness source is accepted for uniformity with sibling layer types
  and stored, but never drawn from: scale and bias always start at 1 and 0.
"""

from __future__ import annotations

import logging
import warnings
from enum import Enum
from typing import Any, Optional

import numpy as np

from ...domain._errors import DimensionMismatchError, NoForwardContextError
from ...domain._layer import ILayer
from ...domain._size import Size, SizeLike
from ...domain.model._pooling_config_mixin import PoolingConfigMixin
from ..module._serialization_core import register_layer
from ..ops.maxpool_cpu import (
    maxpool_backward_cpu,
    maxpool_forward_cpu,
    momentum_update,
)
from ..ops.pooling_topology import PoolingTopology, build_pooling_topology

logger = logging.getLogger(__name__)


class LayerState(Enum):
    """
    Routing state of a layer.

    READY  : no valid winner state; backward is rejected.
    PRIMED : a forward call has recorded winners; backward may consume them.
    """

    READY = "ready"
    PRIMED = "primed"


def _as_matrix(a: Any, what: str) -> np.ndarray:
    """
    Convert `a` to a float64 2D array, rejecting anything that is not 2D.
    """
    arr = np.asarray(a, dtype=np.float64)
    if arr.ndim != 2:
        raise DimensionMismatchError(f"{what} ndim", 2, arr.ndim)
    return arr


@register_layer()
class MaxPoolingLayer(PoolingConfigMixin, ILayer):
    """
    Non-overlapping max pooling over feature maps with learned calibration.

    Parameters
    ----------
    rng : IRandom or None
        Shared randomness source. Stored, never consumed.
    input_size : Size or int or tuple[int, int]
        Input grid size of one feature map.
    pool_size : Size or int or tuple[int, int]
        Pooling window size. Must evenly tile `input_size`.
    n_featmap : int
        Number of feature maps.

    Raises
    ------
    IncompatibleGeometryError
        If `pool_size` does not evenly divide `input_size`.
    ValueError
        If a size or `n_featmap` is not a positive integer.

    Examples
    --------
    >>> layer = MaxPoolingLayer(None, (4, 4), (2, 2), 1)
    >>> y = layer.forward_propagation(x)          # x: (16, n_samples)
    >>> prev = layer.back_propagation(err)        # err: (4, n_samples)
    """

    def __init__(
        self,
        rng: Optional[Any],
        input_size: SizeLike,
        pool_size: SizeLike,
        n_featmap: int,
    ) -> None:
        self.rng = rng
        self._topology: PoolingTopology = build_pooling_topology(
            input_size, pool_size, n_featmap
        )

        n = self._topology.n_featmap
        self._scale = np.ones(n, dtype=np.float64)
        self._bias = np.zeros(n, dtype=np.float64)
        self._dscale = np.zeros(n, dtype=np.float64)
        self._dbias = np.zeros(n, dtype=np.float64)

        self._input: Optional[np.ndarray] = None
        self._output: Optional[np.ndarray] = None
        self._winners: Optional[np.ndarray] = None

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    @property
    def topology(self) -> PoolingTopology:
        return self._topology

    @property
    def input_size(self) -> Size:
        return self._topology.input_size

    @property
    def pool_size(self) -> Size:
        return self._topology.pool_size

    @property
    def output_size(self) -> Size:
        return self._topology.output_size

    @property
    def n_featmap(self) -> int:
        return self._topology.n_featmap

    @property
    def n_input(self) -> int:
        return self._topology.n_input

    @property
    def n_output(self) -> int:
        return self._topology.n_output

    # ------------------------------------------------------------------
    # Parameters (copies; mutate only through back_propagation)
    # ------------------------------------------------------------------
    @property
    def scale(self) -> np.ndarray:
        return self._scale.copy()

    @property
    def bias(self) -> np.ndarray:
        return self._bias.copy()

    @property
    def dscale(self) -> np.ndarray:
        return self._dscale.copy()

    @property
    def dbias(self) -> np.ndarray:
        return self._dbias.copy()

    # ------------------------------------------------------------------
    # Per-call state
    # ------------------------------------------------------------------
    @property
    def state(self) -> LayerState:
        return LayerState.READY if self._winners is None else LayerState.PRIMED

    @property
    def last_input(self) -> Optional[np.ndarray]:
        """Input cached by the latest forward call (None before the first)."""
        return None if self._input is None else self._input.copy()

    @property
    def last_output(self) -> Optional[np.ndarray]:
        """Output computed by the latest forward call (None before the first)."""
        return None if self._output is None else self._output.copy()

    @property
    def winners(self) -> Optional[np.ndarray]:
        """
        Winner table of the pending forward call, shape (n_output, n_samples).

        Entry ``(o, d)`` is the position inside ``topology.edge_oi[o]`` of the
        input that won window ``o`` for sample ``d``. None when READY.
        """
        return None if self._winners is None else self._winners.copy()

    # ------------------------------------------------------------------
    # Propagation
    # ------------------------------------------------------------------
    def forward_propagation(self, x: Any) -> np.ndarray:
        """
        Max-pool a batch of activations.

        Parameters
        ----------
        x : array-like
            Activations of shape (n_input, n_samples).

        Returns
        -------
        np.ndarray
            float64 activations of shape (n_output, n_samples), each equal to
            ``scale[f] * window_max + bias[f]``.

        Raises
        ------
        DimensionMismatchError
            If `x` is not 2D or its row count differs from `n_input`.
        """
        x = _as_matrix(x, "input")
        if x.shape[0] != self.n_input:
            raise DimensionMismatchError("input rows", self.n_input, x.shape[0])

        if np.isnan(x).any():
            warnings.warn(
                "MaxPoolingLayer received NaN activations; NaN values never "
                "win a pooling window.",
                RuntimeWarning,
                stacklevel=2,
            )

        y, winners = maxpool_forward_cpu(x, self._topology, self._scale, self._bias)

        self._input = x.copy()
        self._output = y
        self._winners = winners
        return y.copy()

    def back_propagation(
        self, error: Any, eta: float = 0.1, momentum: float = 0.5
    ) -> np.ndarray:
        """
        Route the upstream error through the recorded winners and update the
        calibration parameters.

        Parameters
        ----------
        error : array-like
            Upstream error of shape (n_output, n_samples).
        eta : float, optional
            Learning rate. Defaults to 0.1.
        momentum : float, optional
            Momentum coefficient. Defaults to 0.5.

        Returns
        -------
        np.ndarray
            Previous-layer error of shape (n_input, n_samples). Non-zero only
            at inputs that won a window for that sample, where it equals
            ``scale[f] * error``.

        Raises
        ------
        NoForwardContextError
            If no forward call is pending.
        DimensionMismatchError
            If `error` is not 2D, its row count differs from `n_output`, or
            its column count differs from the cached sample count.

        Notes
        -----
        The error is routed with the scale in effect during the matching
        forward call; scale and bias are updated afterwards.
        """
        if self._winners is None or self._input is None:
            raise NoForwardContextError(type(self).__name__)

        error = _as_matrix(error, "error")
        if error.shape[0] != self.n_output:
            raise DimensionMismatchError("error rows", self.n_output, error.shape[0])
        n_samples = self._winners.shape[1]
        if error.shape[1] != n_samples:
            raise DimensionMismatchError("error columns", n_samples, error.shape[1])

        prev_error, grad_scale, grad_bias = maxpool_backward_cpu(
            error, self._input, self._winners, self._topology, self._scale
        )

        eta, momentum = float(eta), float(momentum)
        momentum_update(self._scale, self._dscale, grad_scale, eta=eta, momentum=momentum)
        momentum_update(self._bias, self._dbias, grad_bias, eta=eta, momentum=momentum)
        logger.debug(
            "MaxPoolingLayer update (eta=%g, momentum=%g): scale=%s bias=%s",
            eta,
            momentum,
            self._scale,
            self._bias,
        )

        self._winners = None
        return prev_error

    # Aliases matching the framework's module naming
    def forward(self, x: Any) -> np.ndarray:
        return self.forward_propagation(x)

    def backward(
        self, error: Any, eta: float = 0.1, momentum: float = 0.5
    ) -> np.ndarray:
        return self.back_propagation(error, eta=eta, momentum=momentum)

    def __call__(self, x: Any) -> np.ndarray:
        return self.forward_propagation(x)

    def __repr__(self) -> str:
        return (
            f"MaxPoolingLayer(input_size={self.input_size}, "
            f"pool_size={self.pool_size}, n_featmap={self.n_featmap})"
        )
