"""
CPU reference kernels for graph-based max pooling (NumPy backend).

These functions implement the numerical core of `MaxPoolingLayer` on top of a
`PoolingTopology`. They are pure: all layer state (scale, bias, momenta,
cached activations) is passed in and results are returned, which keeps them
easy to test in isolation.

Matrix layout
-------------
Activations and errors are 2D matrices of shape ``(n_nodes, n_samples)``:
one row per unit (flat index as defined by the topology), one column per
sample.

Routing state
-------------
The forward kernel returns a *winner table* of shape ``(n_output, n_samples)``
holding, for every output node and every sample, the position of the winning
edge inside ``edge_oi[o]``. Winners are tracked per sample; an edge never
carries a shared "active" flag, so earlier samples of a batch keep their own
routing when later samples pick a different winner.

Design notes
------------
- Ties are broken by first-encountered edge (lowest candidate position).
- NaN activations never win a window. A window with no winner candidate
  (all ``-inf`` or NaN) falls back to edge position 0.
- Gradient normalization divides by ``n_samples * output_size.total()``,
  i.e. the number of windows of a single feature map, not the total number
  of output nodes.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from .pooling_topology import PoolingTopology


def maxpool_forward_cpu(
    x: np.ndarray,
    topology: PoolingTopology,
    scale: np.ndarray,
    bias: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Max-pool a batch of activations and apply per-feature-map calibration.

    Parameters
    ----------
    x : np.ndarray
        Input activations, shape (n_input, n_samples).
    topology : PoolingTopology
        Edge graph of the layer.
    scale, bias : np.ndarray
        Per-feature-map calibration, shape (n_featmap,).

    Returns
    -------
    tuple[np.ndarray, np.ndarray]
        y :
            Output activations, shape (n_output, n_samples):
            ``scale[f] * max + bias[f]``.
        winners :
            int64 winner table, shape (n_output, n_samples).

    Notes
    -----
    Shapes are assumed to be validated by the caller.
    """
    candidates = topology.candidates
    featmap = topology.output_featmap
    n_output = candidates.shape[0]
    n_samples = x.shape[1]

    y = np.empty((n_output, n_samples), dtype=np.float64)
    winners = np.empty((n_output, n_samples), dtype=np.int64)

    rows = np.arange(n_output)
    out_scale = scale[featmap]
    out_bias = bias[featmap]
    for d in range(n_samples):
        window = x[candidates, d]  # (n_output, pool_total), edge order
        # NaN never compares greater, so it must not be picked by argmax
        ranked = np.where(np.isnan(window), -np.inf, window)
        # np.argmax returns the first maximum -> first-encountered tie rule
        win = np.argmax(ranked, axis=1)
        winners[:, d] = win
        y[:, d] = out_scale * window[rows, win] + out_bias

    return y, winners


def winning_inputs(topology: PoolingTopology, winners: np.ndarray) -> np.ndarray:
    """
    Translate a winner table into flat input indices.

    Parameters
    ----------
    topology : PoolingTopology
        Edge graph of the layer.
    winners : np.ndarray
        Winner table, shape (n_output, n_samples).

    Returns
    -------
    np.ndarray
        int64 array of shape (n_output, n_samples); entry ``(o, d)`` is the
        input node that won window ``o`` for sample ``d``.
    """
    rows = np.arange(topology.n_output)[:, None]
    return topology.candidates[rows, winners]


def maxpool_backward_cpu(
    error: np.ndarray,
    x: np.ndarray,
    winners: np.ndarray,
    topology: PoolingTopology,
    scale: np.ndarray,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Route the upstream error through the recorded winners and compute the
    per-feature-map calibration gradients.

    Parameters
    ----------
    error : np.ndarray
        Upstream error, shape (n_output, n_samples).
    x : np.ndarray
        Input activations cached by the matching forward call,
        shape (n_input, n_samples).
    winners : np.ndarray
        Winner table returned by the matching forward call.
    topology : PoolingTopology
        Edge graph of the layer.
    scale : np.ndarray
        Per-feature-map scale used to route the error, shape (n_featmap,).

    Returns
    -------
    tuple[np.ndarray, np.ndarray, np.ndarray]
        prev_error :
            Error for the previous layer, shape (n_input, n_samples). Zero at
            every input that did not win a window for that sample.
        grad_scale :
            ``sum(x_win * error) / (n_samples * windows_per_map)`` per map.
        grad_bias :
            ``sum(error) / (n_samples * windows_per_map)`` per map.
    """
    featmap = topology.output_featmap
    n_featmap = topology.n_featmap
    n_samples = error.shape[1]

    prev_error = np.zeros((topology.n_input, n_samples), dtype=np.float64)
    grad_scale = np.zeros(n_featmap, dtype=np.float64)
    grad_bias = np.zeros(n_featmap, dtype=np.float64)

    if n_samples == 0:
        return prev_error, grad_scale, grad_bias

    win_in = winning_inputs(topology, winners)
    out_scale = scale[featmap]
    norm = float(n_samples * topology.output_size.total())

    for d in range(n_samples):
        e_d = error[:, d]
        # unbuffered accumulation: an input may win more than one window
        np.add.at(prev_error[:, d], win_in[:, d], out_scale * e_d)

        x_win = x[win_in[:, d], d]
        grad_scale += np.bincount(featmap, weights=x_win * e_d, minlength=n_featmap)
        grad_bias += np.bincount(featmap, weights=e_d, minlength=n_featmap)

    grad_scale /= norm
    grad_bias /= norm
    return prev_error, grad_scale, grad_bias


def momentum_update(
    param: np.ndarray,
    velocity: np.ndarray,
    grad: np.ndarray,
    *,
    eta: float,
    momentum: float,
) -> None:
    """
    Heavy-ball momentum step, applied in place.

    ``velocity <- momentum * velocity + eta * grad``;
    ``param <- param + velocity``.
    """
    velocity *= momentum
    velocity += eta * grad
    param += velocity
