"""
gridpool: max-pooling layer with an explicit input/output connectivity graph.

Public API
----------
- `Size`                : immutable (rows, cols) grid size
- `MaxPoolingLayer`     : max pooling with per-feature-map affine calibration
- `Random`              : seeded randomness source shared by layers
- `build_pooling_topology`, `PoolingTopology`, `Edge`
- Errors: `GridPoolError`, `IncompatibleGeometryError`,
  `DimensionMismatchError`, `NoForwardContextError`
"""

from .domain import (
    DimensionMismatchError,
    GridPoolError,
    ILayer,
    IncompatibleGeometryError,
    IRandom,
    NoForwardContextError,
    Size,
)
from .infrastructure import (
    Edge,
    LayerState,
    MaxPoolingLayer,
    PoolingTopology,
    Random,
    build_pooling_topology,
    layer_from_config,
    layer_to_config,
    register_layer,
)

__version__ = "1.0.0"

__all__ = [
    "DimensionMismatchError",
    "Edge",
    "GridPoolError",
    "ILayer",
    "IncompatibleGeometryError",
    "IRandom",
    "LayerState",
    "MaxPoolingLayer",
    "NoForwardContextError",
    "PoolingTopology",
    "Random",
    "Size",
    "build_pooling_topology",
    "layer_from_config",
    "layer_to_config",
    "register_layer",
]
