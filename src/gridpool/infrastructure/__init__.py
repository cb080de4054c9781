"""
Infrastructure layer: NumPy implementations of the domain contracts.
"""

from ._random import Random
from .module import layer_from_config, layer_to_config, register_layer
from .ops.pooling_topology import Edge, PoolingTopology, build_pooling_topology
from .pooling import LayerState, MaxPoolingLayer

__all__ = [
    "Edge",
    "LayerState",
    "MaxPoolingLayer",
    "PoolingTopology",
    "Random",
    "build_pooling_topology",
    "layer_from_config",
    "layer_to_config",
    "register_layer",
]
