"""
Bipartite connectivity graph for non-overlapping max pooling.

This module builds, once per layer, the static edge graph that connects every
input unit to the output unit owning its pooling window, and every output unit
to all input units inside its window.

Node indexing
-------------
Units are addressed by flat integer indices, feature map major:

    input  index = f * input_size.total()  + y_in  * input_size.cols  + x_in
    output index = f * output_size.total() + y_out * output_size.cols + x_out

Edge storage
------------
The graph is kept as two parallel adjacency tables:

- ``edge_io[i]`` : edges from input node ``i`` to its output node(s)
- ``edge_oi[o]`` : edges from output node ``o`` to every input in its window

Each `Edge` carries a *mirror index* (`rev`), the position of its reciprocal
entry in the counterpart node's list, so either side can be reached in O(1)
without holding object references across the tables.

Design notes
------------
- Edges and tables are immutable once built. Per-call routing state (which
  candidate won a window for a given sample) lives outside the topology.
- Windows are non-overlapping, so every ``edge_io[i]`` is a singleton list.
  Consumers still iterate the full list and never assume this.
- Dense index arrays (`candidates`, `output_featmap`) are derived from
  ``edge_oi`` for the NumPy kernels and preserve edge order, which is the
  order ties are broken in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from numbers import Integral
from typing import List, Tuple

import numpy as np

from ...domain._errors import IncompatibleGeometryError
from ...domain._size import Size, SizeLike

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Edge:
    """
    Directed association from a node to its counterpart across the
    input/output boundary.

    Attributes
    ----------
    to : int
        Flat index of the counterpart node.
    featmap : int
        Feature map the edge belongs to.
    rev : int
        Position of the reciprocal edge in the counterpart node's list.
    """

    to: int
    featmap: int
    rev: int


class PoolingTopology:
    """
    Immutable input/output edge graph for a pooling layer.

    Instances are produced by `build_pooling_topology`; the constructor only
    freezes already-built adjacency lists.
    """

    def __init__(
        self,
        input_size: Size,
        pool_size: Size,
        output_size: Size,
        n_featmap: int,
        edge_io: List[List[Edge]],
        edge_oi: List[List[Edge]],
    ) -> None:
        self._input_size = input_size
        self._pool_size = pool_size
        self._output_size = output_size
        self._n_featmap = n_featmap
        self._edge_io: Tuple[Tuple[Edge, ...], ...] = tuple(tuple(l) for l in edge_io)
        self._edge_oi: Tuple[Tuple[Edge, ...], ...] = tuple(tuple(l) for l in edge_oi)

        candidates = np.array(
            [[e.to for e in edges] for edges in self._edge_oi], dtype=np.int64
        ).reshape(len(self._edge_oi), pool_size.total())
        output_featmap = np.array(
            [edges[0].featmap for edges in self._edge_oi], dtype=np.int64
        )
        candidates.setflags(write=False)
        output_featmap.setflags(write=False)
        self._candidates = candidates
        self._output_featmap = output_featmap

    @property
    def input_size(self) -> Size:
        return self._input_size

    @property
    def pool_size(self) -> Size:
        return self._pool_size

    @property
    def output_size(self) -> Size:
        return self._output_size

    @property
    def n_featmap(self) -> int:
        return self._n_featmap

    @property
    def n_input(self) -> int:
        """Total number of input nodes across all feature maps."""
        return len(self._edge_io)

    @property
    def n_output(self) -> int:
        """Total number of output nodes across all feature maps."""
        return len(self._edge_oi)

    @property
    def edge_io(self) -> Tuple[Tuple[Edge, ...], ...]:
        """Input -> output adjacency table."""
        return self._edge_io

    @property
    def edge_oi(self) -> Tuple[Tuple[Edge, ...], ...]:
        """Output -> input adjacency table."""
        return self._edge_oi

    @property
    def candidates(self) -> np.ndarray:
        """
        Read-only int64 array of shape (n_output, pool_size.total()).

        Row ``o`` lists the input indices of ``edge_oi[o]`` in edge order.
        """
        return self._candidates

    @property
    def output_featmap(self) -> np.ndarray:
        """Read-only int64 array mapping each output node to its feature map."""
        return self._output_featmap

    def n_edges(self) -> int:
        """Number of mirrored edge pairs."""
        return sum(len(edges) for edges in self._edge_oi)

    def validate(self) -> None:
        """
        Check the mirror bijection between both adjacency tables.

        Raises
        ------
        RuntimeError
            If any edge's reciprocal entry does not point back at it.
        """
        for o, edges in enumerate(self._edge_oi):
            for e, edge in enumerate(edges):
                back = self._edge_io[edge.to][edge.rev]
                if back.to != o or back.rev != e or back.featmap != edge.featmap:
                    raise RuntimeError(
                        f"Broken mirror: edge_oi[{o}][{e}] -> "
                        f"edge_io[{edge.to}][{edge.rev}]"
                    )
        for i, edges in enumerate(self._edge_io):
            for e, edge in enumerate(edges):
                back = self._edge_oi[edge.to][edge.rev]
                if back.to != i or back.rev != e or back.featmap != edge.featmap:
                    raise RuntimeError(
                        f"Broken mirror: edge_io[{i}][{e}] -> "
                        f"edge_oi[{edge.to}][{edge.rev}]"
                    )

    def __repr__(self) -> str:
        return (
            f"PoolingTopology(input_size={self._input_size}, "
            f"pool_size={self._pool_size}, output_size={self._output_size}, "
            f"n_featmap={self._n_featmap})"
        )


def _add_edge(
    edge_io: List[List[Edge]],
    edge_oi: List[List[Edge]],
    in_index: int,
    out_index: int,
    featmap: int,
) -> None:
    """
    Append a mirrored edge pair between `in_index` and `out_index`.
    """
    n_io = len(edge_io[in_index])
    n_oi = len(edge_oi[out_index])
    edge_io[in_index].append(Edge(to=out_index, featmap=featmap, rev=n_oi))
    edge_oi[out_index].append(Edge(to=in_index, featmap=featmap, rev=n_io))


def build_pooling_topology(
    input_size: SizeLike, pool_size: SizeLike, n_featmap: int
) -> PoolingTopology:
    """
    Build the edge graph for non-overlapping max pooling.

    Parameters
    ----------
    input_size : Size or int or tuple[int, int]
        Input grid size of a single feature map.
    pool_size : Size or int or tuple[int, int]
        Pooling window size.
    n_featmap : int
        Number of feature maps. Must be >= 1.

    Returns
    -------
    PoolingTopology
        The frozen edge graph.

    Raises
    ------
    IncompatibleGeometryError
        If the window does not evenly tile the input grid.
    ValueError
        If `n_featmap` is not a positive integer.
    """
    input_size = Size.of(input_size)
    pool_size = Size.of(pool_size)
    if (
        isinstance(n_featmap, bool)
        or not isinstance(n_featmap, Integral)
        or n_featmap < 1
    ):
        raise ValueError(f"n_featmap must be a positive integer, got {n_featmap!r}")
    n_featmap = int(n_featmap)

    if not pool_size.divides(input_size):
        raise IncompatibleGeometryError(input_size, pool_size)

    output_size = input_size // pool_size
    in_total = input_size.total()
    out_total = output_size.total()

    edge_io: List[List[Edge]] = [[] for _ in range(in_total * n_featmap)]
    edge_oi: List[List[Edge]] = [[] for _ in range(out_total * n_featmap)]

    for f in range(n_featmap):
        for y_out in range(output_size.rows):
            for x_out in range(output_size.cols):
                out_index = f * out_total + (y_out * output_size.cols + x_out)
                for dy in range(pool_size.rows):
                    for dx in range(pool_size.cols):
                        y_in = y_out * pool_size.rows + dy
                        x_in = x_out * pool_size.cols + dx
                        in_index = f * in_total + (y_in * input_size.cols + x_in)
                        _add_edge(edge_io, edge_oi, in_index, out_index, f)

    topology = PoolingTopology(
        input_size, pool_size, output_size, n_featmap, edge_io, edge_oi
    )
    logger.debug(
        "Built pooling topology %s: %d inputs, %d outputs, %d edges",
        topology,
        topology.n_input,
        topology.n_output,
        topology.n_edges(),
    )
    return topology
