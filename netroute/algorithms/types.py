"""Types and data structures for shortest-path results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from netroute.graph.strict_multidigraph import NodeID

#: Cumulative path weight. Edge weights are non-negative integers.
Cost = int

#: Predecessor map produced by SPF: node -> node it was reached from.
PredMap = Dict[NodeID, NodeID]


@dataclass(frozen=True)
class PathResult:
    """A minimum-weight path.

    Attributes:
        nodes: Node sequence from origin to destination, both inclusive.
        cost: Sum of the traversed edge weights.
    """

    nodes: Tuple[NodeID, ...]
    cost: Cost

    @property
    def origin(self) -> NodeID:
        return self.nodes[0]

    @property
    def destination(self) -> NodeID:
        return self.nodes[-1]

    def __len__(self) -> int:
        return len(self.nodes)
