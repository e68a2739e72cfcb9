"""Graph primitives and helpers.

This package provides the strict weighted multi-directed graph type
`StrictMultiDiGraph` and the edge-list loader in `io`.
"""

from netroute.graph.strict_multidigraph import (
    EdgeID,
    NodeID,
    StrictMultiDiGraph,
)

__all__ = ["EdgeID", "NodeID", "StrictMultiDiGraph"]
