"""Shortest path first (SPF) computation for weighted directed graphs.

Dijkstra's algorithm over non-negative integer weights with a binary-heap
frontier. The frontier is keyed by ``(cost, discovery sequence)`` and
predecessors change only on a strictly smaller cost, so among equal-cost
alternatives the one discovered first wins. Outgoing edges are relaxed in
insertion order, which makes results reproducible for identical input.
"""

from __future__ import annotations

from heapq import heappop, heappush
from itertools import count
from typing import Dict, List, Optional, Tuple

from netroute.algorithms.types import Cost, PathResult, PredMap
from netroute.exceptions import NoPathError, UnknownNodeError
from netroute.graph.strict_multidigraph import NodeID, StrictMultiDiGraph


def spf(
    graph: StrictMultiDiGraph,
    src_node: NodeID,
    dst_node: Optional[NodeID] = None,
) -> Tuple[Dict[NodeID, Cost], PredMap]:
    """Compute minimum costs and predecessors from a source node.

    When ``dst_node`` is given the search stops as soon as it is extracted
    from the frontier; costs of nodes not yet finalized at that point are
    upper bounds only.

    Args:
        graph: The directed graph (StrictMultiDiGraph).
        src_node: The source node from which to compute shortest paths.
        dst_node: Optional node at which to stop early.

    Returns:
        A tuple of (costs, pred):
          - costs: Maps each discovered node to its best known cost from src_node.
          - pred: Maps each discovered node except src_node to its predecessor.

    Raises:
        KeyError: If src_node does not exist in graph.
    """
    if src_node not in graph:
        raise KeyError(f"Source node '{src_node}' is not in the graph.")

    costs: Dict[NodeID, Cost] = {src_node: 0}
    pred: PredMap = {}
    done = set()
    seq = count()
    min_pq: List[Tuple[Cost, int, NodeID]] = [(0, next(seq), src_node)]

    while min_pq:
        current_cost, _, node_id = heappop(min_pq)
        if node_id in done:
            continue
        done.add(node_id)
        if node_id == dst_node:
            break

        for neighbor_id, weight, _edge_id in graph.neighbors_with_weights(node_id):
            if neighbor_id in done:
                continue
            new_cost = current_cost + weight
            if neighbor_id not in costs or new_cost < costs[neighbor_id]:
                costs[neighbor_id] = new_cost
                pred[neighbor_id] = node_id
                heappush(min_pq, (new_cost, next(seq), neighbor_id))

    return costs, pred


def resolve_path(src_node: NodeID, dst_node: NodeID, pred: PredMap) -> Tuple[NodeID, ...]:
    """Walk predecessor links from dst_node back to src_node.

    Returns:
        The node sequence from src_node to dst_node, or an empty tuple when
        dst_node was never reached.
    """
    if dst_node != src_node and dst_node not in pred:
        return ()
    nodes = [dst_node]
    while nodes[-1] != src_node:
        nodes.append(pred[nodes[-1]])
    nodes.reverse()
    return tuple(nodes)


def shortest_path(
    graph: StrictMultiDiGraph, origin: NodeID, destination: NodeID
) -> PathResult:
    """Return the minimum-weight path from origin to destination.

    ``origin == destination`` yields the single-node path with cost 0.

    Raises:
        UnknownNodeError: If origin or destination is not in the graph.
        NoPathError: If destination is unreachable from origin.
    """
    for node in (origin, destination):
        if node not in graph:
            raise UnknownNodeError(node)

    costs, pred = spf(graph, origin, destination)
    nodes = resolve_path(origin, destination, pred)
    if not nodes:
        raise NoPathError(origin, destination)
    return PathResult(nodes=nodes, cost=costs[destination])
