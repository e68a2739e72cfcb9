"""Strict weighted multi-directed graph used as the query-time graph store.

`StrictMultiDiGraph` extends `networkx.MultiDiGraph` to enforce explicit node
management, unique integer edge identifiers that record insertion order, and
non-negative integer edge weights. Once construction is finished the graph is
frozen: every mutator raises and the per-node adjacency is materialized as
immutable tuples that any number of concurrent readers can share.
"""

from __future__ import annotations

from typing import Any, Dict, Hashable, Optional, Tuple

import networkx as nx

NodeID = Hashable
EdgeID = Hashable
AttrDict = Dict[str, Any]
EdgeTuple = Tuple[NodeID, NodeID, EdgeID, AttrDict]
#: One outgoing adjacency entry: ``(target_node, weight, edge_id)``.
Neighbor = Tuple[NodeID, int, EdgeID]


def check_weight(weight: Any) -> int:
    """Return ``weight`` if it is a usable edge weight.

    Args:
        weight: Candidate edge weight.

    Returns:
        int: The validated weight.

    Raises:
        ValueError: If the weight is not an integer or is negative.
    """
    if isinstance(weight, bool) or not isinstance(weight, int):
        raise ValueError(f"Edge weight must be an integer, got {weight!r}.")
    if weight < 0:
        raise ValueError(f"Negative edge weight {weight} is not supported.")
    return weight


class StrictMultiDiGraph(nx.MultiDiGraph):
    """A multi-directed graph with strict rules, ordered edge IDs and weights.

    This class enforces:
      - No automatic creation of missing nodes in ``add_edge``
        (``add_weighted_edge`` creates them implicitly).
      - No duplicate nodes (raises ValueError on duplicates).
      - No duplicate edges by key (raises ValueError on duplicates).
      - Every edge carries a non-negative integer ``weight`` attribute.
      - Edge keys are monotonically increasing integers, so sorting by key
        yields insertion order.
      - After ``freeze()`` the graph cannot be modified.

    Inherits from:
        networkx.MultiDiGraph
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize a StrictMultiDiGraph.

        Args:
            *args: Positional arguments forwarded to the MultiDiGraph constructor.
            **kwargs: Keyword arguments forwarded to the MultiDiGraph constructor.

        Attributes:
            _edges: Map edge key to ``(source_node, target_node, edge_key, attribute_dict)``.
            _out: Outgoing ``(target, weight, edge_id)`` entries per node, in
                insertion order.
        """
        self._edges: Dict[EdgeID, EdgeTuple] = {}
        self._out: Dict[NodeID, Any] = {}
        # Monotonically increasing integer for auto-assigned edge IDs.
        self._next_edge_id: int = 0
        super().__init__(*args, **kwargs)

    def new_edge_key(self, u: NodeID, v: NodeID, key: Optional[int] = None) -> int:  # type: ignore[override]
        """Return a new unique integer edge ID.

        Signature matches NetworkX's ``new_edge_key(self, u, v, key=None)``.

        Args:
            u: Source node identifier (unused here).
            v: Destination node identifier (unused here).
            key: Optional suggestion (ignored); maintained for API compatibility.

        Returns:
            int: A new unique integer edge id.
        """
        next_edge_id = self._next_edge_id
        self._next_edge_id += 1
        return next_edge_id

    @property
    def is_frozen(self) -> bool:
        """True once ``freeze()`` has been called."""
        return nx.is_frozen(self)

    def freeze(self) -> StrictMultiDiGraph:
        """Finish construction and make the graph immutable.

        Materializes the outgoing adjacency of every node as a tuple and
        replaces all NetworkX mutators with ones raising
        ``networkx.NetworkXError``. Calling it twice is a no-op.

        Returns:
            StrictMultiDiGraph: ``self``, for chaining.
        """
        if self.is_frozen:
            return self
        self._out = {node: tuple(entries) for node, entries in self._out.items()}
        nx.freeze(self)
        return self

    #
    # Node management
    #
    def add_node(self, node_for_adding: NodeID, **attr: Any) -> None:
        """Add a single node, disallowing duplicates.

        Args:
            node_for_adding: The node to add.
            **attr: Arbitrary attributes for this node.

        Raises:
            ValueError: If the node already exists in the graph.
        """
        if node_for_adding in self:
            raise ValueError(f"Node '{node_for_adding}' already exists in this graph.")
        super().add_node(node_for_adding, **attr)

    #
    # Edge management
    #
    def add_edge(
        self,
        u_for_edge: NodeID,
        v_for_edge: NodeID,
        key: Optional[EdgeID] = None,
        **attr: Any,
    ) -> EdgeID:
        """Add a directed weighted edge from u_for_edge to v_for_edge.

        If no key is provided, the next integer key is assigned via
        ``new_edge_key``. This method does not create nodes automatically;
        both endpoints must already exist. When an explicit integer key is
        provided, the internal counter is advanced to avoid collisions with
        future auto-assigned keys.

        Args:
            u_for_edge: The source node. Must exist in the graph.
            v_for_edge: The target node. Must exist in the graph.
            key: The unique edge key. If None, a new key is generated. Must not
                already be in use if provided.
            **attr: Edge attributes; ``weight`` is required.

        Returns:
            EdgeID: The key associated with this new edge.

        Raises:
            ValueError: If either node does not exist, the key is already in
                use, or the weight is missing or invalid.
        """
        if u_for_edge not in self:
            raise ValueError(f"Source node '{u_for_edge}' does not exist.")
        if v_for_edge not in self:
            raise ValueError(f"Target node '{v_for_edge}' does not exist.")
        if "weight" not in attr:
            raise ValueError(f"Edge {u_for_edge}->{v_for_edge} has no weight.")
        weight = check_weight(attr["weight"])

        if key is None:
            key = self.new_edge_key(u_for_edge, v_for_edge)
        else:
            if key in self._edges:
                raise ValueError(f"Edge with id '{key}' already exists.")
            if isinstance(key, int) and key >= self._next_edge_id:
                self._next_edge_id = key + 1

        super().add_edge(u_for_edge, v_for_edge, key=key, **attr)
        self._edges[key] = (
            u_for_edge,
            v_for_edge,
            key,
            self[u_for_edge][v_for_edge][key],
        )
        self._out.setdefault(u_for_edge, []).append((v_for_edge, weight, key))
        return key

    def add_weighted_edge(self, source: NodeID, target: NodeID, weight: int) -> EdgeID:
        """Append an edge, creating its endpoints on first sight.

        Parallel edges between the same ordered pair are kept as distinct
        alternatives.

        Args:
            source: Source node label.
            target: Target node label.
            weight: Non-negative integer weight.

        Returns:
            EdgeID: The key of the new edge.

        Raises:
            ValueError: If the weight is not a non-negative integer.
            networkx.NetworkXError: If the graph is frozen.
        """
        check_weight(weight)
        if source not in self:
            self.add_node(source)
        if target not in self:
            self.add_node(target)
        return self.add_edge(source, target, weight=weight)

    #
    # Convenience methods
    #
    def neighbors_with_weights(self, node: NodeID) -> Tuple[Neighbor, ...]:
        """Return the outgoing ``(target, weight, edge_id)`` entries of a node.

        Entries are in edge insertion order. A node without outgoing edges, or
        one the graph has never seen, yields an empty tuple.
        """
        return tuple(self._out.get(node, ()))

    def get_edges(self) -> Dict[EdgeID, EdgeTuple]:
        """Retrieve a dictionary of all edges by their keys.

        Returns:
            Dict[EdgeID, EdgeTuple]: A mapping of edge key to
                ``(source_node, target_node, edge_key, edge_attributes)``.
        """
        return self._edges
