import networkx as nx
import pytest

from netroute.graph.strict_multidigraph import StrictMultiDiGraph, check_weight


def test_init_empty_graph():
    """Ensure a newly initialized graph has no nodes or edges."""
    g = StrictMultiDiGraph()
    assert len(g) == 0
    assert g.get_edges() == {}
    assert not g.is_frozen


def test_add_node_duplicate():
    """Adding a node that already exists should raise ValueError."""
    g = StrictMultiDiGraph()
    g.add_node("A")
    with pytest.raises(ValueError, match="already exists"):
        g.add_node("A")


def test_add_edge_requires_existing_nodes():
    g = StrictMultiDiGraph()
    g.add_node("A")
    with pytest.raises(ValueError, match="Target node 'B' does not exist"):
        g.add_edge("A", "B", weight=1)
    with pytest.raises(ValueError, match="Source node 'Z' does not exist"):
        g.add_edge("Z", "A", weight=1)


def test_add_edge_requires_weight():
    g = StrictMultiDiGraph()
    g.add_node("A")
    g.add_node("B")
    with pytest.raises(ValueError, match="has no weight"):
        g.add_edge("A", "B")


def test_add_edge_duplicate_key():
    g = StrictMultiDiGraph()
    g.add_node("A")
    g.add_node("B")
    g.add_edge("A", "B", key=5, weight=1)
    with pytest.raises(ValueError, match="already exists"):
        g.add_edge("A", "B", key=5, weight=1)
    # Counter moved past the explicit key
    assert g.add_edge("A", "B", weight=1) == 6


def test_add_weighted_edge_creates_nodes():
    g = StrictMultiDiGraph()
    e1 = g.add_weighted_edge("A", "B", 3)
    e2 = g.add_weighted_edge("B", "C", 0)
    assert set(g.nodes) == {"A", "B", "C"}
    assert (e1, e2) == (0, 1)
    assert g.get_edges()[e1][:3] == ("A", "B", 0)
    assert g.get_edges()[e1][3]["weight"] == 3


def test_parallel_edges_are_kept():
    g = StrictMultiDiGraph()
    g.add_weighted_edge("A", "B", 5)
    g.add_weighted_edge("A", "B", 2)
    assert list(g.succ["A"]["B"]) == [0, 1]
    assert g.number_of_edges() == 2
    assert g.neighbors_with_weights("A") == (("B", 5, 0), ("B", 2, 1))
    assert not g.has_edge("B", "A")


@pytest.mark.parametrize("weight", [-1, 1.5, "3", True, None])
def test_add_weighted_edge_rejects_bad_weight(weight):
    g = StrictMultiDiGraph()
    with pytest.raises(ValueError):
        g.add_weighted_edge("A", "B", weight)
    # Nothing was added
    assert len(g) == 0


def test_check_weight_accepts_zero_and_large():
    assert check_weight(0) == 0
    assert check_weight(2**40) == 2**40


def test_neighbors_with_weights_in_insertion_order():
    g = StrictMultiDiGraph()
    g.add_weighted_edge("A", "C", 4)
    g.add_weighted_edge("A", "B", 1)
    g.add_weighted_edge("A", "C", 2)
    g.add_weighted_edge("B", "C", 1)
    assert g.neighbors_with_weights("A") == (("C", 4, 0), ("B", 1, 1), ("C", 2, 2))
    assert g.neighbors_with_weights("B") == (("C", 1, 3),)


def test_neighbors_of_sink_and_unknown_node_are_empty():
    g = StrictMultiDiGraph()
    g.add_weighted_edge("A", "B", 1)
    g.freeze()
    assert g.neighbors_with_weights("B") == ()
    assert g.neighbors_with_weights("nope") == ()


def test_freeze_blocks_mutation():
    g = StrictMultiDiGraph()
    g.add_weighted_edge("A", "B", 1)
    assert g.freeze() is g
    assert g.is_frozen
    assert nx.is_frozen(g)

    with pytest.raises(nx.NetworkXError):
        g.add_weighted_edge("B", "C", 1)
    with pytest.raises(nx.NetworkXError):
        g.add_edge("A", "B", weight=1)
    with pytest.raises(nx.NetworkXError):
        g.remove_node("A")
    with pytest.raises(nx.NetworkXError):
        g.remove_edge("A", "B")

    assert set(g.nodes) == {"A", "B"}
    assert g.number_of_edges() == 1


def test_freeze_is_idempotent():
    g = StrictMultiDiGraph()
    g.add_weighted_edge("A", "B", 1)
    g.freeze()
    g.freeze()
    assert g.neighbors_with_weights("A") == (("B", 1, 0),)

