"""Shared graph fixtures.

Each fixture returns a frozen `StrictMultiDiGraph`. The ASCII sketches show
edge weights in brackets.
"""

from __future__ import annotations

from typing import Iterable

import pytest

from netroute.graph.io import edgelist_to_graph
from netroute.graph.strict_multidigraph import StrictMultiDiGraph


def make_graph(lines: Iterable[str]) -> StrictMultiDiGraph:
    return edgelist_to_graph(lines)


@pytest.fixture
def triangle():
    #      [1]      [2]
    #  A───────►B───────►C
    #  │                 ▲
    #  └─────────────────┘
    #          [5]
    return make_graph(["A B 1", "B C 2", "A C 5"])


@pytest.fixture
def single_edge():
    #      [1]
    #  A───────►B
    return make_graph(["A B 1"])


@pytest.fixture
def parallel_edges():
    # A─►B has three alternatives; the cheapest one must be used.
    #      [7,2,4]      [1]
    #  A══════════►B───────►C
    return make_graph(["A B 7", "A B 2", "A B 4", "B C 1"])


@pytest.fixture
def square_tie():
    # Two equal-cost routes A->D; B is discovered before C.
    #       [1]        [1]
    #   ┌────────►B─────────┐
    #   │                   ▼
    #   A                   D
    #   │                   ▲
    #   │   [1]        [1]  │
    #   └────────►C─────────┘
    return make_graph(["A B 1", "A C 1", "B D 1", "C D 1"])


@pytest.fixture
def graph3():
    #  ┌────────►E─────────┐
    #  │ [1]        [1]    │
    #  │                   ▼   [1]
    #  A────────►B────────►C──────┐
    #  │ [1,1,1]   [1,1,1] │      ▼
    #  │                   │[2]   F
    #  │   [4]             ▼      │[1]
    #  └──────────────────►D◄─────┘
    return make_graph(
        [
            "A B 1",
            "A B 1",
            "A B 1",
            "B C 1",
            "B C 1",
            "B C 1",
            "C D 2",
            "A E 1",
            "E C 1",
            "A D 4",
            "C F 1",
            "F D 1",
        ]
    )


@pytest.fixture
def two_islands():
    # {A, B} and {X, Y} are not connected.
    return make_graph(["A B 3", "B A 3", "X Y 1", "Y X 1"])
