"""netroute: shortest-path queries over UDP.

netroute loads a static, weighted, directed graph from an edge list and
answers ``{"ori": ..., "dest": ...}`` datagrams with the minimum-weight path
and the time it took to compute.

Primary API:
    load_graph() - Read and freeze a graph from an edge-list file
    shortest_path() - Dijkstra over a frozen graph
    QueryDispatcher - One request payload in, one reply payload out
    QueryServer - UDP receive loop with a bounded worker pool
    request_path() - One-shot UDP client

Example:
    from netroute import QueryDispatcher, QueryServer, load_graph

    graph = load_graph("graph.txt")
    with QueryServer(QueryDispatcher(graph), port=9000) as server:
        server.serve_forever()
"""

from __future__ import annotations

from netroute import cli, logging
from netroute.algorithms import PathResult, shortest_path
from netroute.client import request_path
from netroute.config import ServerConfig, resolve_config
from netroute.dispatcher import QueryDispatcher
from netroute.exceptions import (
    ConfigurationError,
    DecodeError,
    EncodeError,
    NetrouteError,
    NoPathError,
    QueryError,
    TransportError,
    UnknownNodeError,
)
from netroute.graph import StrictMultiDiGraph
from netroute.graph.io import edgelist_to_graph, load_graph
from netroute.protocol import Query, decode_request, encode_error, encode_response
from netroute.server import QueryServer

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Graph
    "StrictMultiDiGraph",
    "edgelist_to_graph",
    "load_graph",
    # Algorithms
    "PathResult",
    "shortest_path",
    # Protocol and serving
    "Query",
    "decode_request",
    "encode_response",
    "encode_error",
    "QueryDispatcher",
    "QueryServer",
    "ServerConfig",
    "resolve_config",
    "request_path",
    # Errors
    "NetrouteError",
    "ConfigurationError",
    "QueryError",
    "DecodeError",
    "UnknownNodeError",
    "NoPathError",
    "EncodeError",
    "TransportError",
    # Utilities
    "cli",
    "logging",
]
