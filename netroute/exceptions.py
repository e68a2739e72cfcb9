"""Error taxonomy for netroute.

Only `ConfigurationError` is fatal, and only at startup. Everything else is
scoped to a single request and is stopped at the dispatcher or server
boundary: `QueryError` subclasses are answered with an error payload,
`EncodeError` and `TransportError` are logged and the request is dropped.
"""

from __future__ import annotations

from typing import Hashable


class NetrouteError(Exception):
    """Base class for all netroute errors."""


class ConfigurationError(NetrouteError):
    """Missing or invalid startup configuration, or an unusable graph source."""


class QueryError(NetrouteError):
    """A request that cannot be answered with a path; reported to the sender."""


class DecodeError(QueryError):
    """Inbound payload is not a well-formed request."""


class UnknownNodeError(QueryError):
    """Origin or destination is not part of the graph."""

    def __init__(self, node: Hashable) -> None:
        self.node = node
        super().__init__(f"node '{node}' not found in graph")


class NoPathError(QueryError):
    """Destination cannot be reached from the origin."""

    def __init__(self, origin: Hashable, destination: Hashable) -> None:
        self.origin = origin
        self.destination = destination
        super().__init__(f"no path from '{origin}' to '{destination}'")


class EncodeError(NetrouteError):
    """A response could not be serialized."""


class TransportError(NetrouteError):
    """A datagram could not be received or sent."""
