"""Per-datagram request handling.

`QueryDispatcher` turns one inbound payload into one outbound payload:
decode, run the shortest-path engine under a wall-clock timer, encode the
path or an error message. Every per-request failure stops here. Nothing is
shared between calls except the frozen graph, so `handle` may run on any
number of threads at once.
"""

from __future__ import annotations

from time import perf_counter
from typing import Any, Optional

from netroute.algorithms.spf import shortest_path
from netroute.exceptions import EncodeError, QueryError
from netroute.graph.strict_multidigraph import StrictMultiDiGraph
from netroute.logging import get_logger
from netroute.protocol import decode_request, encode_error, encode_response

logger = get_logger(__name__)


class QueryDispatcher:
    """Answer shortest-path requests against a frozen graph.

    Attributes:
        graph: The graph every query is evaluated against.
    """

    def __init__(self, graph: StrictMultiDiGraph) -> None:
        """Initialize the dispatcher.

        Args:
            graph: A frozen graph. It is shared read-only with every call.

        Raises:
            ValueError: If the graph is still mutable.
        """
        if not graph.is_frozen:
            raise ValueError("QueryDispatcher requires a frozen graph.")
        self.graph = graph

    def handle(self, payload: bytes, sender: Any = None) -> Optional[bytes]:
        """Process one request datagram.

        Args:
            payload: Raw request bytes.
            sender: Peer address, used only for logging.

        Returns:
            The reply bytes, or None when no reply could be encoded and the
            request is dropped.
        """
        try:
            query = decode_request(payload)
        except QueryError as exc:
            logger.warning(f"Rejecting malformed request from {sender}: {exc}")
            return self._reply_error(str(exc), sender)

        logger.debug(f"Payload received from client {sender}: {query}")

        start_time = perf_counter()
        try:
            result = shortest_path(self.graph, query.origin, query.destination)
        except QueryError as exc:
            logger.info(f"Query {query.origin}->{query.destination} from {sender} failed: {exc}")
            return self._reply_error(str(exc), sender)
        except Exception as exc:
            logger.exception(f"Unexpected failure answering {query} from {sender}")
            return self._reply_error(f"internal error: {type(exc).__name__}", sender)
        elapsed = perf_counter() - start_time

        try:
            response = encode_response(result, elapsed)
        except EncodeError as exc:
            logger.error(f"Dropping response to {sender}: {exc}")
            return None

        logger.debug(
            f"Sending payload to client {sender}: path={list(result.nodes)} "
            f"cost={result.cost} elapsed={elapsed:.6f}s"
        )
        return response

    def _reply_error(self, message: str, sender: Any) -> Optional[bytes]:
        try:
            return encode_error(message)
        except EncodeError as exc:
            logger.error(f"Dropping error response to {sender}: {exc}")
            return None
