"""JSON wire format for shortest-path queries.

Request::

    {"ori": "<origin>", "dest": "<destination>"}

Success response::

    {"path": ["<origin>", ..., "<destination>"], "calc-duration": "1.25ms"}

Error response::

    {"message": "<human readable description>"}

One message per datagram in each direction. Requests are validated against
the packaged ``request.json`` schema.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict

from jsonschema.exceptions import best_match

from netroute.algorithms.types import PathResult
from netroute.exceptions import DecodeError, EncodeError
from netroute.graph.strict_multidigraph import NodeID
from netroute.schemas import get_validator

#: Reference bound for inbound datagrams.
MAX_DATAGRAM_SIZE = 1024

#: Largest payload a single UDP datagram over IPv4 can carry.
MAX_RESPONSE_SIZE = 65507


@dataclass(frozen=True)
class Query:
    """A decoded request: find a path from ``origin`` to ``destination``."""

    origin: NodeID
    destination: NodeID


def decode_request(payload: bytes) -> Query:
    """Decode one request datagram.

    Args:
        payload: Raw datagram bytes.

    Returns:
        Query: The requested origin and destination.

    Raises:
        DecodeError: If the payload is empty, not UTF-8, not JSON, or does not
            match the request schema.
    """
    if not payload:
        raise DecodeError("empty request")
    try:
        text = payload.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"request is not valid UTF-8: {exc.reason}") from None
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise DecodeError(f"invalid JSON: {exc}") from None
    except RecursionError:
        raise DecodeError("invalid JSON: nesting too deep") from None

    error = best_match(get_validator("request.json").iter_errors(data))
    if error is not None:
        raise DecodeError(f"invalid request: {error.message}")
    return Query(origin=data["ori"], destination=data["dest"])


def encode_request(origin: NodeID, destination: NodeID) -> bytes:
    """Serialize a request datagram (client side)."""
    return _dump({"ori": origin, "dest": destination})


def encode_response(result: PathResult, elapsed: float) -> bytes:
    """Serialize a success response.

    Args:
        result: The computed path.
        elapsed: Computation time in seconds.

    Raises:
        EncodeError: If the response cannot be serialized or does not fit in
            one datagram.
    """
    return _dump(
        {
            "path": list(result.nodes),
            "calc-duration": format_duration(elapsed),
        }
    )


def encode_error(message: str) -> bytes:
    """Serialize an error response carrying ``message``.

    Raises:
        EncodeError: If the response cannot be serialized.
    """
    return _dump({"message": message})


def decode_response(payload: bytes) -> Dict[str, Any]:
    """Decode a reply datagram into a dict (client side).

    Raises:
        DecodeError: If the payload is not a JSON object.
    """
    try:
        data = json.loads(payload.decode("utf-8"))
    except (ValueError, RecursionError) as exc:
        raise DecodeError(f"invalid response: {exc}") from None
    if not isinstance(data, dict):
        raise DecodeError("invalid response: expected a JSON object")
    return data


def _dump(obj: Dict[str, Any]) -> bytes:
    # Non-ASCII text, lone surrogates included, goes out as \uXXXX escapes
    try:
        data = json.dumps(obj).encode("ascii")
    except (TypeError, ValueError) as exc:
        raise EncodeError(f"cannot serialize response: {exc}") from exc
    if len(data) > MAX_RESPONSE_SIZE:
        raise EncodeError(
            f"response of {len(data)} bytes exceeds the {MAX_RESPONSE_SIZE}-byte datagram limit"
        )
    return data


def _with_fraction(value: int, unit: int) -> str:
    whole, part = divmod(value, unit)
    if not part:
        return str(whole)
    digits = len(str(unit)) - 1
    return f"{whole}.{part:0{digits}d}".rstrip("0")


def format_duration(seconds: float) -> str:
    """Return a duration in the conventional ``1h2m3.5s`` text form.

    Sub-second values use the largest unit that keeps the integer part
    non-zero, with nanosecond precision and no trailing zeros.

    Examples:
        0 -> "0s"; 750e-9 -> "750ns"; 12.5e-6 -> "12.5µs"; 0.003042 -> "3.042ms";
        1.5 -> "1.5s"; 123.5 -> "2m3.5s"; 3602 -> "1h0m2s".
    """
    ns = round(seconds * 1_000_000_000)
    if ns == 0:
        return "0s"
    sign = "-" if ns < 0 else ""
    ns = abs(ns)

    if ns < 1_000:
        return f"{sign}{ns}ns"
    if ns < 1_000_000:
        return f"{sign}{_with_fraction(ns, 1_000)}µs"
    if ns < 1_000_000_000:
        return f"{sign}{_with_fraction(ns, 1_000_000)}ms"

    hours, rem = divmod(ns, 3_600_000_000_000)
    minutes, rem = divmod(rem, 60_000_000_000)
    secs = _with_fraction(rem, 1_000_000_000) + "s"
    if hours:
        return f"{sign}{hours}h{minutes}m{secs}"
    if minutes:
        return f"{sign}{minutes}m{secs}"
    return f"{sign}{secs}"
