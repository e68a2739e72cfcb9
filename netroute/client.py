"""Blocking one-shot UDP client for the shortest-path service."""

from __future__ import annotations

import socket
from typing import Any, Dict

from netroute.exceptions import TransportError
from netroute.protocol import MAX_RESPONSE_SIZE, decode_response, encode_request


def request_path(
    host: str,
    port: int,
    origin: str,
    destination: str,
    timeout: float = 5.0,
) -> Dict[str, Any]:
    """Send one query and wait for its reply.

    Args:
        host: Server host name or address.
        port: Server UDP port.
        origin: Origin node label.
        destination: Destination node label.
        timeout: Seconds to wait for the reply.

    Returns:
        The decoded reply: ``{"path": [...], "calc-duration": "..."}`` on
        success or ``{"message": "..."}`` on error.

    Raises:
        TransportError: If the request cannot be sent or no reply arrives in time.
        DecodeError: If the reply is not a JSON object.
    """
    try:
        infos = socket.getaddrinfo(host, port, type=socket.SOCK_DGRAM)
    except socket.gaierror as exc:
        raise TransportError(f"Cannot resolve {host}:{port}: {exc}") from exc
    family, sock_type, proto, _, sockaddr = infos[0]

    with socket.socket(family, sock_type, proto) as sock:
        sock.settimeout(timeout)
        try:
            sock.sendto(encode_request(origin, destination), sockaddr)
            payload, _ = sock.recvfrom(MAX_RESPONSE_SIZE)
        except socket.timeout as exc:
            raise TransportError(
                f"No reply from {host}:{port} within {timeout}s"
            ) from exc
        except OSError as exc:
            raise TransportError(f"Request to {host}:{port} failed: {exc}") from exc
    return decode_response(payload)
