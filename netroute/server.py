"""UDP transport for the shortest-path service.

A single receive loop reads datagrams and hands each one to a bounded
``ThreadPoolExecutor``. Workers run the dispatcher and send the reply straight
back to the sender, so a slow query never delays the ones behind it. The
graph is frozen before serving starts and shared by reference with every
worker thread.
"""

from __future__ import annotations

import socket
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional, Tuple

from netroute.dispatcher import QueryDispatcher
from netroute.exceptions import ConfigurationError, TransportError
from netroute.logging import get_logger
from netroute.protocol import MAX_DATAGRAM_SIZE

logger = get_logger(__name__)

Address = Tuple[Any, ...]


def bind_udp_socket(host: str, port: int) -> socket.socket:
    """Create a UDP socket bound to ``(host, port)``.

    Raises:
        ConfigurationError: If the address cannot be resolved or bound.
    """
    try:
        infos = socket.getaddrinfo(host, port, type=socket.SOCK_DGRAM)
    except socket.gaierror as exc:
        raise ConfigurationError(f"Cannot resolve listen address {host}:{port}: {exc}") from exc

    family, sock_type, proto, _, sockaddr = infos[0]
    sock = socket.socket(family, sock_type, proto)
    try:
        sock.bind(sockaddr)
    except OSError as exc:
        sock.close()
        raise ConfigurationError(f"Cannot bind UDP {host}:{port}: {exc}") from exc
    return sock


class QueryServer:
    """Serve shortest-path queries over UDP with a bounded worker pool.

    Usage:
        with QueryServer(QueryDispatcher(graph), port=0) as server:
            threading.Thread(target=server.serve_forever, daemon=True).start()
            ...

    Attributes:
        dispatcher: Turns request payloads into reply payloads.
        workers: Number of worker threads.
        max_datagram_size: Receive buffer size; longer datagrams are truncated.
        poll_interval: Seconds between checks of the shutdown flag.
    """

    def __init__(
        self,
        dispatcher: QueryDispatcher,
        host: str = "localhost",
        port: int = 0,
        workers: int = 4,
        max_datagram_size: int = MAX_DATAGRAM_SIZE,
        poll_interval: float = 0.5,
    ) -> None:
        if workers < 1:
            raise ConfigurationError(f"workers must be >= 1, got {workers}")
        self.dispatcher = dispatcher
        self.workers = workers
        self.max_datagram_size = max_datagram_size
        self.poll_interval = poll_interval

        self._sock = bind_udp_socket(host, port)
        self._sock.settimeout(poll_interval)
        self._stop = threading.Event()
        self._stopped = threading.Event()
        self._stopped.set()
        # Caps queued plus running work so the receive loop applies backpressure.
        self._slots = threading.BoundedSemaphore(2 * workers)

    @property
    def server_address(self) -> Address:
        """The bound ``(host, port)`` address."""
        return self._sock.getsockname()[:2]

    def serve_forever(self) -> None:
        """Receive and dispatch datagrams until ``shutdown()`` is called."""
        self._stopped.clear()
        host, port = self.server_address
        logger.info(f"Waiting for requests on {host}:{port} with {self.workers} workers")

        executor = ThreadPoolExecutor(
            max_workers=self.workers, thread_name_prefix="netroute-worker"
        )
        try:
            while not self._stop.is_set():
                try:
                    datagram = self._receive()
                except TransportError as exc:
                    logger.warning(str(exc))
                    continue
                if datagram is None:
                    continue
                if not self._acquire_slot():
                    break
                payload, addr = datagram
                executor.submit(self._process, payload, addr)
        finally:
            executor.shutdown(wait=True)
            logger.info("Server stopped")
            self._stop.clear()
            self._stopped.set()

    def shutdown(self, timeout: Optional[float] = None) -> None:
        """Stop the receive loop and wait for in-flight queries to finish."""
        self._stop.set()
        self._stopped.wait(timeout)

    def close(self) -> None:
        """Release the listening socket."""
        self._sock.close()

    def __enter__(self) -> QueryServer:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.shutdown()
        self.close()

    def _receive(self) -> Optional[Tuple[bytes, Address]]:
        try:
            return self._sock.recvfrom(self.max_datagram_size)
        except socket.timeout:
            return None
        except OSError as exc:
            if self._stop.is_set():
                return None
            raise TransportError(f"Receive failed: {exc}") from exc

    def _acquire_slot(self) -> bool:
        while not self._slots.acquire(timeout=self.poll_interval):
            if self._stop.is_set():
                return False
        return True

    def _process(self, payload: bytes, addr: Address) -> None:
        try:
            reply = self.dispatcher.handle(payload, addr)
            if reply is not None:
                self._send(reply, addr)
        except TransportError as exc:
            logger.warning(str(exc))
        except Exception:
            logger.exception(f"Unhandled error while serving {addr}")
        finally:
            self._slots.release()

    def _send(self, reply: bytes, addr: Address) -> None:
        try:
            self._sock.sendto(reply, addr)
        except OSError as exc:
            raise TransportError(f"Send to {addr} failed: {exc}") from exc
