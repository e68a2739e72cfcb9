"""End-to-end tests over loopback UDP on ephemeral ports."""

import json
import socket
import threading
import time
from unittest.mock import patch

import pytest

from netroute.client import request_path
from netroute.dispatcher import QueryDispatcher
from netroute.exceptions import ConfigurationError, TransportError
from netroute.server import QueryServer, bind_udp_socket


@pytest.fixture
def running_server(triangle):
    server = QueryServer(
        QueryDispatcher(triangle), host="127.0.0.1", port=0, workers=2, poll_interval=0.05
    )
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown(timeout=5)
    server.close()
    thread.join(timeout=5)
    assert not thread.is_alive()


def send_raw(address, payload: bytes, timeout: float = 5.0) -> dict:
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.settimeout(timeout)
        sock.sendto(payload, address)
        data, _ = sock.recvfrom(65535)
    return json.loads(data)


def test_server_address_is_bound(running_server):
    host, port = running_server.server_address
    assert host == "127.0.0.1"
    assert port > 0


def test_success_round_trip(running_server):
    host, port = running_server.server_address
    data = request_path(host, port, "A", "C")
    assert data["path"] == ["A", "B", "C"]
    assert "calc-duration" in data


def test_error_replies(running_server):
    host, port = running_server.server_address
    assert request_path(host, port, "X", "A") == {"message": "node 'X' not found in graph"}
    assert request_path(host, port, "C", "A") == {"message": "no path from 'C' to 'A'"}


def test_malformed_datagram_gets_reply_and_server_continues(running_server):
    address = running_server.server_address
    data = send_raw(address, b"this is not json")
    assert "message" in data
    assert send_raw(address, b'{"ori":"A","dest":"B"}')["path"] == ["A", "B"]


def test_oversized_datagram_is_truncated_and_rejected(running_server):
    address = running_server.server_address
    payload = json.dumps({"ori": "A" * 4000, "dest": "B"}).encode()
    data = send_raw(address, payload)
    assert "message" in data


def test_many_concurrent_clients(running_server):
    host, port = running_server.server_address
    results = []
    lock = threading.Lock()

    def client():
        data = request_path(host, port, "A", "C")
        with lock:
            results.append(data["path"])

    threads = [threading.Thread(target=client) for _ in range(25)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert results == [["A", "B", "C"]] * 25


def test_slow_query_does_not_block_others(triangle):
    dispatcher = QueryDispatcher(triangle)
    original = dispatcher.handle
    release = threading.Event()

    def handle(payload, sender=None):
        if b'"slow"' in payload:
            release.wait(5)
        return original(payload, sender)

    dispatcher.handle = handle
    with QueryServer(dispatcher, host="127.0.0.1", port=0, workers=2, poll_interval=0.05) as server:
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        address = server.server_address

        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as slow_sock:
            slow_sock.sendto(b'{"ori":"slow","dest":"A"}', address)
            start = time.monotonic()
            data = send_raw(address, b'{"ori":"A","dest":"C"}')
            assert data["path"] == ["A", "B", "C"]
            assert time.monotonic() - start < 4
            release.set()
            slow_sock.settimeout(5)
            slow_reply, _ = slow_sock.recvfrom(65535)
            assert json.loads(slow_reply) == {"message": "node 'slow' not found in graph"}

    thread.join(timeout=5)


def test_send_failure_is_logged_and_loop_continues(running_server, caplog):
    original_send = running_server._send
    calls = []

    def flaky_send(reply, addr):
        calls.append(addr)
        if len(calls) == 1:
            raise TransportError("Send failed: simulated")
        original_send(reply, addr)

    running_server._send = flaky_send
    address = running_server.server_address
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.settimeout(0.5)
        sock.sendto(b'{"ori":"A","dest":"B"}', address)
        with pytest.raises(socket.timeout):
            sock.recvfrom(65535)
    assert send_raw(address, b'{"ori":"A","dest":"B"}')["path"] == ["A", "B"]
    assert any("simulated" in r.message for r in caplog.records)


def test_dispatcher_returning_none_sends_nothing(triangle):
    dispatcher = QueryDispatcher(triangle)
    with patch.object(dispatcher, "handle", return_value=None):
        with QueryServer(
            dispatcher, host="127.0.0.1", port=0, workers=1, poll_interval=0.05
        ) as server:
            thread = threading.Thread(target=server.serve_forever, daemon=True)
            thread.start()
            host, port = server.server_address
            with pytest.raises(TransportError, match="No reply"):
                request_path(host, port, "A", "B", timeout=0.3)
        thread.join(timeout=5)


def test_invalid_worker_count(triangle):
    with pytest.raises(ConfigurationError):
        QueryServer(QueryDispatcher(triangle), host="127.0.0.1", workers=0)


def test_bind_conflict_is_configuration_error():
    first = bind_udp_socket("127.0.0.1", 0)
    try:
        port = first.getsockname()[1]
        with pytest.raises(ConfigurationError, match="Cannot bind"):
            bind_udp_socket("127.0.0.1", port)
    finally:
        first.close()


def test_shutdown_without_serving(triangle):
    server = QueryServer(QueryDispatcher(triangle), host="127.0.0.1")
    server.shutdown(timeout=1)
    server.close()
