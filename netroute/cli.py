"""Command-line interface for netroute."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from netroute.client import request_path
from netroute.config import resolve_config
from netroute.dispatcher import QueryDispatcher
from netroute.exceptions import ConfigurationError, DecodeError, TransportError
from netroute.graph.io import graph_to_edgelist, load_graph
from netroute.logging import (
    disable_debug_logging,
    enable_debug_logging,
    get_logger,
    set_global_log_level,
)
from netroute.protocol import decode_response, encode_request
from netroute.server import QueryServer

logger = get_logger(__name__)


def _format_table(
    headers: List[str],
    rows: List[List[str]],
    min_width: int = 8,
    max_col_width: Optional[int] = None,
) -> str:
    """Format data as a simple ASCII table.

    Args:
        headers: Column headers
        rows: Data rows
        min_width: Minimum column width
        max_col_width: Clip cells longer than this

    Returns:
        Formatted table string
    """
    if not rows:
        return ""

    def clip(val: Any) -> str:
        s = str(val)
        if max_col_width is not None and len(s) > max_col_width:
            return s[: max_col_width - 3] + "..."
        return s

    clipped_headers = [clip(h) for h in headers]
    clipped_rows = [[clip(item) for item in row] for row in rows]

    all_data = [clipped_headers] + clipped_rows
    col_widths = []
    for col_idx in range(len(clipped_headers)):
        max_width = max(len(str(row[col_idx])) for row in all_data)
        col_widths.append(max(max_width, min_width))

    def format_row(row_data: List[str]) -> str:
        return "   " + " | ".join(
            f"{str(item):<{col_widths[i]}}" for i, item in enumerate(row_data)
        )

    lines = []
    lines.append(format_row(clipped_headers))
    lines.append("   " + "-+-".join("-" * width for width in col_widths))
    for row in clipped_rows:
        lines.append(format_row(row))

    return "\n".join(lines)


def _plural(n: int, singular: str, plural: Optional[str] = None) -> str:
    """Return grammatically correct unit for count n."""
    if n == 1:
        return singular
    return plural or (singular + "s")


def _fail(message: str) -> None:
    logger.error(message)
    print(f"❌ ERROR: {message}")
    sys.exit(1)


def _serve(args: argparse.Namespace) -> None:
    """Load the graph and serve queries until interrupted."""
    try:
        config = resolve_config(
            yaml_path=args.config,
            overrides={
                "host": args.host,
                "port": args.port,
                "graph_file": args.graph,
                "workers": args.workers,
            },
        )
        if not (args.verbose or args.quiet):
            set_global_log_level(config.log_level_value)
        graph = load_graph(config.graph_file)
        server = QueryServer(
            QueryDispatcher(graph),
            host=config.host,
            port=config.port,
            workers=config.workers,
            max_datagram_size=config.max_datagram_size,
        )
    except ConfigurationError as exc:
        _fail(str(exc))
        return

    with server:
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")


def _path(args: argparse.Namespace) -> None:
    """Answer one query locally, printing the reply the server would send."""
    try:
        graph = load_graph(args.graph)
    except ConfigurationError as exc:
        _fail(str(exc))
        return

    reply = QueryDispatcher(graph).handle(encode_request(args.ori, args.dest), "cli")
    if reply is None:
        _fail("response could not be encoded")
        return
    data = decode_response(reply)
    print(json.dumps(data, ensure_ascii=False))
    if "message" in data:
        sys.exit(1)


def _request(args: argparse.Namespace) -> None:
    """Send one query to a running server."""
    try:
        data = request_path(args.host, args.port, args.ori, args.dest, timeout=args.timeout)
    except (TransportError, DecodeError) as exc:
        _fail(str(exc))
        return
    print(json.dumps(data, ensure_ascii=False))
    if "message" in data:
        sys.exit(1)


def _inspect(args: argparse.Namespace) -> None:
    """Print a summary of a graph file."""
    try:
        graph = load_graph(args.graph)
    except ConfigurationError as exc:
        _fail(str(exc))
        return

    nodes = graph.number_of_nodes()
    edges = graph.number_of_edges()
    print(f"Graph: {args.graph}")
    print(f"   {nodes} {_plural(nodes, 'node')}, {edges} {_plural(edges, 'edge')}")

    sinks = sorted(str(n) for n in graph.nodes if graph.out_degree(n) == 0)
    if sinks:
        print(f"   {len(sinks)} {_plural(len(sinks), 'node')} without outgoing edges")

    rows = [
        [str(n), str(graph.out_degree(n)), str(graph.in_degree(n))]
        for n in sorted(graph.nodes, key=str)
    ]
    if rows:
        print()
        print(_format_table(["Node", "Out", "In"], rows, max_col_width=40))

    if args.edges:
        print()
        for line in graph_to_edgelist(graph):
            print(f"   {line}")


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``netroute`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="netroute",
        description="Serve and query shortest paths over a weighted directed graph.",
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Suppress informational logs"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{serve,path,request,inspect}",
        help="Available commands",
    )

    serve_parser = subparsers.add_parser("serve", help="Serve queries over UDP")
    serve_parser.add_argument(
        "--config", "-c", type=Path, default=None, help="YAML configuration file"
    )
    serve_parser.add_argument(
        "--graph", "-g", default=None, help="Edge-list file (default: graph.txt)"
    )
    serve_parser.add_argument(
        "--host", default=None, help="Listen address (default: localhost)"
    )
    serve_parser.add_argument(
        "--port", "-p", type=int, default=None, help="Listen port (default: $PORT)"
    )
    serve_parser.add_argument(
        "--workers",
        "-w",
        type=int,
        default=None,
        help="Number of concurrent query workers (default: 4)",
    )

    path_parser = subparsers.add_parser(
        "path", help="Compute one shortest path locally"
    )
    path_parser.add_argument("graph", type=Path, help="Edge-list file")
    path_parser.add_argument("ori", help="Origin node")
    path_parser.add_argument("dest", help="Destination node")

    request_parser = subparsers.add_parser(
        "request", help="Query a running server"
    )
    request_parser.add_argument("ori", help="Origin node")
    request_parser.add_argument("dest", help="Destination node")
    request_parser.add_argument("--host", default="localhost", help="Server address")
    request_parser.add_argument(
        "--port", "-p", type=int, required=True, help="Server UDP port"
    )
    request_parser.add_argument(
        "--timeout", "-t", type=float, default=5.0, help="Seconds to wait for a reply"
    )

    inspect_parser = subparsers.add_parser("inspect", help="Summarize a graph file")
    inspect_parser.add_argument("graph", type=Path, help="Edge-list file")
    inspect_parser.add_argument(
        "--edges", "-e", action="store_true", help="Also list every edge"
    )

    effective_args = sys.argv[1:] if argv is None else argv

    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    if args.verbose:
        enable_debug_logging()
        logger.debug("Debug logging enabled")
    elif args.quiet:
        set_global_log_level(logging.WARNING)
    else:
        disable_debug_logging()

    if args.command == "serve":
        _serve(args)
    elif args.command == "path":
        _path(args)
    elif args.command == "request":
        _request(args)
    elif args.command == "inspect":
        _inspect(args)


if __name__ == "__main__":
    main()
