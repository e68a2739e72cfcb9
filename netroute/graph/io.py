"""Edge-list loading and export for `StrictMultiDiGraph`.

The graph source is a plain text file with one directed edge per line::

    <source> <target> <weight>

Tokens are separated by whitespace and the weight is a non-negative ASCII
base-10 integer that fits in 64 bits.
Blank lines are skipped and tokens after the weight are ignored. Any other
deviation aborts loading with `ConfigurationError`.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from netroute.exceptions import ConfigurationError
from netroute.graph.strict_multidigraph import StrictMultiDiGraph
from netroute.logging import get_logger

logger = get_logger(__name__)

_WEIGHT_RE = re.compile(r"[+-]?[0-9]+")

# Weights must fit a signed 64-bit integer
MAX_WEIGHT = 2**63 - 1


def parse_edge_line(line: str, line_no: int = 0) -> Tuple[str, str, int]:
    """Parse one edge-list line into ``(source, target, weight)``.

    Args:
        line: Raw line, with or without trailing newline.
        line_no: 1-based line number used in error messages.

    Returns:
        Tuple[str, str, int]: Source label, target label and weight.

    Raises:
        ConfigurationError: If the line has fewer than three tokens, the
            weight is not a plain ASCII integer, or the weight is negative
            or out of range.
    """
    tokens = line.split()
    if len(tokens) < 3:
        raise ConfigurationError(
            f"Line {line_no}: expected '<source> <target> <weight>', got {line.rstrip()!r}."
        )
    src, dst, raw_weight = tokens[0], tokens[1], tokens[2]
    if not _WEIGHT_RE.fullmatch(raw_weight):
        raise ConfigurationError(
            f"Line {line_no}: weight {raw_weight!r} is not an integer."
        )
    if len(raw_weight.lstrip("+-").lstrip("0")) > len(str(MAX_WEIGHT)):
        raise ConfigurationError(
            f"Line {line_no}: weight is out of range (max {MAX_WEIGHT})."
        )
    weight = int(raw_weight)
    if weight < 0:
        raise ConfigurationError(
            f"Line {line_no}: negative weight {weight} is not supported."
        )
    if weight > MAX_WEIGHT:
        raise ConfigurationError(
            f"Line {line_no}: weight is out of range (max {MAX_WEIGHT})."
        )
    return src, dst, weight


def edgelist_to_graph(
    lines: Iterable[str],
    graph: Optional[StrictMultiDiGraph] = None,
    freeze: bool = True,
) -> StrictMultiDiGraph:
    """Build or extend a StrictMultiDiGraph from edge-list lines.

    Args:
        lines: An iterable of strings, each representing one edge.
        graph: An existing, unfrozen graph to extend; if None, a new graph is created.
        freeze: Whether to freeze the graph once all lines are consumed.

    Returns:
        The updated (or newly created) StrictMultiDiGraph.

    Raises:
        ConfigurationError: On the first malformed line.
    """
    if graph is None:
        graph = StrictMultiDiGraph()

    for line_no, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        src, dst, weight = parse_edge_line(line, line_no)
        graph.add_weighted_edge(src, dst, weight)

    if freeze:
        graph.freeze()
    return graph


def load_graph(path: Union[str, Path]) -> StrictMultiDiGraph:
    """Load and freeze a graph from an edge-list file.

    Args:
        path: Location of the edge-list file.

    Returns:
        StrictMultiDiGraph: The frozen graph.

    Raises:
        ConfigurationError: If the file cannot be read or contains a
            malformed line.
    """
    path = Path(path)
    logger.info(f"Loading graph from: {path}")
    try:
        with path.open("r", encoding="utf-8") as fh:
            graph = edgelist_to_graph(fh)
    except OSError as exc:
        raise ConfigurationError(f"Cannot read graph file '{path}': {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigurationError(f"Graph file '{path}' is not valid UTF-8.") from exc
    except ConfigurationError as exc:
        raise ConfigurationError(f"{path}: {exc}") from exc
    logger.info(
        f"Graph loaded: {graph.number_of_nodes()} nodes, {graph.number_of_edges()} edges"
    )
    return graph


def graph_to_edgelist(graph: StrictMultiDiGraph, separator: str = " ") -> List[str]:
    """Convert a graph back into edge-list lines, in edge insertion order.

    Args:
        graph: The graph to export.
        separator: The string used to join tokens (default is a space).

    Returns:
        A list of ``<source> <target> <weight>`` strings.
    """
    lines: List[str] = []
    for _edge_id, (src, dst, _, attrs) in sorted(graph.get_edges().items()):
        lines.append(separator.join((str(src), str(dst), str(attrs["weight"]))))
    return lines
