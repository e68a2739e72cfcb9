"""Path-finding algorithms over `StrictMultiDiGraph`."""

from netroute.algorithms.spf import resolve_path, shortest_path
from netroute.algorithms.types import Cost, PathResult

__all__ = ["Cost", "PathResult", "resolve_path", "shortest_path"]
