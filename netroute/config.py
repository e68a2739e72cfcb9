"""Server configuration.

Settings are merged from, in increasing precedence: built-in defaults, an
optional YAML file, environment variables, and explicit overrides (CLI
flags). The listening port has no default; if no layer supplies it the
server refuses to start.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from jsonschema.exceptions import best_match

from netroute.exceptions import ConfigurationError
from netroute.logging import parse_log_level
from netroute.protocol import MAX_DATAGRAM_SIZE, MAX_RESPONSE_SIZE
from netroute.schemas import get_validator

#: Environment variable for each configuration field.
ENV_VARS: Dict[str, str] = {
    "host": "NETROUTE_HOST",
    "port": "PORT",
    "graph_file": "NETROUTE_GRAPH_FILE",
    "workers": "NETROUTE_WORKERS",
    "max_datagram_size": "NETROUTE_MAX_DATAGRAM_SIZE",
    "log_level": "NETROUTE_LOG_LEVEL",
}

_INT_FIELDS = {"port", "workers", "max_datagram_size"}


@dataclass
class ServerConfig:
    """Configuration for the UDP query server."""

    port: int
    host: str = "localhost"
    graph_file: str = "graph.txt"

    # Size of the worker pool answering queries concurrently
    workers: int = 4

    # Receive buffer per datagram; longer requests are truncated
    max_datagram_size: int = MAX_DATAGRAM_SIZE

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not 0 <= self.port <= 65535:
            raise ConfigurationError(f"port must be within 0..65535, got {self.port}")
        if self.workers < 1:
            raise ConfigurationError(f"workers must be >= 1, got {self.workers}")
        if not 1 <= self.max_datagram_size <= MAX_RESPONSE_SIZE:
            raise ConfigurationError(
                f"max_datagram_size must be within 1..{MAX_RESPONSE_SIZE}, "
                f"got {self.max_datagram_size}"
            )
        try:
            parse_log_level(self.log_level)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

    @property
    def log_level_value(self) -> int:
        return parse_log_level(self.log_level)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> ServerConfig:
        """Build a configuration from environment variables only."""
        return resolve_config(environ=environ)


def load_config_yaml(yaml_str: str) -> Dict[str, Any]:
    """Parse and validate a YAML configuration document.

    Raises:
        ConfigurationError: If the YAML is malformed, not a mapping, or does
            not match the configuration schema.
    """
    try:
        data = yaml.safe_load(yaml_str)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid configuration YAML: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError("The configuration YAML must map to a dictionary at top-level.")

    error = best_match(get_validator("config.json").iter_errors(data))
    if error is not None:
        location = ".".join(str(p) for p in error.absolute_path) or "<root>"
        raise ConfigurationError(f"Invalid configuration at {location}: {error.message}")
    return dict(data)


def load_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Read and validate a YAML configuration file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read configuration file '{path}': {exc}") from exc
    return load_config_yaml(text)


def _env_values(environ: Mapping[str, str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for name, var in ENV_VARS.items():
        raw = environ.get(var)
        if raw is None:
            continue
        if name in _INT_FIELDS:
            try:
                values[name] = int(raw)
            except ValueError:
                raise ConfigurationError(
                    f"{var} must be an integer, got {raw!r}"
                ) from None
        else:
            values[name] = raw
    return values


def resolve_config(
    environ: Optional[Mapping[str, str]] = None,
    yaml_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> ServerConfig:
    """Merge all configuration layers into a `ServerConfig`.

    Args:
        environ: Environment mapping; defaults to ``os.environ``.
        yaml_path: Optional YAML configuration file.
        overrides: Explicit values; ``None`` entries are ignored.

    Raises:
        ConfigurationError: If the port is undefined or any value is invalid.
    """
    if environ is None:
        environ = os.environ

    values: Dict[str, Any] = {}
    if yaml_path is not None:
        values.update(load_config_file(yaml_path))
    values.update(_env_values(environ))
    if overrides:
        known = {f.name for f in fields(ServerConfig)}
        values.update({k: v for k, v in overrides.items() if v is not None and k in known})

    if "port" not in values:
        raise ConfigurationError(f"undefined {ENV_VARS['port']}")
    return ServerConfig(**values)
