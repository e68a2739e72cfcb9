"""Packaged JSON schemas for request and configuration validation."""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from typing import Any, Dict

import jsonschema


@lru_cache(maxsize=None)
def load_schema(name: str) -> Dict[str, Any]:
    """Load a schema file shipped in this package, e.g. ``"request.json"``."""
    try:
        with (
            resources.files("netroute.schemas").joinpath(name).open("r", encoding="utf-8")
        ) as f:
            return json.load(f)
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            f"Failed to locate packaged netroute schema 'netroute/schemas/{name}'."
        ) from exc


@lru_cache(maxsize=None)
def get_validator(name: str) -> Any:
    """Return a compiled validator for the named schema."""
    schema = load_schema(name)
    validator_cls = jsonschema.validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)
