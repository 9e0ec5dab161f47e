"""Parsing of command line and environment settings."""

from __future__ import annotations

import os

NAMESPACE_ENV = "CONTOUR_NAMESPACE"
DEFAULT_NAMESPACE = "heptio-contour"


def parse_root_namespaces(value: str) -> list[str]:
    """Split a comma separated list of namespaces, trimming each entry.

    An empty value yields an empty list.
    """
    if not value:
        return []
    return [part.strip() for part in value.split(",")]


def get_env(key: str, fallback: str) -> str:
    """Return the environment variable ``key``, or ``fallback`` when it is unset."""
    return os.environ.get(key, fallback)