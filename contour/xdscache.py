"""The CDS and LDS caches served to Envoy, and the listener settings."""

from __future__ import annotations

import queue
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from contour.cond import Cond

CLUSTER_TYPE = "type.googleapis.com/envoy.api.v2.Cluster"
LISTENER_TYPE = "type.googleapis.com/envoy.api.v2.Listener"

ENVOY_HTTP_LISTENER = "ingress_http"
ENVOY_HTTPS_LISTENER = "ingress_https"
DEFAULT_HTTP_ACCESS_LOG = "/dev/stdout"
DEFAULT_HTTP_LISTENER_ADDRESS = "0.0.0.0"
DEFAULT_HTTP_LISTENER_PORT = 8080
DEFAULT_HTTPS_ACCESS_LOG = "/dev/stdout"
DEFAULT_HTTPS_LISTENER_ADDRESS = DEFAULT_HTTP_LISTENER_ADDRESS
DEFAULT_HTTPS_LISTENER_PORT = 8443


@dataclass
class ListenerVisitorConfig:
    """Listener settings; empty or zero values fall back to the defaults."""

    http_addr: str = ""
    http_listen_port: int = 0
    http_log_path: str = ""
    https_addr: str = ""
    https_listen_port: int = 0
    https_log_path: str = ""
    use_proxy_proto: bool = False

    def http_address(self) -> str:
        """The HTTP listener address."""
        return self.http_addr or DEFAULT_HTTP_LISTENER_ADDRESS

    def http_port(self) -> int:
        """The HTTP listener port."""
        return self.http_listen_port or DEFAULT_HTTP_LISTENER_PORT

    def http_access_log(self) -> str:
        """The HTTP listener access log path."""
        return self.http_log_path or DEFAULT_HTTP_ACCESS_LOG

    def https_address(self) -> str:
        """The HTTPS listener address."""
        return self.https_addr or DEFAULT_HTTPS_LISTENER_ADDRESS

    def https_port(self) -> int:
        """The HTTPS listener port."""
        return self.https_listen_port or DEFAULT_HTTPS_LISTENER_PORT

    def https_access_log(self) -> str:
        """The HTTPS listener access log path."""
        return self.https_log_path or DEFAULT_HTTPS_ACCESS_LOG


def _by_name(values: Iterable[Any]) -> list[Any]:
    return sorted(values, key=lambda v: v.name)


class _NamedCache:
    """Shared state for a thread-safe map of named resources."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._values: dict[str, Any] = {}
        self._cond = Cond()

    def _replace(self, values: Mapping[str, Any] | None) -> None:
        with self._lock:
            self._values = dict(values or {})
            self._cond.notify()


class ClusterCache(_NamedCache):
    """The contents of the CDS cache."""

    def register(self, ch: queue.Queue[int], last: int) -> None:
        """Register ``ch`` to receive a sequence number on the next update.

        If ``last`` is behind the cache's update count, ``ch`` is notified
        immediately.
        """
        self._cond.register(ch, last)

    def update(self, values: Mapping[str, Any] | None) -> None:
        """Replace the cache's contents and notify waiters."""
        self._replace(values)

    def contents(self) -> list[Any]:
        """Return the clusters, sorted by name."""
        with self._lock:
            return _by_name(self._values.values())

    def query(self, names: Iterable[str]) -> list[Any]:
        """Return the named clusters that exist, sorted by name.

        Unknown names are skipped: a cluster needs a discovery type that
        cannot be derived from its name alone.
        """
        with self._lock:
            return _by_name(self._values[n] for n in names if n in self._values)

    def type_url(self) -> str:
        return CLUSTER_TYPE


class ListenerCache(_NamedCache):
    """The contents of the LDS cache, plus listeners that never change."""

    def __init__(self, static_values: Mapping[str, Any] | None = None) -> None:
        super().__init__()
        self._static_values: dict[str, Any] = dict(static_values or {})

    def register(self, ch: queue.Queue[int], last: int) -> None:
        """Register ``ch`` to receive a sequence number on the next update.

        If ``last`` is behind the cache's update count, ``ch`` is notified
        immediately.
        """
        self._cond.register(ch, last)

    def update(self, values: Mapping[str, Any] | None) -> None:
        """Replace the dynamic listeners and notify waiters."""
        self._replace(values)

    def contents(self) -> list[Any]:
        """Return dynamic and static listeners, sorted by name."""
        with self._lock:
            return _by_name([*self._values.values(), *self._static_values.values()])

    def query(self, names: Iterable[str]) -> list[Any]:
        """Return the named listeners, dynamic before static, sorted by name.

        Unknown names are skipped since a listener requires an address.
        """
        with self._lock:
            found = []
            for n in names:
                v = self._values.get(n, self._static_values.get(n))
                if v is not None:
                    found.append(v)
            return _by_name(found)

    def type_url(self) -> str:
        return LISTENER_TYPE