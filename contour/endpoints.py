"""Translation of Kubernetes Endpoints into Envoy ClusterLoadAssignments."""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from contour.apis import ObjectMeta
from contour.cond import Cond

ENDPOINT_TYPE = "type.googleapis.com/envoy.api.v2.ClusterLoadAssignment"

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class EndpointAddress:
    """A ready address of an Endpoints subset."""

    ip: str


@dataclass(frozen=True)
class EndpointPort:
    """One numbered endpoint of a subset; the name mirrors the service's, if set."""

    port: int
    name: str = ""
    protocol: str = "TCP"


@dataclass
class EndpointSubset:
    """A group of addresses sharing a set of ports."""

    addresses: list[EndpointAddress] = field(default_factory=list)
    ports: list[EndpointPort] = field(default_factory=list)


@dataclass
class Endpoints:
    """A Kubernetes Endpoints resource."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    subsets: list[EndpointSubset] = field(default_factory=list)


@dataclass(frozen=True)
class DeletedFinalStateUnknown:
    """A tombstone for an object whose deletion was missed by a watch."""

    key: str
    obj: Any


@dataclass(frozen=True)
class LbEndpoint:
    """A single upstream host and port."""

    address: str
    port: int


@dataclass
class ClusterLoadAssignment:
    """The hosts that make up the named EDS cluster."""

    cluster_name: str
    endpoints: list[LbEndpoint] = field(default_factory=list)


def servicename(meta: ObjectMeta, portname: str) -> str:
    """Return the EDS name of the service port described by ``meta`` and ``portname``."""
    parts = [meta.namespace, meta.name]
    if portname:
        parts.append(portname)
    return "/".join(parts)


def _by_cluster_name(values: Iterable[ClusterLoadAssignment]) -> list[ClusterLoadAssignment]:
    return sorted(values, key=lambda v: v.cluster_name)


class EndpointsTranslator:
    """Keeps the EDS cache in step with Kubernetes Endpoints events."""

    def __init__(
        self,
        entries: Mapping[str, ClusterLoadAssignment] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, ClusterLoadAssignment] = dict(entries or {})
        self._cond = Cond()
        self._log = logger or _log

    def register(self, ch: queue.Queue[int], last: int) -> None:
        """Register ``ch`` to be notified of the next change to the cache."""
        self._cond.register(ch, last)

    def on_add(self, obj: Any) -> None:
        if isinstance(obj, Endpoints):
            self.recompute_cluster_load_assignment(None, obj)
        else:
            self._log.error("on_add unexpected type %s: %r", type(obj).__name__, obj)

    def on_update(self, old_obj: Any, new_obj: Any) -> None:
        if not isinstance(new_obj, Endpoints):
            self._log.error("on_update unexpected type %s: %r", type(new_obj).__name__, new_obj)
            return
        if not isinstance(old_obj, Endpoints):
            self._log.error(
                "on_update endpoints %r received invalid old object %s: %r",
                new_obj,
                type(old_obj).__name__,
                old_obj,
            )
            return
        if not new_obj.subsets and not old_obj.subsets:
            # Nothing before and nothing now: avoid a no-op notification.
            return
        self.recompute_cluster_load_assignment(old_obj, new_obj)

    def on_delete(self, obj: Any) -> None:
        if isinstance(obj, Endpoints):
            self.recompute_cluster_load_assignment(obj, None)
        elif isinstance(obj, DeletedFinalStateUnknown):
            self.on_delete(obj.obj)
        else:
            self._log.error("on_delete unexpected type %s: %r", type(obj).__name__, obj)

    def contents(self) -> list[ClusterLoadAssignment]:
        """Return every assignment in the cache, sorted by cluster name."""
        with self._lock:
            return _by_cluster_name(self._entries.values())

    def query(self, names: Iterable[str]) -> list[ClusterLoadAssignment]:
        """Return the named assignments, empty ones for unknown names, sorted by cluster name."""
        with self._lock:
            return _by_cluster_name(
                self._entries.get(n) or ClusterLoadAssignment(cluster_name=n) for n in names
            )

    def type_url(self) -> str:
        return ENDPOINT_TYPE

    def recompute_cluster_load_assignment(
        self, old_ep: Endpoints | None, new_ep: Endpoints | None
    ) -> None:
        """Update the cache from the change between ``old_ep`` and ``new_ep``."""
        if old_ep is new_ep:
            return
        try:
            if old_ep is None:
                old_ep = Endpoints(metadata=new_ep.metadata)
            if new_ep is None:
                new_ep = Endpoints(metadata=old_ep.metadata)

            assignments: dict[str, ClusterLoadAssignment] = {}
            for subset in new_ep.subsets:
                if not subset.addresses:
                    continue
                for port in subset.ports:
                    cla = assignments.get(port.name)
                    if cla is None:
                        cla = ClusterLoadAssignment(cluster_name=servicename(new_ep.metadata, port.name))
                        assignments[port.name] = cla
                    cla.endpoints.extend(LbEndpoint(a.ip, port.port) for a in subset.addresses)

            stale = {
                servicename(old_ep.metadata, port.name)
                for subset in old_ep.subsets
                if subset.addresses
                for port in subset.ports
                if port.name not in assignments
            }

            with self._lock:
                for cla in assignments.values():
                    self._entries[cla.cluster_name] = cla
                for name in stale:
                    self._entries.pop(name, None)
        finally:
            self._cond.notify()