"""Filtering of Kubernetes watch events on their way to the DAG builder."""

from __future__ import annotations

import dataclasses
import logging
import time
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, Protocol

from contour.annotations import Ingress
from contour.apis import IngressRoute, ObjectMeta, Status

DEFAULT_INGRESS_CLASS = "contour"
ANNOTATION_CONTOUR_INGRESS_CLASS = "contour.heptio.com/ingress.class"
ANNOTATION_KUBERNETES_INGRESS_CLASS = "kubernetes.io/ingress.class"

_log = logging.getLogger(__name__)


class Builder(Protocol):
    """Holds the Kubernetes objects a DAG is built from."""

    def insert(self, obj: Any) -> Any: ...

    def remove(self, obj: Any) -> Any: ...


class Notifier(Protocol):
    """Told whenever the contents of a builder change."""

    def on_change(self, builder: Any) -> None: ...


class ResourceEventMetrics(Protocol):
    """Records how long handling each kind of event took."""

    def observe_resource_event(self, op: str, seconds: float) -> None: ...


def get_ingress_class_annotation(annotations: Mapping[str, str]) -> str | None:
    """Return the ingress class annotation, contour's own taking precedence, or None."""
    for key in (ANNOTATION_CONTOUR_INGRESS_CLASS, ANNOTATION_KUBERNETES_INGRESS_CLASS):
        if key in annotations:
            return annotations[key]
    return None


def _without_volatile_fields(obj: Any) -> Any:
    """Return a copy of ``obj`` with its status and resource version cleared."""
    if not dataclasses.is_dataclass(obj) or isinstance(obj, type):
        return obj
    changes: dict[str, Any] = {}
    metadata = getattr(obj, "metadata", None)
    if isinstance(metadata, ObjectMeta):
        changes["metadata"] = dataclasses.replace(metadata, resource_version="")
    if isinstance(obj, IngressRoute):
        changes["status"] = Status()
    return dataclasses.replace(obj, **changes) if changes else obj


def _equal_ignoring_status(old: Any, new: Any) -> bool:
    if type(old) is not type(new):
        return False
    return _without_volatile_fields(old) == _without_volatile_fields(new)


class ResourceEventHandler:
    """Passes watch events whose ingress class matches to a builder, then notifies.

    Objects annotated with a different ingress class are ignored; objects
    without such an annotation, and kinds that carry none, are accepted.
    """

    def __init__(
        self,
        builder: Builder,
        notifier: Notifier,
        *,
        ingress_class: str = "",
        metrics: ResourceEventMetrics | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.builder = builder
        self.notifier = notifier
        self.ingress_class = ingress_class
        self.metrics = metrics
        self._log = logger or _log

    @contextmanager
    def _timed(self, op: str) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            if self.metrics is not None:
                self.metrics.observe_resource_event(op, time.perf_counter() - start)

    def on_add(self, obj: Any) -> None:
        with self._timed("OnAdd"):
            if not self.valid_ingress_class(obj):
                return
            self._log.debug("op=add %s", type(obj).__name__)
            self.builder.insert(obj)
            self._update()

    def on_update(self, old_obj: Any, new_obj: Any) -> None:
        old_valid = self.valid_ingress_class(old_obj)
        new_valid = self.valid_ingress_class(new_obj)
        if not old_valid and not new_valid:
            return
        if old_valid and not new_valid:
            # The replacement no longer belongs to us: drop the old object only.
            self.on_delete(old_obj)
            return
        if _equal_ignoring_status(old_obj, new_obj):
            self._log.debug(
                "op=update %s skipping update, only status has changed", type(new_obj).__name__
            )
            return
        with self._timed("OnUpdate"):
            self._log.debug("op=update %s", type(new_obj).__name__)
            self.builder.remove(old_obj)
            self.builder.insert(new_obj)
            self._update()

    def on_delete(self, obj: Any) -> None:
        with self._timed("OnDelete"):
            # The ingress class need not be checked on delete.
            self._log.debug("op=delete %s", type(obj).__name__)
            self.builder.remove(obj)
            self._update()

    def _update(self) -> None:
        self.notifier.on_change(self.builder)

    def valid_ingress_class(self, obj: Any) -> bool:
        """Return True unless ``obj`` is an Ingress or IngressRoute of another class."""
        if isinstance(obj, (IngressRoute, Ingress)):
            cls = get_ingress_class_annotation(obj.annotations)
            return cls is None or cls == self.ingress_class_name()
        return True

    def ingress_class_name(self) -> str:
        """The configured ingress class, or the default one."""
        return self.ingress_class or DEFAULT_INGRESS_CLASS