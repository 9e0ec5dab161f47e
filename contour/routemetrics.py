"""IngressRoute status counts for the metrics endpoint."""

from __future__ import annotations

import enum
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field

from contour.apis import IngressRoute


class StatusKind(enum.Enum):
    """The outcome of validating an IngressRoute."""

    VALID = "valid"
    INVALID = "invalid"
    ORPHANED = "orphaned"


@dataclass
class RouteStatus:
    """The status computed for one IngressRoute."""

    object: IngressRoute
    status: StatusKind
    description: str = ""
    vhost: str = ""


@dataclass(frozen=True)
class Meta:
    """The labels a metric is counted under."""

    vhost: str = ""
    namespace: str = ""


@dataclass
class IngressRouteMetric:
    """Counts of IngressRoutes by status, grouped by Meta."""

    invalid: dict[Meta, int] = field(default_factory=dict)
    valid: dict[Meta, int] = field(default_factory=dict)
    orphaned: dict[Meta, int] = field(default_factory=dict)
    total: dict[Meta, int] = field(default_factory=dict)
    root: dict[Meta, int] = field(default_factory=dict)


def calculate_ingress_route_metric(statuses: Iterable[RouteStatus]) -> IngressRouteMetric:
    """Count IngressRoutes by status, namespace and, for valid and invalid ones, vhost."""
    valid: Counter[Meta] = Counter()
    invalid: Counter[Meta] = Counter()
    orphaned: Counter[Meta] = Counter()
    total: Counter[Meta] = Counter()
    roots: Counter[Meta] = Counter()

    for st in statuses:
        namespace = st.object.namespace
        if st.status is StatusKind.VALID:
            valid[Meta(vhost=st.vhost, namespace=namespace)] += 1
        elif st.status is StatusKind.INVALID:
            invalid[Meta(vhost=st.vhost, namespace=namespace)] += 1
        elif st.status is StatusKind.ORPHANED:
            orphaned[Meta(namespace=namespace)] += 1
        total[Meta(namespace=namespace)] += 1
        if st.object.spec.virtual_host is not None:
            roots[Meta(namespace=namespace)] += 1

    return IngressRouteMetric(
        invalid=dict(invalid),
        valid=dict(valid),
        orphaned=dict(orphaned),
        total=dict(total),
        root=dict(roots),
    )