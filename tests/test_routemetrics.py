from contour.apis import IngressRoute, IngressRouteSpec, ObjectMeta, VirtualHost
from contour.routemetrics import (
    IngressRouteMetric,
    Meta,
    RouteStatus,
    StatusKind,
    calculate_ingress_route_metric,
)


def route(ns, name, fqdn=None):
    vhost = None if fqdn is None else VirtualHost(fqdn=fqdn)
    return IngressRoute(
        metadata=ObjectMeta(name=name, namespace=ns),
        spec=IngressRouteSpec(virtual_host=vhost),
    )


def test_valid_ingressroute():
    statuses = [RouteStatus(route("roots", "example", "example.com"), StatusKind.VALID, vhost="example.com")]
    got = calculate_ingress_route_metric(statuses)
    assert got == IngressRouteMetric(
        invalid={},
        valid={Meta(namespace="roots", vhost="example.com"): 1},
        orphaned={},
        root={Meta(namespace="roots"): 1},
        total={Meta(namespace="roots"): 1},
    )


def test_root_without_fqdn_is_invalid_without_vhost():
    statuses = [RouteStatus(route("roots", "parent", ""), StatusKind.INVALID)]
    got = calculate_ingress_route_metric(statuses)
    assert got.invalid == {Meta(namespace="roots"): 1}
    assert got.valid == {}
    assert got.root == {Meta(namespace="roots"): 1}
    assert got.total == {Meta(namespace="roots"): 1}


def test_orphaned_route():
    statuses = [RouteStatus(route("roots", "child"), StatusKind.ORPHANED)]
    got = calculate_ingress_route_metric(statuses)
    assert got.orphaned == {Meta(namespace="roots"): 1}
    assert got.root == {}
    assert got.valid == {}
    assert got.invalid == {}
    assert got.total == {Meta(namespace="roots"): 1}


def test_delegation_with_one_invalid_child():
    statuses = [
        RouteStatus(route("roots", "parent", "example.com"), StatusKind.VALID, vhost="example.com"),
        RouteStatus(route("roots", "validChild"), StatusKind.VALID, vhost="example.com"),
        RouteStatus(route("roots", "invalidChild"), StatusKind.INVALID, vhost="example.com"),
    ]
    got = calculate_ingress_route_metric(statuses)
    assert got.valid == {Meta(namespace="roots", vhost="example.com"): 2}
    assert got.invalid == {Meta(namespace="roots", vhost="example.com"): 1}
    assert got.root == {Meta(namespace="roots"): 1}
    assert got.total == {Meta(namespace="roots"): 3}


def test_empty_input_gives_empty_metrics():
    assert calculate_ingress_route_metric([]) == IngressRouteMetric()


def test_total_counts_every_status_by_namespace():
    statuses = [
        RouteStatus(route("roots", "a", "example.com"), StatusKind.VALID, vhost="example.com"),
        RouteStatus(route("finance", "b", "example.com"), StatusKind.INVALID),
        RouteStatus(route("roots", "c"), StatusKind.ORPHANED),
    ]
    got = calculate_ingress_route_metric(statuses)
    assert sum(got.total.values()) == len(statuses)
    assert {m.namespace for m in got.total} == {"roots", "finance"}
    assert all(m.vhost == "" for m in got.total)
    assert sum(got.root.values()) == sum(1 for s in statuses if s.object.spec.virtual_host is not None)