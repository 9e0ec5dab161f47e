import queue

import pytest

from contour.apis import ObjectMeta
from contour.endpoints import (
    ENDPOINT_TYPE,
    ClusterLoadAssignment,
    DeletedFinalStateUnknown,
    EndpointAddress,
    EndpointPort,
    Endpoints,
    EndpointSubset,
    EndpointsTranslator,
    LbEndpoint,
    servicename,
)


def endpoints(ns, name, *subsets):
    return Endpoints(metadata=ObjectMeta(name=name, namespace=ns), subsets=list(subsets))


def addresses(*ips):
    return [EndpointAddress(ip) for ip in ips]


def ports(*numbers):
    return [EndpointPort(port=p) for p in numbers]


def cla(name, *lbendpoints):
    return ClusterLoadAssignment(cluster_name=name, endpoints=list(lbendpoints))


@pytest.mark.parametrize(
    "contents, want",
    [
        (None, []),
        (
            {"default/httpbin-org": cla("default/httpbin-org", LbEndpoint("10.10.10.10", 80))},
            [cla("default/httpbin-org", LbEndpoint("10.10.10.10", 80))],
        ),
    ],
    ids=["empty", "simple"],
)
def test_contents(contents, want):
    et = EndpointsTranslator(entries=contents)
    assert et.contents() == want


@pytest.mark.parametrize(
    "query, want",
    [
        (["default/httpbin-org"], [cla("default/httpbin-org", LbEndpoint("10.10.10.10", 80))]),
        (
            ["default/kuard/8080", "default/httpbin-org"],
            [
                cla("default/httpbin-org", LbEndpoint("10.10.10.10", 80)),
                ClusterLoadAssignment(cluster_name="default/kuard/8080"),
            ],
        ),
        (["default/kuard/8080"], [ClusterLoadAssignment(cluster_name="default/kuard/8080")]),
    ],
    ids=["exact match", "partial match", "no match"],
)
def test_query(query, want):
    et = EndpointsTranslator(
        entries={"default/httpbin-org": cla("default/httpbin-org", LbEndpoint("10.10.10.10", 80))}
    )
    assert et.query(query) == want


@pytest.mark.parametrize(
    "ep, want",
    [
        (
            endpoints("default", "simple", EndpointSubset(addresses("192.168.183.24"), ports(8080))),
            [cla("default/simple", LbEndpoint("192.168.183.24", 8080))],
        ),
        (
            endpoints(
                "default",
                "httpbin-org",
                EndpointSubset(
                    addresses("23.23.247.89", "50.17.192.147", "50.17.206.192", "50.19.99.160"),
                    ports(80),
                ),
            ),
            [
                cla(
                    "default/httpbin-org",
                    LbEndpoint("23.23.247.89", 80),
                    LbEndpoint("50.17.192.147", 80),
                    LbEndpoint("50.17.206.192", 80),
                    LbEndpoint("50.19.99.160", 80),
                )
            ],
        ),
    ],
    ids=["simple", "multiple addresses"],
)
def test_add_endpoints(ep, want):
    et = EndpointsTranslator()
    et.on_add(ep)
    assert et.contents() == want


def _simple():
    return endpoints("default", "simple", EndpointSubset(addresses("192.168.183.24"), ports(8080)))


def _long():
    return endpoints(
        "super-long-namespace-name-oh-boy",
        "what-a-descriptive-service-name-you-must-be-so-proud",
        EndpointSubset(addresses("172.16.0.1", "172.16.0.2"), ports(8000, 8443)),
    )


@pytest.mark.parametrize(
    "setup, ep, want",
    [
        ([_simple()], _simple(), []),
        (
            [_simple()],
            endpoints("default", "different", EndpointSubset(addresses("192.168.183.24"), ports(8080))),
            [cla("default/simple", LbEndpoint("192.168.183.24", 8080))],
        ),
        ([], _simple(), []),
        ([_long()], _long(), []),
    ],
    ids=["remove existing", "remove different", "remove non existent", "remove long name"],
)
def test_remove_endpoints(setup, ep, want):
    et = EndpointsTranslator()
    for obj in setup:
        et.on_add(obj)
    et.on_delete(ep)
    assert et.contents() == want


@pytest.mark.parametrize(
    "old_ep, new_ep, want",
    [
        (None, _simple(), [cla("default/simple", LbEndpoint("192.168.183.24", 8080))]),
        (
            None,
            endpoints(
                "default",
                "httpbin-org",
                EndpointSubset(
                    addresses("23.23.247.89", "50.17.192.147", "50.17.206.192", "50.19.99.160"),
                    ports(80),
                ),
            ),
            [
                cla(
                    "default/httpbin-org",
                    LbEndpoint("23.23.247.89", 80),
                    LbEndpoint("50.17.192.147", 80),
                    LbEndpoint("50.17.206.192", 80),
                    LbEndpoint("50.19.99.160", 80),
                )
            ],
        ),
        (
            None,
            endpoints(
                "default",
                "secure",
                EndpointSubset(addresses("192.168.183.24"), [EndpointPort(port=8443, name="https")]),
            ),
            [cla("default/secure/https", LbEndpoint("192.168.183.24", 8443))],
        ),
        (_simple(), None, []),
    ],
    ids=["simple", "multiple addresses", "named container port", "remove existing"],
)
def test_recompute_cluster_load_assignment(old_ep, new_ep, want):
    et = EndpointsTranslator()
    et.recompute_cluster_load_assignment(old_ep, new_ep)
    assert et.contents() == want


def test_scale_to_zero_endpoints():
    et = EndpointsTranslator()
    e1 = _simple()
    et.on_add(e1)
    assert et.contents() == [cla("default/simple", LbEndpoint("192.168.183.24", 8080))]

    e2 = endpoints("default", "simple")
    et.on_update(e1, e2)
    assert et.contents() == []


def test_delete_tombstone_removes_wrapped_endpoints():
    et = EndpointsTranslator()
    et.on_add(_simple())
    et.on_delete(DeletedFinalStateUnknown(key="default/simple", obj=_simple()))
    assert et.contents() == []


def test_unexpected_types_leave_cache_untouched():
    et = EndpointsTranslator()
    et.on_add(_simple())
    et.on_add("not endpoints")
    et.on_delete(42)
    et.on_update("bad old", _simple())
    et.on_update(_simple(), "bad new")
    assert et.contents() == [cla("default/simple", LbEndpoint("192.168.183.24", 8080))]


def test_invalid_old_object_skips_update():
    et = EndpointsTranslator()
    et.on_update(object(), _simple())
    assert et.contents() == []


def test_subsets_without_addresses_are_skipped():
    et = EndpointsTranslator()
    et.on_add(endpoints("default", "simple", EndpointSubset([], ports(8080))))
    assert et.contents() == []


def test_add_notifies_waiters():
    et = EndpointsTranslator()
    ch = queue.Queue(maxsize=1)
    et.register(ch, 0)
    et.on_add(_simple())
    assert ch.get_nowait() == 1


def test_update_between_empty_endpoints_does_not_notify():
    et = EndpointsTranslator()
    ch = queue.Queue(maxsize=1)
    et.register(ch, 0)
    et.on_update(endpoints("default", "simple"), endpoints("default", "simple"))
    assert ch.empty()


def test_same_object_is_a_no_op():
    et = EndpointsTranslator()
    ep = _simple()
    ch = queue.Queue(maxsize=1)
    et.register(ch, 0)
    et.recompute_cluster_load_assignment(ep, ep)
    assert ch.empty()
    assert et.contents() == []


def test_type_url():
    assert EndpointsTranslator().type_url() == ENDPOINT_TYPE


@pytest.mark.parametrize(
    "ns, name, portname, want",
    [
        ("default", "simple", "", "default/simple"),
        ("default", "secure", "https", "default/secure/https"),
    ],
)
def test_servicename(ns, name, portname, want):
    assert servicename(ObjectMeta(name=name, namespace=ns), portname) == want