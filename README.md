# contour

Building blocks for the control plane of a Kubernetes ingress controller
that feeds Envoy: the IngressRoute and TLSCertificateDelegation resource
types, the caches that hold what Envoy reads over its cluster (CDS),
listener (LDS) and endpoint (EDS) discovery APIs, the translation of
Kubernetes Endpoints into load assignments, and the filtering and
coalescing of Kubernetes watch events.

The package has no dependencies outside the standard library.

## Modules

| Module                 | Contents |
|------------------------|----------|
| `contour.apis`         | Dataclasses for `IngressRoute`, `IngressRouteList`, `TLSCertificateDelegation` and `TLSCertificateDelegationList` and their parts, with `from_dict` / `to_dict` for their JSON form; `resource(name)` returns a `GroupResource` in the `contour.heptio.com` group. |
| `contour.annotations`  | A minimal `Ingress` model and the helpers `http_allowed` and `websocket_routes`. |
| `contour.cond`         | `Cond`, a sequence-numbered notification point; waiters register a `queue.Queue`. |
| `contour.xdscache`     | `ClusterCache` and `ListenerCache`, thread-safe caches of named resources, and `ListenerVisitorConfig` with its address, port and access-log defaults. |
| `contour.endpoints`    | `EndpointsTranslator`, which keeps `ClusterLoadAssignment` entries in step with `Endpoints` add, update and delete events. |
| `contour.holdoff`      | `HoldoffNotifier`, which merges bursts of change notifications into a single call. |
| `contour.routemetrics` | `calculate_ingress_route_metric`, which counts IngressRoute statuses per namespace and virtual host. |
| `contour.handler`      | `ResourceEventHandler`, which passes events on to a builder only when the object's ingress class matches. |
| `contour.settings`     | `parse_root_namespaces` and `get_env`. |

## Examples

Reading an IngressRoute from its JSON form:

```python
from contour.apis import IngressRoute

route = IngressRoute.from_dict({
    "metadata": {"name": "simple", "namespace": "default"},
    "spec": {
        "virtualhost": {"fqdn": "www.example.com"},
        "routes": [{"match": "/", "services": [{"name": "backend", "port": 80}]}],
    },
})
route.spec.virtual_host.fqdn   # 'www.example.com'
```

Translating Endpoints into load assignments:

```python
from contour.apis import ObjectMeta
from contour.endpoints import (
    EndpointAddress, EndpointPort, Endpoints, EndpointSubset, EndpointsTranslator,
)

translator = EndpointsTranslator()
translator.on_add(Endpoints(
    metadata=ObjectMeta(name="simple", namespace="default"),
    subsets=[EndpointSubset(addresses=[EndpointAddress("192.168.183.24")],
                            ports=[EndpointPort(8080)])],
))
translator.contents()
# [ClusterLoadAssignment(cluster_name='default/simple',
#                        endpoints=[LbEndpoint(address='192.168.183.24', port=8080)])]
translator.query(["default/kuard/8080"])
# [ClusterLoadAssignment(cluster_name='default/kuard/8080', endpoints=[])]
```

Unknown names give empty assignments. A port name, when set, becomes the
third part of the cluster name (`default/secure/https`).

Waiting for a cache change:

```python
import queue
from contour.xdscache import ClusterCache

cache = ClusterCache()
ch = queue.Queue(maxsize=1)
cache.register(ch, 0)
cache.update({})
ch.get_nowait()   # 1
```

`ClusterCache` and `ListenerCache` store whatever objects they are given,
as long as each has a `name` attribute; `contents()` and `query()` return
them sorted by name. `ListenerCache` also takes a mapping of static
listeners that `update()` never replaces.

Splitting the list of namespaces root IngressRoutes may live in:

```python
from contour.settings import parse_root_namespaces

parse_root_namespaces("prod1, prod2, prod3 ")   # ['prod1', 'prod2', 'prod3']
parse_root_namespaces("")                       # []
```

## Plugging the pieces together

`ResourceEventHandler(builder, notifier, ingress_class="", metrics=None)`
expects a builder with `insert(obj)` and `remove(obj)` methods and a
notifier with `on_change(builder)`. A `HoldoffNotifier(notifier, metrics=None)`
can sit in between; it passes a change on at once if more than 0.5 seconds
have passed since the last one, and otherwise after 0.1 seconds unless a
newer change replaces it. Optional metrics objects need
`observe_resource_event(op, seconds)` for the handler and
`set_dag_rebuilt_metric(timestamp)` for the notifier.

## Defaults

Without listener settings, HTTP is on `0.0.0.0:8080`, HTTPS on
`0.0.0.0:8443`, and both access logs go to `/dev/stdout`. The ingress
class is `contour` unless another is configured; objects with no
`contour.heptio.com/ingress.class` or `kubernetes.io/ingress.class`
annotation are always accepted, and the first of those two annotations
wins when both are present.

## What this package does not do

- It has no builder that turns Ingresses, IngressRoutes, Services and
  Secrets into a routing graph, and no code that produces Envoy cluster,
  listener, route or secret resources; callers supply the builder and the
  values put into the caches.
- It runs no xDS gRPC server, no debug or metrics HTTP endpoint, and does
  not talk to the Kubernetes API.
- It installs no command-line program and does not write Envoy bootstrap
  files.

## Running the tests

Install the `test` extra and run `pytest`.