"""Ingress resources and the annotations contour reads from them."""

from __future__ import annotations

from dataclasses import dataclass, field

from contour.apis import ObjectMeta

ANNOTATION_WEBSOCKET_ROUTES = "contour.heptio.com/websocket-routes"
ANNOTATION_ALLOW_HTTP = "kubernetes.io/ingress.allow-http"


@dataclass
class IngressBackend:
    """A service and port an Ingress sends traffic to; the port is a number or a name."""

    service_name: str = ""
    service_port: int | str = 0


@dataclass
class IngressTLS:
    """Hosts served with the certificate in the named secret."""

    hosts: list[str] = field(default_factory=list)
    secret_name: str = ""


@dataclass
class IngressSpec:
    """The spec of an Ingress."""

    backend: IngressBackend | None = None
    tls: list[IngressTLS] = field(default_factory=list)


@dataclass
class Ingress:
    """A Kubernetes Ingress resource."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: IngressSpec = field(default_factory=IngressSpec)

    @property
    def annotations(self) -> dict[str, str]:
        return self.metadata.annotations


def http_allowed(ingress: Ingress) -> bool:
    """Return True unless the allow-http annotation is set to "false"."""
    return ingress.annotations.get(ANNOTATION_ALLOW_HTTP) != "false"


def websocket_routes(ingress: Ingress) -> dict[str, bool]:
    """Return the routes named in the websocket-routes annotation, each mapped to True."""
    value = ingress.annotations.get(ANNOTATION_WEBSOCKET_ROUTES, "")
    return {route: True for route in (part.strip() for part in value.split(",")) if route}