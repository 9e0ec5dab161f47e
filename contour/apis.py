"""IngressRoute and TLSCertificateDelegation resource types of the contour.heptio.com/v1beta1 API."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

GROUP_NAME = "contour.heptio.com"
VERSION = "v1beta1"
API_VERSION = f"{GROUP_NAME}/{VERSION}"

_T = TypeVar("_T")


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise TypeError(f"{what} must be a mapping, not {type(data).__name__}")
    return data


def _optional(factory: Callable[[Mapping[str, Any]], _T], value: Any) -> _T | None:
    return None if value is None else factory(value)


@dataclass(frozen=True)
class GroupResource:
    """A resource name qualified by its API group."""

    group: str
    resource: str

    def __str__(self) -> str:
        if not self.group:
            return self.resource
        return f"{self.resource}.{self.group}"


def resource(name: str) -> GroupResource:
    """Return the contour GroupResource for the named resource."""
    return GroupResource(group=GROUP_NAME, resource=name)


@dataclass
class ObjectMeta:
    """The subset of Kubernetes object metadata contour uses."""

    name: str = ""
    namespace: str = ""
    annotations: dict[str, str] = field(default_factory=dict)
    resource_version: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ObjectMeta:
        data = _require_mapping(data, "metadata")
        return cls(
            name=data.get("name", ""),
            namespace=data.get("namespace", ""),
            annotations=dict(data.get("annotations") or {}),
            resource_version=data.get("resourceVersion", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.name:
            out["name"] = self.name
        if self.namespace:
            out["namespace"] = self.namespace
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.resource_version:
            out["resourceVersion"] = self.resource_version
        return out


@dataclass
class TLS:
    """TLS properties of a virtual host."""

    secret_name: str = ""
    minimum_protocol_version: str = ""
    passthrough: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TLS:
        data = _require_mapping(data, "tls")
        return cls(
            secret_name=data.get("secretName", ""),
            minimum_protocol_version=data.get("minimumProtocolVersion", ""),
            passthrough=bool(data.get("passthrough", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.secret_name:
            out["secretName"] = self.secret_name
        if self.minimum_protocol_version:
            out["minimumProtocolVersion"] = self.minimum_protocol_version
        if self.passthrough:
            out["passthrough"] = True
        return out


@dataclass
class VirtualHost:
    """The fqdn and optional TLS settings of a root IngressRoute."""

    fqdn: str = ""
    tls: TLS | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VirtualHost:
        data = _require_mapping(data, "virtualhost")
        return cls(fqdn=data.get("fqdn", ""), tls=_optional(TLS.from_dict, data.get("tls")))

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"fqdn": self.fqdn}
        if self.tls is not None:
            out["tls"] = self.tls.to_dict()
        return out


@dataclass
class Delegate:
    """A reference to another IngressRoute."""

    name: str = ""
    namespace: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Delegate:
        data = _require_mapping(data, "delegate")
        return cls(name=data.get("name", ""), namespace=data.get("namespace", ""))

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name}
        if self.namespace:
            out["namespace"] = self.namespace
        return out


@dataclass
class HealthCheck:
    """Optional health checking of an upstream service."""

    path: str = ""
    host: str = ""
    interval_seconds: int = 0
    timeout_seconds: int = 0
    unhealthy_threshold_count: int = 0
    healthy_threshold_count: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HealthCheck:
        data = _require_mapping(data, "healthCheck")
        return cls(
            path=data.get("path", ""),
            host=data.get("host", ""),
            interval_seconds=int(data.get("intervalSeconds", 0)),
            timeout_seconds=int(data.get("timeoutSeconds", 0)),
            unhealthy_threshold_count=int(data.get("unhealthyThresholdCount", 0)),
            healthy_threshold_count=int(data.get("healthyThresholdCount", 0)),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"path": self.path}
        if self.host:
            out["host"] = self.host
        out["intervalSeconds"] = self.interval_seconds
        out["timeoutSeconds"] = self.timeout_seconds
        out["unhealthyThresholdCount"] = self.unhealthy_threshold_count
        out["healthyThresholdCount"] = self.healthy_threshold_count
        return out


@dataclass
class UpstreamValidation:
    """How to verify the certificate of a backend service."""

    ca_certificate: str = ""
    subject_name: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UpstreamValidation:
        data = _require_mapping(data, "validation")
        return cls(ca_certificate=data.get("caSecret", ""), subject_name=data.get("subjectName", ""))

    def to_dict(self) -> dict[str, Any]:
        return {"caSecret": self.ca_certificate, "subjectName": self.subject_name}


@dataclass
class Service:
    """An upstream that traffic is proxied to."""

    name: str = ""
    port: int = 0
    weight: int = 0
    health_check: HealthCheck | None = None
    strategy: str = ""
    upstream_validation: UpstreamValidation | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Service:
        data = _require_mapping(data, "service")
        return cls(
            name=data.get("name", ""),
            port=int(data.get("port", 0)),
            weight=int(data.get("weight", 0)),
            health_check=_optional(HealthCheck.from_dict, data.get("healthCheck")),
            strategy=data.get("strategy", ""),
            upstream_validation=_optional(UpstreamValidation.from_dict, data.get("validation")),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "port": self.port}
        if self.weight:
            out["weight"] = self.weight
        if self.health_check is not None:
            out["healthCheck"] = self.health_check.to_dict()
        if self.strategy:
            out["strategy"] = self.strategy
        if self.upstream_validation is not None:
            out["validation"] = self.upstream_validation.to_dict()
        return out


@dataclass
class TimeoutPolicy:
    """Timeout settings of a route."""

    request: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TimeoutPolicy:
        data = _require_mapping(data, "timeoutPolicy")
        return cls(request=data.get("request", ""))

    def to_dict(self) -> dict[str, Any]:
        return {"request": self.request}


@dataclass
class RetryPolicy:
    """Retry settings of a route."""

    num_retries: int = 0
    per_try_timeout: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RetryPolicy:
        data = _require_mapping(data, "retryPolicy")
        return cls(num_retries=int(data.get("count", 0)), per_try_timeout=data.get("perTryTimeout", ""))

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"count": self.num_retries}
        if self.per_try_timeout:
            out["perTryTimeout"] = self.per_try_timeout
        return out


@dataclass
class Route:
    """A prefix match and the services or delegate it routes to."""

    match: str = ""
    services: list[Service] = field(default_factory=list)
    delegate: Delegate | None = None
    enable_websockets: bool = False
    permit_insecure: bool = False
    prefix_rewrite: str = ""
    timeout_policy: TimeoutPolicy | None = None
    retry_policy: RetryPolicy | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Route:
        data = _require_mapping(data, "route")
        return cls(
            match=data.get("match", ""),
            services=[Service.from_dict(s) for s in data.get("services") or []],
            delegate=_optional(Delegate.from_dict, data.get("delegate")),
            enable_websockets=bool(data.get("enableWebsockets", False)),
            permit_insecure=bool(data.get("permitInsecure", False)),
            prefix_rewrite=data.get("prefixRewrite", ""),
            timeout_policy=_optional(TimeoutPolicy.from_dict, data.get("timeoutPolicy")),
            retry_policy=_optional(RetryPolicy.from_dict, data.get("retryPolicy")),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"match": self.match}
        if self.services:
            out["services"] = [s.to_dict() for s in self.services]
        if self.delegate is not None:
            out["delegate"] = self.delegate.to_dict()
        if self.enable_websockets:
            out["enableWebsockets"] = True
        if self.permit_insecure:
            out["permitInsecure"] = True
        if self.prefix_rewrite:
            out["prefixRewrite"] = self.prefix_rewrite
        if self.timeout_policy is not None:
            out["timeoutPolicy"] = self.timeout_policy.to_dict()
        if self.retry_policy is not None:
            out["retryPolicy"] = self.retry_policy.to_dict()
        return out


@dataclass
class TCPProxy:
    """Services, or a delegate, that TCP connections are proxied to."""

    services: list[Service] = field(default_factory=list)
    delegate: Delegate | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TCPProxy:
        data = _require_mapping(data, "tcpproxy")
        return cls(
            services=[Service.from_dict(s) for s in data.get("services") or []],
            delegate=_optional(Delegate.from_dict, data.get("delegate")),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.services:
            out["services"] = [s.to_dict() for s in self.services]
        if self.delegate is not None:
            out["delegate"] = self.delegate.to_dict()
        return out


@dataclass
class Status:
    """The reported state of an IngressRoute."""

    current_status: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Status:
        data = _require_mapping(data, "status")
        return cls(current_status=data.get("currentStatus", ""), description=data.get("description", ""))

    def to_dict(self) -> dict[str, Any]:
        return {"currentStatus": self.current_status, "description": self.description}


@dataclass
class IngressRouteSpec:
    """The spec of an IngressRoute; a virtual host makes it a root."""

    virtual_host: VirtualHost | None = None
    routes: list[Route] = field(default_factory=list)
    tcp_proxy: TCPProxy | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IngressRouteSpec:
        data = _require_mapping(data, "spec")
        return cls(
            virtual_host=_optional(VirtualHost.from_dict, data.get("virtualhost")),
            routes=[Route.from_dict(r) for r in data.get("routes") or []],
            tcp_proxy=_optional(TCPProxy.from_dict, data.get("tcpproxy")),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.virtual_host is not None:
            out["virtualhost"] = self.virtual_host.to_dict()
        out["routes"] = [r.to_dict() for r in self.routes]
        if self.tcp_proxy is not None:
            out["tcpproxy"] = self.tcp_proxy.to_dict()
        return out


@dataclass
class IngressRoute:
    """An IngressRoute custom resource."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: IngressRouteSpec = field(default_factory=IngressRouteSpec)
    status: Status = field(default_factory=Status)
    api_version: str = API_VERSION
    kind: str = "IngressRoute"

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    @property
    def annotations(self) -> dict[str, str]:
        return self.metadata.annotations

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IngressRoute:
        data = _require_mapping(data, "IngressRoute")
        return cls(
            metadata=ObjectMeta.from_dict(data.get("metadata") or {}),
            spec=IngressRouteSpec.from_dict(data.get("spec") or {}),
            status=Status.from_dict(data.get("status") or {}),
            api_version=data.get("apiVersion", API_VERSION),
            kind=data.get("kind", "IngressRoute"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": self.metadata.to_dict(),
            "spec": self.spec.to_dict(),
            "status": self.status.to_dict(),
        }


@dataclass
class IngressRouteList:
    """A list of IngressRoutes."""

    items: list[IngressRoute] = field(default_factory=list)
    api_version: str = API_VERSION
    kind: str = "IngressRouteList"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IngressRouteList:
        data = _require_mapping(data, "IngressRouteList")
        return cls(
            items=[IngressRoute.from_dict(i) for i in data.get("items") or []],
            api_version=data.get("apiVersion", API_VERSION),
            kind=data.get("kind", "IngressRouteList"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": {},
            "items": [i.to_dict() for i in self.items],
        }


@dataclass
class CertificateDelegation:
    """Permission for other namespaces to reference a secret; "*" means all."""

    secret_name: str = ""
    target_namespaces: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CertificateDelegation:
        data = _require_mapping(data, "delegation")
        return cls(
            secret_name=data.get("secretName", ""),
            target_namespaces=list(data.get("targetNamespaces") or []),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"secretName": self.secret_name, "targetNamespaces": list(self.target_namespaces)}


@dataclass
class TLSCertificateDelegationSpec:
    """The spec of a TLSCertificateDelegation."""

    delegations: list[CertificateDelegation] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TLSCertificateDelegationSpec:
        data = _require_mapping(data, "spec")
        return cls(delegations=[CertificateDelegation.from_dict(d) for d in data.get("delegations") or []])

    def to_dict(self) -> dict[str, Any]:
        return {"delegations": [d.to_dict() for d in self.delegations]}


@dataclass
class TLSCertificateDelegation:
    """A TLSCertificateDelegation custom resource."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: TLSCertificateDelegationSpec = field(default_factory=TLSCertificateDelegationSpec)
    api_version: str = API_VERSION
    kind: str = "TLSCertificateDelegation"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TLSCertificateDelegation:
        data = _require_mapping(data, "TLSCertificateDelegation")
        return cls(
            metadata=ObjectMeta.from_dict(data.get("metadata") or {}),
            spec=TLSCertificateDelegationSpec.from_dict(data.get("spec") or {}),
            api_version=data.get("apiVersion", API_VERSION),
            kind=data.get("kind", "TLSCertificateDelegation"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": self.metadata.to_dict(),
            "spec": self.spec.to_dict(),
        }


@dataclass
class TLSCertificateDelegationList:
    """A list of TLSCertificateDelegations."""

    items: list[TLSCertificateDelegation] = field(default_factory=list)
    api_version: str = API_VERSION
    kind: str = "TLSCertificateDelegationList"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TLSCertificateDelegationList:
        data = _require_mapping(data, "TLSCertificateDelegationList")
        return cls(
            items=[TLSCertificateDelegation.from_dict(i) for i in data.get("items") or []],
            api_version=data.get("apiVersion", API_VERSION),
            kind=data.get("kind", "TLSCertificateDelegationList"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": {},
            "items": [i.to_dict() for i in self.items],
        }


KNOWN_TYPES: dict[str, type] = {
    "IngressRoute": IngressRoute,
    "IngressRouteList": IngressRouteList,
    "TLSCertificateDelegation": TLSCertificateDelegation,
    "TLSCertificateDelegationList": TLSCertificateDelegationList,
}