"""Cluster resource model addressable by serialized field names.

Each structured entity declares ``FIELDS``, a static table mapping its
serialized (camelCase) field names to attribute names. The path extractor
resolves segments against that table only, so a path uses exactly the names
found in the resource's JSON/YAML form (``spec.providerSpec.value``).

``RawExtension`` holds an embedded JSON document kept as raw bytes, the way
provider-specific configuration travels inside a Cluster object.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar


@dataclass
class RawExtension:
    """Embedded serialized document, decoded lazily on key access."""

    raw: bytes | None = None

    @classmethod
    def from_value(cls, value: Any) -> "RawExtension | None":
        """Wrap an already-decoded JSON value, re-serializing it to bytes."""
        if value is None:
            return None
        if isinstance(value, (bytes, bytearray)):
            return cls(raw=bytes(value))
        return cls(raw=json.dumps(value).encode("utf-8"))


@dataclass
class ObjectMeta:
    FIELDS: ClassVar[Mapping[str, str]] = {
        "name": "name",
        "namespace": "namespace",
        "labels": "labels",
        "annotations": "annotations",
    }

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)


@dataclass
class NetworkRanges:
    FIELDS: ClassVar[Mapping[str, str]] = {"cidrBlocks": "cidr_blocks"}

    cidr_blocks: list[str] = field(default_factory=list)


@dataclass
class ClusterNetwork:
    FIELDS: ClassVar[Mapping[str, str]] = {
        "services": "services",
        "pods": "pods",
        "serviceDomain": "service_domain",
    }

    services: NetworkRanges = field(default_factory=NetworkRanges)
    pods: NetworkRanges = field(default_factory=NetworkRanges)
    service_domain: str = ""


@dataclass
class ProviderSpec:
    FIELDS: ClassVar[Mapping[str, str]] = {"value": "value"}

    value: RawExtension | None = None


@dataclass
class ClusterSpec:
    FIELDS: ClassVar[Mapping[str, str]] = {
        "clusterNetwork": "cluster_network",
        "providerSpec": "provider_spec",
    }

    cluster_network: ClusterNetwork = field(default_factory=ClusterNetwork)
    provider_spec: ProviderSpec = field(default_factory=ProviderSpec)


@dataclass
class APIEndpoint:
    FIELDS: ClassVar[Mapping[str, str]] = {"host": "host", "port": "port"}

    host: str = ""
    port: int = 0


@dataclass
class ClusterStatus:
    FIELDS: ClassVar[Mapping[str, str]] = {
        "apiEndpoints": "api_endpoints",
        "providerStatus": "provider_status",
        "errorReason": "error_reason",
        "errorMessage": "error_message",
    }

    api_endpoints: list[APIEndpoint] = field(default_factory=list)
    provider_status: RawExtension | None = None
    error_reason: str | None = None
    error_message: str | None = None


@dataclass
class Cluster:
    """Cluster API ``Cluster`` resource (the parts credential lookup walks)."""

    FIELDS: ClassVar[Mapping[str, str]] = {
        "apiVersion": "api_version",
        "kind": "kind",
        "metadata": "metadata",
        "spec": "spec",
        "status": "status",
    }

    api_version: str = "cluster.k8s.io/v1alpha1"
    kind: str = "Cluster"
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: ClusterSpec = field(default_factory=ClusterSpec)
    status: ClusterStatus = field(default_factory=ClusterStatus)

    @classmethod
    def from_dict(cls, obj: Mapping[str, Any]) -> "Cluster":
        """Build a Cluster from its decoded API representation.

        Embedded provider documents are re-serialized into ``RawExtension``
        so they are walked exactly like a freshly fetched object.

        Args:
            obj: Cluster resource as returned by the Kubernetes API

        Returns:
            Cluster with unknown fields dropped
        """
        metadata = obj.get("metadata") or {}
        spec = obj.get("spec") or {}
        status = obj.get("status") or {}
        network = spec.get("clusterNetwork") or {}
        provider_spec = spec.get("providerSpec") or {}

        return cls(
            api_version=obj.get("apiVersion", "cluster.k8s.io/v1alpha1"),
            kind=obj.get("kind", "Cluster"),
            metadata=ObjectMeta(
                name=metadata.get("name", ""),
                namespace=metadata.get("namespace", ""),
                labels=dict(metadata.get("labels") or {}),
                annotations=dict(metadata.get("annotations") or {}),
            ),
            spec=ClusterSpec(
                cluster_network=ClusterNetwork(
                    services=NetworkRanges(
                        cidr_blocks=list((network.get("services") or {}).get("cidrBlocks") or [])
                    ),
                    pods=NetworkRanges(
                        cidr_blocks=list((network.get("pods") or {}).get("cidrBlocks") or [])
                    ),
                    service_domain=network.get("serviceDomain", ""),
                ),
                provider_spec=ProviderSpec(
                    value=RawExtension.from_value(provider_spec.get("value"))
                ),
            ),
            status=ClusterStatus(
                api_endpoints=[
                    APIEndpoint(host=endpoint.get("host", ""), port=endpoint.get("port", 0))
                    for endpoint in status.get("apiEndpoints") or []
                ],
                provider_status=RawExtension.from_value(status.get("providerStatus")),
                error_reason=status.get("errorReason"),
                error_message=status.get("errorMessage"),
            ),
        )
