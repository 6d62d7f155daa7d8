"""Resolved client configuration for reaching a cluster API server."""

import base64
from dataclasses import dataclass, field
from typing import Any

from .models import CAMaterial


@dataclass(frozen=True)
class RestConfig:
    """Everything needed to open a mutually-authenticated TLS connection.

    Attributes:
        host: API server address (e.g. https://10.0.0.1:6443)
        ca_data: PEM root of trust
        cert_data: PEM client certificate
        key_data: PEM client private key
        bearer_token: Token auth, only when a kubeconfig supplies one
        server_name: TLS server name override
        insecure: Skip server certificate verification
    """

    host: str
    ca_data: bytes | None = field(default=None, repr=False)
    cert_data: bytes | None = field(default=None, repr=False)
    key_data: bytes | None = field(default=None, repr=False)
    bearer_token: str | None = field(default=None, repr=False)
    server_name: str | None = None
    insecure: bool = False

    def to_kubeconfig(
        self, cluster_name: str = "cluster", user_name: str = "admin"
    ) -> dict[str, Any]:
        """Render as a single-context kubeconfig document (decoded form)."""
        cluster: dict[str, Any] = {"server": self.host}
        if self.ca_data:
            cluster["certificate-authority-data"] = _b64(self.ca_data)
        if self.server_name:
            cluster["tls-server-name"] = self.server_name
        if self.insecure:
            cluster["insecure-skip-tls-verify"] = True

        user: dict[str, Any] = {}
        if self.cert_data:
            user["client-certificate-data"] = _b64(self.cert_data)
        if self.key_data:
            user["client-key-data"] = _b64(self.key_data)
        if self.bearer_token:
            user["token"] = self.bearer_token

        context_name = f"{user_name}@{cluster_name}"
        return {
            "apiVersion": "v1",
            "kind": "Config",
            "clusters": [{"name": cluster_name, "cluster": cluster}],
            "users": [{"name": user_name, "user": user}],
            "contexts": [
                {"name": context_name, "context": {"cluster": cluster_name, "user": user_name}}
            ],
            "current-context": context_name,
            "preferences": {},
        }


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def assemble_rest_config(
    root_cert: bytes, client_cert: bytes, client_key: bytes, server: str
) -> RestConfig:
    """Build a RestConfig from already-validated parts. No further checks."""
    return RestConfig(host=server, ca_data=root_cert, cert_data=client_cert, key_data=client_key)


def rest_config_from_ca_material(material: CAMaterial, server: str) -> RestConfig:
    """Use the CA keypair itself as admin client credentials.

    Before regular credentials are issued, the cluster accepts its own CA
    keypair for administrative access, so the CA certificate is both the
    root of trust and the client certificate.
    """
    return assemble_rest_config(
        root_cert=material.cert_pem,
        client_cert=material.cert_pem,
        client_key=material.key_pem,
        server=server,
    )
