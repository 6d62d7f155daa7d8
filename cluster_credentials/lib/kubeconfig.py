"""Kubeconfig parsing into RestConfig, and rendering back to YAML."""

import base64
import binascii
from collections.abc import Mapping
from typing import Any

import yaml

from .errors import KubeconfigError
from .rest_config import RestConfig

# Path references point at files on the machine that wrote the kubeconfig
_FILE_REFERENCES = ("certificate-authority", "client-certificate", "client-key", "tokenFile")


def load_kubeconfig(data: bytes | str) -> dict[str, Any]:
    """Parse and minimally validate a kubeconfig document.

    Args:
        data: YAML (or JSON) kubeconfig content

    Returns:
        Parsed kubeconfig dict

    Raises:
        KubeconfigError: If empty, not YAML, or not a mapping
    """
    try:
        document = yaml.safe_load(data)
    except yaml.YAMLError as e:
        raise KubeconfigError(f"kubeconfig is not valid YAML: {e}") from e

    if document is None:
        raise KubeconfigError("kubeconfig is empty")
    if not isinstance(document, dict):
        raise KubeconfigError("kubeconfig is not a mapping")
    kind = document.get("kind")
    if kind is not None and kind != "Config":
        raise KubeconfigError(f"kubeconfig kind is {kind!r}, expected 'Config'")
    return document


def _named(document: Mapping[str, Any], section: str, name: str, key: str) -> Mapping[str, Any]:
    """Return the ``key`` body of the entry called ``name`` in a named list section."""
    entries = document.get(section)
    if entries is None:
        entries = []
    if not isinstance(entries, list):
        raise KubeconfigError(f"kubeconfig {section!r} is not a list")

    for entry in entries:
        if isinstance(entry, Mapping) and entry.get("name") == name:
            body = entry.get(key)
            if body is None:
                return {}
            if not isinstance(body, Mapping):
                raise KubeconfigError(f"{section} entry {name!r} has a malformed {key!r}")
            return body
    raise KubeconfigError(f"{section[:-1]} {name!r} not found in kubeconfig")


def _decode_data(body: Mapping[str, Any], key: str) -> bytes | None:
    value = body.get(key)
    if not value:
        return None
    try:
        return base64.b64decode(str(value), validate=True)
    except (binascii.Error, ValueError) as e:
        raise KubeconfigError(f"{key} is not valid base64: {e}") from e


def _reject_file_references(body: Mapping[str, Any]) -> None:
    for key in _FILE_REFERENCES:
        if body.get(key):
            raise KubeconfigError(f"{key} file references are not supported, embed {key}-data")


def rest_config_from_kubeconfig(data: bytes | str, context: str | None = None) -> RestConfig:
    """Build a RestConfig from a self-contained kubeconfig.

    Args:
        data: Kubeconfig content
        context: Context to use; defaults to ``current-context``

    Returns:
        RestConfig reflecting the selected context's cluster and user

    Raises:
        KubeconfigError: If the document is malformed, references missing
            entries, or relies on file paths
    """
    document = load_kubeconfig(data)

    context_name = context or document.get("current-context")
    if not context_name:
        raise KubeconfigError("kubeconfig has no current-context")

    context_body = _named(document, "contexts", context_name, "context")
    cluster_name = context_body.get("cluster")
    if not cluster_name:
        raise KubeconfigError(f"context {context_name!r} does not name a cluster")

    cluster = _named(document, "clusters", cluster_name, "cluster")
    server = cluster.get("server")
    if not server:
        raise KubeconfigError(f"cluster {cluster_name!r} has no server")
    _reject_file_references(cluster)

    user: Mapping[str, Any] = {}
    user_name = context_body.get("user")
    if user_name:
        user = _named(document, "users", user_name, "user")
        _reject_file_references(user)

    return RestConfig(
        host=str(server),
        ca_data=_decode_data(cluster, "certificate-authority-data"),
        cert_data=_decode_data(user, "client-certificate-data"),
        key_data=_decode_data(user, "client-key-data"),
        bearer_token=user.get("token") or None,
        server_name=cluster.get("tls-server-name") or None,
        insecure=_flag(cluster, "insecure-skip-tls-verify"),
    )


def _flag(body: Mapping[str, Any], key: str) -> bool:
    value = body.get(key, False)
    if not isinstance(value, bool):
        raise KubeconfigError(f"{key} must be true or false, got {value!r}")
    return value


def dump_kubeconfig(
    config: RestConfig, cluster_name: str = "cluster", user_name: str = "admin"
) -> str:
    """Serialize a RestConfig as kubeconfig YAML."""
    return yaml.safe_dump(
        config.to_kubeconfig(cluster_name=cluster_name, user_name=user_name),
        default_flow_style=False,
        sort_keys=False,
    )
