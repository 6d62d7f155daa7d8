"""Credential resolvers: turn a CA or kubeconfig source into a RestConfig.

Three strategies share one contract: return a complete ``RestConfig`` or
raise a ``CredentialError``. Each is a linear pipeline
(fetch -> require fields -> decode/parse -> assemble) that stops at the
first failing stage.
"""

from collections.abc import Mapping
from typing import Any

from .cert_utils import decode_ca_material, get_certificate_serial_hex
from .cluster import Cluster
from .config import CredentialConfig
from .errors import DecodeError, MissingFieldError, PathResolutionError, SecretFetchError
from .kubeconfig import rest_config_from_kubeconfig
from .logging_config import LOGGER
from .models import CAMaterial
from .path_extractor import as_mapping, extract
from .rest_config import RestConfig, rest_config_from_ca_material
from .secret_store import SecretAccessor


def fetch_secret(secrets: SecretAccessor, name: str) -> Mapping[str, bytes]:
    """Fetch a secret, wrapping backend failures in SecretFetchError.

    Returns:
        Secret data; empty when the secret exists without data
    """
    try:
        data = secrets.get(name)
    except SecretFetchError:
        raise
    except Exception as e:
        raise SecretFetchError(name, f"failed to get secret {name!r}: {e}") from e
    return data or {}


def _require(data: Mapping[str, Any], field: str, source: str) -> Any:
    value = data.get(field)
    if value is None:
        LOGGER.warning("%s has no %r entry", source, field)
        raise MissingFieldError(field, source)
    return value


def _decode(cert_data: str | bytes, key_data: str | bytes, source: str) -> CAMaterial:
    try:
        return decode_ca_material(cert_data, key_data)
    except DecodeError as e:
        LOGGER.warning("%s holds unusable CA %s", source, e.part)
        raise


def rest_config_from_ca_secret_ref(
    secrets: SecretAccessor,
    name: str,
    cluster_name: str,
    server: str,
    config: CredentialConfig | None = None,
) -> RestConfig:
    """Build a RestConfig from CA material stored in a secret.

    Args:
        secrets: Secret accessor
        name: Secret holding base64 PEM under the cert and key entries
        cluster_name: Cluster label, used for logging only
        server: API server address
        config: Entry names; defaults to ``cert`` and ``key``

    Returns:
        RestConfig using the CA certificate as root of trust and client certificate

    Raises:
        SecretFetchError: If the secret cannot be fetched
        MissingFieldError: If the cert or key entry is absent
        DecodeError: If either entry is not base64 PEM of the expected kind
    """
    config = config or CredentialConfig()
    source = f"secret {name!r}"

    data = fetch_secret(secrets, name)
    cert_data = _require(data, config.cert_key, source)
    key_data = _require(data, config.key_key, source)
    material = _decode(cert_data, key_data, source)

    rest_config = rest_config_from_ca_material(material, server)
    LOGGER.info(
        "Resolved CA credentials from secret (CA serial %s)",
        get_certificate_serial_hex(material.certificate),
        extra={"strategy": "ca-secret", "secret": name, "cluster": cluster_name, "host": server},
    )
    return rest_config


def rest_config_from_ca_cluster_field(
    cluster: Cluster | None,
    field_path: str,
    server: str,
    config: CredentialConfig | None = None,
) -> RestConfig:
    """Build a RestConfig from CA material embedded in a Cluster object.

    Args:
        cluster: Cluster object to walk
        field_path: Dotted path to an object holding cert and key entries,
            e.g. ``spec.providerSpec.value.caKeyPair``
        server: API server address
        config: Entry names; defaults to ``cert`` and ``key``

    Returns:
        RestConfig using the CA certificate as root of trust and client certificate

    Raises:
        PathResolutionError: If the path cannot be walked or does not end at an object
        MissingFieldError: If the object lacks string cert or key entries
        DecodeError: If either entry is not base64 PEM of the expected kind
    """
    config = config or CredentialConfig()
    if cluster is None:
        raise PathResolutionError(field_path or "", reason="no cluster object to resolve against")

    node = extract(cluster, field_path)
    document = as_mapping(node, field_path)

    source = f"cluster field {field_path!r}"
    entries = {}
    for field in (config.cert_key, config.key_key):
        value = _require(document, field, source)
        if not isinstance(value, str):
            LOGGER.warning("%s has a non-string %r entry", source, field)
            raise MissingFieldError(field, source, f"is {type(value).__name__}, expected a string")
        entries[field] = value
    material = _decode(entries[config.cert_key], entries[config.key_key], source)

    rest_config = rest_config_from_ca_material(material, server)
    LOGGER.info(
        "Resolved CA credentials from cluster field (CA serial %s)",
        get_certificate_serial_hex(material.certificate),
        extra={
            "strategy": "ca-cluster-field",
            "cluster": cluster.metadata.name,
            "field_path": field_path,
            "host": server,
        },
    )
    return rest_config


def rest_config_from_kubeconfig_secret_ref(
    secrets: SecretAccessor,
    name: str,
    server: str = "",
    config: CredentialConfig | None = None,
) -> RestConfig:
    """Build a RestConfig from a complete kubeconfig stored in a secret.

    The kubeconfig carries its own endpoint and trust material; ``server`` is
    accepted for symmetry with the CA resolvers and ignored.

    Raises:
        SecretFetchError: If the secret cannot be fetched
        MissingFieldError: If the kubeconfig entry is absent or empty
        KubeconfigError: If the kubeconfig document is malformed
    """
    config = config or CredentialConfig()
    source = f"secret {name!r}"

    data = fetch_secret(secrets, name)
    kubeconfig = _require(data, config.kubeconfig_key, source)
    if not kubeconfig:
        LOGGER.warning("%s has an empty %r entry", source, config.kubeconfig_key)
        raise MissingFieldError(config.kubeconfig_key, source, "is empty")

    rest_config = rest_config_from_kubeconfig(kubeconfig)
    LOGGER.info(
        "Resolved credentials from kubeconfig secret",
        extra={"strategy": "kubeconfig-secret", "secret": name, "host": rest_config.host},
    )
    return rest_config
