"""Test fixtures for cluster_credentials tests."""

import base64
import json
from datetime import UTC, datetime, timedelta

import pytest
import yaml
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes
from cryptography.x509 import oid

from cluster_credentials.lib.cluster import Cluster, ClusterSpec, ObjectMeta, ProviderSpec, RawExtension


def b64(data: bytes) -> str:
    """Base64 text, as CA material is transported in secrets and documents."""
    return base64.b64encode(data).decode("ascii")


def build_ca_certificate(key: PrivateKeyTypes, common_name: str = "kubernetes") -> x509.Certificate:
    """Self-signed CA certificate, shaped like a kubeadm cluster CA."""
    name = x509.Name([x509.NameAttribute(oid.NameOID.COMMON_NAME, common_name)])
    not_before = datetime.now(UTC)
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_before + timedelta(days=365))
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .sign(key, hashes.SHA256())
    )


def pkcs1_pem(key: rsa.RSAPrivateKey) -> bytes:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture(scope="session")
def ca_key() -> rsa.RSAPrivateKey:
    """RSA key for the cluster CA (2048 bits keeps tests fast)."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ca_cert(ca_key: rsa.RSAPrivateKey) -> x509.Certificate:
    return build_ca_certificate(ca_key)


@pytest.fixture(scope="session")
def ca_cert_pem(ca_cert: x509.Certificate) -> bytes:
    return ca_cert.public_bytes(serialization.Encoding.PEM)


@pytest.fixture(scope="session")
def ca_key_pem(ca_key: rsa.RSAPrivateKey) -> bytes:
    return pkcs1_pem(ca_key)


@pytest.fixture(scope="session")
def ec_ca_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def ec_ca_cert(ec_ca_key: ec.EllipticCurvePrivateKey) -> x509.Certificate:
    return build_ca_certificate(ec_ca_key, common_name="ec-ca")


@pytest.fixture
def ca_secret_data(ca_cert_pem: bytes, ca_key_pem: bytes) -> dict[str, bytes]:
    """Secret data as a secret backend returns it: base64 PEM under cert/key."""
    return {
        "cert": b64(ca_cert_pem).encode("ascii"),
        "key": b64(ca_key_pem).encode("ascii"),
    }


@pytest.fixture
def provider_cluster(ca_cert_pem: bytes, ca_key_pem: bytes) -> Cluster:
    """Cluster whose provider spec embeds CA material under ``test``."""
    document = {"test": {"cert": b64(ca_cert_pem), "key": b64(ca_key_pem)}}
    return Cluster(
        metadata=ObjectMeta(name="clustername", namespace="default"),
        spec=ClusterSpec(
            provider_spec=ProviderSpec(value=RawExtension(raw=json.dumps(document).encode()))
        ),
    )


@pytest.fixture
def kubeconfig_bytes(ca_cert_pem: bytes, ca_key_pem: bytes) -> bytes:
    """Self-contained kubeconfig for an admin user of ``my-cluster``."""
    document = {
        "apiVersion": "v1",
        "kind": "Config",
        "clusters": [
            {
                "name": "my-cluster",
                "cluster": {
                    "server": "https://127.0.0.1:38499",
                    "certificate-authority-data": b64(ca_cert_pem),
                },
            }
        ],
        "contexts": [
            {
                "name": "kubernetes-admin@my-cluster",
                "context": {"cluster": "my-cluster", "user": "kubernetes-admin"},
            }
        ],
        "current-context": "kubernetes-admin@my-cluster",
        "preferences": {},
        "users": [
            {
                "name": "kubernetes-admin",
                "user": {
                    "client-certificate-data": b64(ca_cert_pem),
                    "client-key-data": b64(ca_key_pem),
                },
            }
        ],
    }
    return yaml.safe_dump(document).encode("utf-8")
