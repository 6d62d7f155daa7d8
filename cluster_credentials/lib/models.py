"""Value models for credential resolution."""

from dataclasses import dataclass, field

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes


@dataclass(frozen=True)
class CAMaterial:
    """Validated CA certificate and private key.

    Only produced by ``decode_ca_material`` once both halves parse.
    PEM bytes are kept verbatim for handing to TLS consumers.
    """

    cert_pem: bytes = field(repr=False)
    key_pem: bytes = field(repr=False)
    certificate: x509.Certificate
    private_key: PrivateKeyTypes = field(repr=False)
