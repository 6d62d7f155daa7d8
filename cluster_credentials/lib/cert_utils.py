"""CA material decoding: base64 transport, PEM certificate and private key parsing."""

import base64
import binascii

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes

from .errors import DecodeError
from .models import CAMaterial


def decode_base64(data: str | bytes, part: str) -> bytes:
    """Decode standard base64, ignoring line breaks.

    Args:
        data: Base64 text as stored in the secret or document
        part: Which half is being decoded ("cert" or "key"), for error messages

    Raises:
        DecodeError: If data contains characters outside the base64 alphabet
            or has bad padding
    """
    if isinstance(data, str):
        try:
            data = data.encode("ascii")
        except UnicodeEncodeError as e:
            raise DecodeError(part, "not valid base64: non-ASCII characters") from e

    try:
        return base64.b64decode(data.replace(b"\r", b"").replace(b"\n", b""), validate=True)
    except binascii.Error as e:
        raise DecodeError(part, f"not valid base64: {e}") from e


def deserialize_private_key(pem_data: bytes) -> PrivateKeyTypes:
    """Deserialize an unencrypted private key from PEM bytes.

    Accepts every key type cryptography loads from PEM: RSA (PKCS#1 or PKCS#8),
    EC (SEC1 or PKCS#8), Ed25519, Ed448 and DSA.
    """
    try:
        return serialization.load_pem_private_key(pem_data, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise DecodeError("key", f"not a PEM private key: {e}") from e


def deserialize_certificate(pem_data: bytes) -> x509.Certificate:
    """Deserialize an X.509 certificate from PEM bytes."""
    try:
        return x509.load_pem_x509_certificate(pem_data)
    except ValueError as e:
        raise DecodeError("cert", f"not a PEM certificate: {e}") from e


def get_certificate_serial_hex(cert: x509.Certificate) -> str:
    """Return certificate serial number as hex with colons (e.g., 3A:F2:B1:...)."""
    serial_hex = f"{cert.serial_number:X}"
    if len(serial_hex) % 2 != 0:
        serial_hex = "0" + serial_hex
    return ":".join(serial_hex[i : i + 2] for i in range(0, len(serial_hex), 2))


def decode_ca_material(cert_data: str | bytes, key_data: str | bytes) -> CAMaterial:
    """Validate and decode a base64-transported CA certificate and key.

    Both halves are base64-decoded before either is parsed, so a transport
    error is reported ahead of a structural one. Neither trust chain nor
    validity period is checked.

    Args:
        cert_data: Base64 of a PEM certificate
        key_data: Base64 of a PEM private key

    Returns:
        CAMaterial holding PEM bytes and parsed objects

    Raises:
        DecodeError: Naming the half ("cert" or "key") that failed
    """
    cert_pem = decode_base64(cert_data, "cert")
    key_pem = decode_base64(key_data, "key")

    certificate = deserialize_certificate(cert_pem)
    private_key = deserialize_private_key(key_pem)

    return CAMaterial(
        cert_pem=cert_pem,
        key_pem=key_pem,
        certificate=certificate,
        private_key=private_key,
    )
