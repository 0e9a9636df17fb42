"""
RSA Key Material

Loading of PEM-encoded RSA keys for signing and verification, and key pair
generation for actors. Keys are parsed per call and never cached.
"""

import base64
import binascii
import re
from typing import Tuple, Union

from cryptography.exceptions import UnsupportedAlgorithm as CryptoUnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from .errors import InvalidKey

PemData = Union[str, bytes]

_PEM_BLOCK_RE = re.compile(
    rb"-----BEGIN ([A-Z0-9 ]+)-----(.*?)-----END \1-----",
    re.DOTALL,
)


def _pem_bytes(pem: PemData) -> bytes:
    if isinstance(pem, str):
        pem = pem.encode("ascii", errors="replace")
    if not isinstance(pem, bytes) or not pem.strip():
        raise InvalidKey("Key material is empty")
    return pem.strip()


def load_private_key(pem: Union[PemData, rsa.RSAPrivateKey]) -> rsa.RSAPrivateKey:
    """
    Load an RSA private key.

    Args:
        pem: PKCS#1 (``RSA PRIVATE KEY``) or PKCS#8 PEM, or a parsed key

    Returns:
        RSA private key

    Raises:
        InvalidKey: If the PEM is malformed, encrypted or not an RSA key
    """
    if isinstance(pem, rsa.RSAPrivateKey):
        return pem

    try:
        key = serialization.load_pem_private_key(_pem_bytes(pem), password=None)
    except (ValueError, TypeError, CryptoUnsupportedAlgorithm) as e:
        raise InvalidKey(f"Could not parse private key: {e}") from e

    if not isinstance(key, rsa.RSAPrivateKey):
        raise InvalidKey(f"Expected an RSA private key, got {type(key).__name__}")
    return key


def load_public_key(pem: Union[PemData, rsa.RSAPublicKey]) -> rsa.RSAPublicKey:
    """
    Load an RSA public key.

    Accepts SubjectPublicKeyInfo (``PUBLIC KEY``) and PKCS#1
    (``RSA PUBLIC KEY``) PEM. Some servers wrap SubjectPublicKeyInfo DER in
    an ``RSA PUBLIC KEY`` armour; the DER body is decoded directly when the
    label does not match its contents.

    Args:
        pem: PEM-encoded public key, or a parsed key

    Returns:
        RSA public key

    Raises:
        InvalidKey: If the PEM is malformed or not an RSA key
    """
    if isinstance(pem, rsa.RSAPublicKey):
        return pem

    data = _pem_bytes(pem)
    try:
        key = serialization.load_pem_public_key(data)
    except (ValueError, TypeError, CryptoUnsupportedAlgorithm):
        key = _load_der_body(data)

    if not isinstance(key, rsa.RSAPublicKey):
        raise InvalidKey(f"Expected an RSA public key, got {type(key).__name__}")
    return key


def _load_der_body(data: bytes):
    match = _PEM_BLOCK_RE.search(data)
    if not match:
        raise InvalidKey("Public key is not PEM encoded")
    try:
        der = base64.b64decode(b"".join(match.group(2).split()), validate=True)
        return serialization.load_der_public_key(der)
    except (binascii.Error, ValueError, TypeError, CryptoUnsupportedAlgorithm) as e:
        raise InvalidKey(f"Could not parse public key: {e}") from e


def public_key_pem(private_key: Union[PemData, rsa.RSAPrivateKey]) -> str:
    """Derive the SubjectPublicKeyInfo PEM for a private key."""
    key = load_private_key(private_key)
    return key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    ).decode("ascii")


def generate_rsa_key_pair(key_size: int = 4096) -> Tuple[str, str]:
    """
    Generate a new RSA key pair for an actor.

    Args:
        key_size: Modulus size in bits

    Returns:
        Tuple of (PKCS#1 private key PEM, SubjectPublicKeyInfo public key PEM)
    """
    private_key = rsa.generate_private_key(
        public_exponent=65537,
        key_size=key_size
    )
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption()
    ).decode("ascii")
    return private_pem, public_key_pem(private_key)
