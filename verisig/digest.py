"""
Body Digest

``Digest: SHA-256=<base64>`` handling. Signing the digest header is what
ties the request body to the signature.
"""

import base64
import hashlib
import hmac

from .errors import DigestMismatch


def compute_digest(body: bytes) -> str:
    """
    Compute the Digest header value for a body.

    Args:
        body: Request body

    Returns:
        ``SHA-256=<base64 of sha256(body)>``
    """
    digest = base64.b64encode(hashlib.sha256(body).digest()).decode("utf-8")
    return f"SHA-256={digest}"


def verify_digest(header: str, body: bytes):
    """
    Check a Digest header against a body.

    Args:
        header: Digest header value, possibly listing several algorithms
        body: Request body as received

    Raises:
        DigestMismatch: If there is no SHA-256 entry or it does not match
    """
    expected = compute_digest(body).split("=", 1)[1]
    for entry in header.split(","):
        algorithm, _, value = entry.strip().partition("=")
        if algorithm.lower() == "sha-256":
            if hmac.compare_digest(value.strip(), expected):
                return
            raise DigestMismatch("Digest header does not match the request body")
    raise DigestMismatch("Digest header has no SHA-256 entry")
