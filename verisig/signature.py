"""
Signature Header

Parsing and formatting of the ``Signature`` request header:

    keyId="https://example.com/users/alice#main-key",algorithm="rsa-sha256",
    headers="(request-target) host date digest",signature="<base64>"

Parameter order on the wire is not significant; the order of names inside
``headers`` is, since it fixes the canonicalization order.
"""

import re
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel

from .canonical import header_value, normalize_header_names
from .errors import MalformedSignatureHeader, UnsupportedAlgorithm

ALGORITHM = "rsa-sha256"
REQUIRED_PARAMS = ("keyId", "algorithm", "headers", "signature")

_PAIR = r'\s*([A-Za-z][A-Za-z0-9_-]*)\s*=\s*(?:"([^"]*)"|([^\s,"]+))\s*'
_PAIR_RE = re.compile(_PAIR)
_PAIR_LIST_RE = re.compile(rf"^{_PAIR}(?:,{_PAIR})*$")


class SignatureParams(BaseModel):
    """Parameters carried by a Signature header."""
    key_id: str
    algorithm: str = ALGORITHM
    headers: List[str]
    signature: str

    def to_header(self) -> str:
        """Serialize to the Signature header value."""
        return format_signature_header(self)


def format_signature_header(params: SignatureParams) -> str:
    """
    Format signature parameters as a header value.

    Args:
        params: Signature parameters

    Returns:
        Comma-separated ``name="value"`` pairs
    """
    return (
        f'keyId="{params.key_id}",'
        f'algorithm="{params.algorithm}",'
        f'headers="{" ".join(params.headers)}",'
        f'signature="{params.signature}"'
    )


def parse_params(value: str) -> Dict[str, str]:
    """
    Split a ``name="value"`` pair list into a dict.

    Raises:
        MalformedSignatureHeader: On invalid syntax or duplicate names
    """
    if not _PAIR_LIST_RE.match(value):
        raise MalformedSignatureHeader("Signature header is not a valid parameter list")

    params = {}
    for match in _PAIR_RE.finditer(value):
        name = match.group(1)
        if name in params:
            raise MalformedSignatureHeader(f"Duplicate signature parameter: {name}")
        params[name] = match.group(2) if match.group(2) is not None else match.group(3)
    return params


def parse_signature_header(value: str) -> SignatureParams:
    """
    Parse a Signature header value.

    Args:
        value: Signature header value

    Returns:
        Parsed signature parameters

    Raises:
        MalformedSignatureHeader: If a required parameter is missing or empty
        UnsupportedAlgorithm: If the algorithm is not rsa-sha256
    """
    params = parse_params(value)

    missing = [name for name in REQUIRED_PARAMS if not params.get(name, "").strip()]
    if missing:
        raise MalformedSignatureHeader(
            f"Signature header is missing required parameter(s): {', '.join(missing)}"
        )

    algorithm = params["algorithm"].strip().lower()
    if algorithm != ALGORITHM:
        raise UnsupportedAlgorithm(f"Unsupported signature algorithm: {params['algorithm']}")

    return SignatureParams(
        key_id=params["keyId"],
        algorithm=algorithm,
        headers=normalize_header_names(params["headers"].split()),
        signature=params["signature"],
    )


def extract_signature_header(headers: Mapping[str, str]) -> Optional[str]:
    """
    Find the signature parameters in a request's headers.

    Uses the ``Signature`` header, falling back to an ``Authorization``
    header with the ``Signature`` scheme.
    """
    value = header_value(headers, "signature")
    if value is not None:
        return value

    authorization = header_value(headers, "authorization")
    if authorization is not None:
        scheme, _, rest = authorization.strip().partition(" ")
        if scheme.lower() == "signature":
            return rest
    return None
