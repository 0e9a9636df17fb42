"""
Signing String Canonicalization

Builds the string that is signed by the sender and rebuilt by the
receiver. Both sides must produce byte-identical output for the same
request and header list, so header selection, order, casing and line
format are fixed here and nowhere else.
"""

from typing import Iterable, List, Mapping, Optional
from urllib.parse import urlsplit

from .errors import MissingHeader

REQUEST_TARGET = "(request-target)"


def normalize_header_names(names: Iterable[str]) -> List[str]:
    """
    Lower-case header names while keeping their order.

    Args:
        names: Header names as supplied by the caller or the Signature header

    Returns:
        Ordered list of lower-cased names
    """
    return [name.strip().lower() for name in names]


def request_target(method: str, url: str) -> str:
    """
    Build the value of the ``(request-target)`` pseudo-header.

    Args:
        method: HTTP method
        url: Absolute URL or path with optional query

    Returns:
        ``"<method> <path>[?<query>]"`` with the method lower-cased
    """
    parts = urlsplit(url)
    target = parts.path or "/"
    if parts.query:
        target += f"?{parts.query}"
    return f"{method.lower()} {target}"


def header_value(headers: Mapping[str, str], name: str) -> Optional[str]:
    """
    Look up a header by case-folded name.

    Values are returned exactly as stored. List or tuple values (several
    instances of the same header) are joined with ``", "``.
    """
    folded = name.lower()
    for key, value in headers.items():
        if key.lower() == folded:
            if isinstance(value, (list, tuple)):
                return ", ".join(value)
            return value
    return None


def build_signing_string(request, header_names: Iterable[str]) -> str:
    """
    Build the signing string for a request.

    Args:
        request: Object exposing ``method``, ``url`` and ``headers``
        header_names: Ordered header names covered by the signature

    Returns:
        Newline-joined ``"name: value"`` lines, no trailing newline

    Raises:
        MissingHeader: If any named header is absent from the request
        ValueError: If no header names are given
    """
    names = normalize_header_names(header_names)
    if not names:
        raise ValueError("At least one header name is required")

    lines = []
    missing = []
    for name in names:
        if name == REQUEST_TARGET:
            lines.append(f"{name}: {request_target(request.method, request.url)}")
            continue
        value = header_value(request.headers, name)
        if value is None:
            missing.append(name)
        else:
            lines.append(f"{name}: {value}")

    if missing:
        raise MissingHeader(missing)
    return "\n".join(lines)
