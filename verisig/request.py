"""
Request Abstraction

A minimal HTTP request value that the signer and verifier operate on.
Anything with ``method``, ``url`` and ``headers`` attributes (and
optionally ``body``) works with the core, so a ``requests.PreparedRequest``
can be signed as-is; this class exists for callers that receive requests
from elsewhere, such as an ASGI server.
"""

from typing import Mapping, Optional, Union

from requests.structures import CaseInsensitiveDict

from .errors import UnsupportedBody


class HttpRequest:
    """An HTTP request with case-insensitive headers."""

    def __init__(
        self,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[Union[bytes, str]] = None
    ):
        """
        Initialize request.

        Args:
            method: HTTP method (e.g., GET, POST)
            url: Absolute URL or path with optional query
            headers: Request headers
            body: Optional request body
        """
        self.method = method
        self.url = url
        self.headers = CaseInsensitiveDict(headers or {})
        self.body = body_bytes(body)

    @classmethod
    def from_prepared(cls, prepared) -> "HttpRequest":
        """
        Copy a ``requests.PreparedRequest`` into a new request value.

        Args:
            prepared: Prepared request

        Returns:
            HttpRequest with the same method, URL, headers and body
        """
        return cls(prepared.method, prepared.url, prepared.headers, prepared.body)

    def __repr__(self):
        return f"<HttpRequest {self.method} {self.url}>"


def body_bytes(body) -> bytes:
    """Normalize a request body to bytes."""
    if body is None:
        return b""
    if isinstance(body, str):
        return body.encode("utf-8")
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    raise UnsupportedBody(f"Cannot sign or verify a streamed request body of type {type(body).__name__}")
