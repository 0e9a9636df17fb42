"""
HTTP Signature Generation

Signs outgoing requests for server-to-server delivery. The request's
headers are updated in place with a Signature header, plus Date, Host and
Digest when they are part of the signed set but not yet present.
"""

import base64
import logging
from typing import Dict, Iterable, List, Optional
from urllib.parse import urlsplit

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding

from .canonical import REQUEST_TARGET, build_signing_string, header_value, normalize_header_names
from .context import CallContext, check_context
from .digest import compute_digest
from .errors import MissingHeader
from .httpdate import format_http_date
from .keys import load_private_key
from .request import body_bytes
from .signature import ALGORITHM, SignatureParams

# Configure logging
logger = logging.getLogger(__name__)

MINIMUM_HEADERS = (REQUEST_TARGET, "date")


def default_header_names(request) -> List[str]:
    """
    Choose the headers to sign when the caller does not.

    ``(request-target)`` and ``date`` always; ``host`` when it is known;
    ``digest`` when the request has a body.
    """
    names = [REQUEST_TARGET]
    if header_value(request.headers, "host") is not None or urlsplit(request.url).netloc:
        names.append("host")
    names.append("date")
    if body_bytes(getattr(request, "body", None)):
        names.append("digest")
    return names


def _derived_headers(request, names: List[str]) -> Dict[str, str]:
    """
    Compute Date, Host and Digest values that are signed but absent.

    Raises:
        MissingHeader: If any other signed header is absent
    """
    derived = {}
    if "date" in names and header_value(request.headers, "date") is None:
        derived["Date"] = format_http_date()

    if "host" in names and header_value(request.headers, "host") is None:
        netloc = urlsplit(request.url).netloc
        if netloc:
            derived["Host"] = netloc

    if "digest" in names and header_value(request.headers, "digest") is None:
        derived["Digest"] = compute_digest(body_bytes(getattr(request, "body", None)))

    provided = {name.lower() for name in derived}
    missing = [
        name for name in names
        if name != REQUEST_TARGET
        and name not in provided
        and header_value(request.headers, name) is None
    ]
    if missing:
        raise MissingHeader(missing)
    return derived


def sign_request(
    request,
    key_id: str,
    private_key_pem,
    header_names: Optional[Iterable[str]] = None,
    ctx: Optional[CallContext] = None
) -> SignatureParams:
    """
    Sign a request and attach the Signature header.

    Args:
        request: Object exposing ``method``, ``url``, mutable ``headers`` and optionally ``body``
        key_id: URI identifying the signing actor's key (usually actor URL + #main-key)
        private_key_pem: PEM-encoded RSA private key
        header_names: Ordered headers to sign, defaults to :func:`default_header_names`
        ctx: Optional cancellation context

    Returns:
        The signature parameters written to the request

    Raises:
        OperationCancelled: If ``ctx`` is already cancelled or expired
        InvalidKey: If the private key cannot be parsed
        MissingHeader: If a signed header is absent and cannot be derived; the
            request is left unchanged
        UnsupportedBody: If a digest is needed for a streamed body
        ValueError: If ``key_id`` is empty or the header set lacks the minimum headers
    """
    check_context(ctx)

    if not key_id or not str(key_id).strip():
        raise ValueError("key_id must be a non-empty URI")
    key_id = str(key_id)

    if header_names is None:
        names = default_header_names(request)
    else:
        names = normalize_header_names(header_names)
        absent = [name for name in MINIMUM_HEADERS if name not in names]
        if absent:
            raise ValueError(f"Signed headers must include: {', '.join(absent)}")

    key = load_private_key(private_key_pem)

    # Headers are only touched once every signed header is known to be available
    for name, value in _derived_headers(request, names).items():
        request.headers[name] = value
    signing_string = build_signing_string(request, names)

    check_context(ctx)
    signature = key.sign(
        signing_string.encode("utf-8"),
        padding.PKCS1v15(),
        hashes.SHA256()
    )

    params = SignatureParams(
        key_id=key_id,
        algorithm=ALGORITHM,
        headers=names,
        signature=base64.b64encode(signature).decode("utf-8"),
    )
    request.headers["Signature"] = params.to_header()

    logger.debug(f"Signed {request.method} {request.url} as {key_id} over [{' '.join(names)}]")
    return params
