"""
HTTP Signature Verification

Verifies the signature on an incoming request against a supplied public
key. Stages run in a fixed order, cheapest first: the Signature header is
parsed, the Date header is checked against the freshness window, and only
then is any cryptographic work done. Each stage fails with its own error
type.
"""

import base64
import binascii
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding

from .canonical import build_signing_string, header_value
from .context import CallContext, check_context
from .digest import verify_digest
from .errors import (
    HttpSignatureError,
    MalformedSignatureHeader,
    RequestFromFuture,
    RequestTooOld,
    SignatureMismatch,
)
from .httpdate import parse_http_date
from .keys import load_public_key
from .request import body_bytes
from .signature import SignatureParams, extract_signature_header, parse_signature_header

# Configure logging
logger = logging.getLogger(__name__)


def check_freshness(
    date: datetime,
    max_age_hours: float,
    now: Optional[datetime] = None,
    max_clock_skew: Optional[timedelta] = None
):
    """
    Enforce the freshness window on a request date.

    Args:
        date: Parsed Date header (timezone-aware)
        max_age_hours: How many hours in the past the date may lie
        now: Current time, defaults to the system clock
        max_clock_skew: How far in the future the date may lie; None disables the check

    Raises:
        RequestTooOld: If the request is older than ``max_age_hours``
        RequestFromFuture: If the request is dated beyond ``max_clock_skew``
    """
    now = now or datetime.now(timezone.utc)
    max_age = timedelta(hours=max_age_hours)
    age = now - date
    if age > max_age:
        raise RequestTooOld(age, max_age)
    if max_clock_skew is not None and -age > max_clock_skew:
        raise RequestFromFuture(-age, max_clock_skew)


def preflight(
    request,
    max_age_hours: float,
    now: Optional[datetime] = None,
    max_clock_skew: Optional[timedelta] = None
) -> SignatureParams:
    """
    Run the checks that need no key material.

    Parses the Signature header and enforces the freshness window. Callers
    that have to fetch the sender's key should run this first so that
    stale or malformed requests never trigger a fetch.

    Returns:
        Parsed signature parameters

    Raises:
        MalformedSignatureHeader: If the Signature header is absent or invalid
        MissingOrInvalidDate: If the Date header is absent or invalid
        RequestTooOld: If the request is outside the freshness window
        RequestFromFuture: If the request is dated beyond the allowed skew
    """
    raw = extract_signature_header(request.headers)
    if raw is None:
        raise MalformedSignatureHeader("Request has no Signature header")
    params = parse_signature_header(raw)

    date = parse_http_date(header_value(request.headers, "date"))
    check_freshness(date, max_age_hours, now=now, max_clock_skew=max_clock_skew)
    return params


def verify_request(
    request,
    public_key_pem,
    max_age_hours: float,
    ctx: Optional[CallContext] = None,
    max_clock_skew: Optional[timedelta] = None,
    now: Optional[datetime] = None
) -> SignatureParams:
    """
    Verify the HTTP signature on a request.

    Args:
        request: Object exposing ``method``, ``url``, ``headers`` and optionally ``body``
        public_key_pem: PEM-encoded RSA public key of the declared signer
        max_age_hours: Freshness window in hours
        ctx: Optional cancellation context
        max_clock_skew: Optional tolerance for future-dated requests
        now: Current time, defaults to the system clock

    Returns:
        The verified signature parameters

    Raises:
        HttpSignatureError: A subclass identifying the failed stage
    """
    params = preflight(request, max_age_hours, now=now, max_clock_skew=max_clock_skew)

    check_context(ctx)
    key = load_public_key(public_key_pem)
    signing_string = build_signing_string(request, params.headers)

    if "digest" in params.headers:
        verify_digest(header_value(request.headers, "digest"), body_bytes(getattr(request, "body", None)))

    try:
        signature = base64.b64decode(params.signature, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedSignatureHeader("Signature is not valid base64") from e

    try:
        key.verify(
            signature,
            signing_string.encode("utf-8"),
            padding.PKCS1v15(),
            hashes.SHA256()
        )
    except InvalidSignature as e:
        raise SignatureMismatch(f"Signature from {params.key_id} does not match the request") from e

    logger.debug(f"Verified signature from {params.key_id} on {request.method} {request.url}")
    return params


def req_has_valid_signature(
    request,
    public_key_pem,
    max_age_hours: float,
    ctx: Optional[CallContext] = None,
    max_clock_skew: Optional[timedelta] = None,
    now: Optional[datetime] = None
) -> Tuple[bool, Optional[HttpSignatureError]]:
    """
    Check a request's signature and report the outcome.

    Same stages as :func:`verify_request`. The returned error is the
    authoritative signal; ``valid`` is only True when it is None.

    Returns:
        ``(True, None)`` on success, ``(False, error)`` otherwise
    """
    try:
        verify_request(
            request,
            public_key_pem,
            max_age_hours,
            ctx=ctx,
            max_clock_skew=max_clock_skew,
            now=now
        )
    except HttpSignatureError as e:
        logger.info(f"Rejected signature on {request.method} {request.url}: {e.kind}: {e}")
        return False, e
    return True, None
