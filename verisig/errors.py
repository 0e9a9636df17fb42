"""
HTTP Signature Errors

This module defines the exceptions raised while signing and verifying
requests. Every failure stage has its own type so that callers can tell
an expired request apart from a forged or malformed one.
"""

from datetime import timedelta
from typing import Iterable, Optional


class HttpSignatureError(Exception):
    """Base class for all signing and verification failures."""

    kind = "http_signature_error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.__doc__)
        self.message = message or self.__doc__


class InvalidKey(HttpSignatureError):
    """Key material could not be parsed as an RSA key."""

    kind = "invalid_key"


class MissingHeader(HttpSignatureError):
    """A header named in the signed header list is absent from the request."""

    kind = "missing_header"

    def __init__(self, names: Iterable[str]):
        self.names = list(names)
        super().__init__(f"Request is missing signed header(s): {', '.join(self.names)}")


class MalformedSignatureHeader(HttpSignatureError):
    """The Signature header is absent or structurally invalid."""

    kind = "malformed_signature_header"


class UnsupportedAlgorithm(MalformedSignatureHeader):
    """The Signature header declares an algorithm other than rsa-sha256."""

    kind = "unsupported_algorithm"


class MissingOrInvalidDate(HttpSignatureError):
    """The Date header is absent or not a valid HTTP date."""

    kind = "missing_or_invalid_date"


class RequestTooOld(HttpSignatureError):
    """Incoming request is too old to process."""

    kind = "request_too_old"

    def __init__(self, age: timedelta, max_age: timedelta):
        self.age = age
        self.max_age = max_age
        super().__init__(
            f"Incoming request is too old to process "
            f"(age {age}, allowed {max_age})"
        )


class RequestFromFuture(HttpSignatureError):
    """The request is dated further in the future than the allowed clock skew."""

    kind = "request_from_future"

    def __init__(self, ahead: timedelta, max_skew: timedelta):
        self.ahead = ahead
        self.max_skew = max_skew
        super().__init__(
            f"Request date is {ahead} ahead of local time (allowed skew {max_skew})"
        )


class SignatureMismatch(HttpSignatureError):
    """The signature does not match the request and public key."""

    kind = "signature_mismatch"


class DigestMismatch(SignatureMismatch):
    """The Digest header does not match the request body."""

    kind = "digest_mismatch"


class UnsupportedBody(HttpSignatureError):
    """The request body is streamed and cannot be hashed in memory."""

    kind = "unsupported_body"


class OperationCancelled(HttpSignatureError):
    """The caller cancelled the operation or its deadline passed."""

    kind = "operation_cancelled"


class ActorResolutionError(HttpSignatureError):
    """The public key for a key id could not be resolved."""

    kind = "actor_resolution_failed"


class DeliveryError(HttpSignatureError):
    """A signed delivery was rejected by the remote inbox."""

    kind = "delivery_failed"

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
