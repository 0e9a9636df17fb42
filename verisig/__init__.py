"""
verisig: HTTP Signatures for federated servers

Signs outgoing and verifies incoming server-to-server requests using
RSA-SHA256 request signatures, as exchanged by ActivityPub servers.
"""

__version__ = "0.1.0"

from .canonical import build_signing_string
from .context import CallContext
from .errors import (
    ActorResolutionError,
    DeliveryError,
    DigestMismatch,
    HttpSignatureError,
    InvalidKey,
    MalformedSignatureHeader,
    MissingHeader,
    MissingOrInvalidDate,
    OperationCancelled,
    RequestFromFuture,
    RequestTooOld,
    SignatureMismatch,
    UnsupportedAlgorithm,
    UnsupportedBody,
)
from .keys import generate_rsa_key_pair
from .request import HttpRequest
from .signature import SignatureParams, parse_signature_header
from .signer import sign_request
from .verifier import req_has_valid_signature, verify_request

__all__ = [
    'ActorResolutionError',
    'CallContext',
    'DeliveryError',
    'DigestMismatch',
    'HttpRequest',
    'HttpSignatureError',
    'InvalidKey',
    'MalformedSignatureHeader',
    'MissingHeader',
    'MissingOrInvalidDate',
    'OperationCancelled',
    'RequestFromFuture',
    'RequestTooOld',
    'SignatureMismatch',
    'SignatureParams',
    'UnsupportedAlgorithm',
    'UnsupportedBody',
    'build_signing_string',
    'generate_rsa_key_pair',
    'parse_signature_header',
    'req_has_valid_signature',
    'sign_request',
    'verify_request',
]
