"""
ActivityPub Module

Federation-facing glue around the signature core: actor key resolution,
signed delivery and inbox verification.
"""

from .actor import ActorKeyResolver, public_key_document, verify_actor_request
from .delivery import HTTPSignatureAuth, deliver_activity
from .inbox import SignedRequestVerifier

__all__ = [
    'ActorKeyResolver',
    'HTTPSignatureAuth',
    'SignedRequestVerifier',
    'deliver_activity',
    'public_key_document',
    'verify_actor_request',
]
