"""
Signed Activity Delivery

Delivers ActivityPub activities to remote inboxes with HTTP signatures.
"""

import json
import logging
from typing import Dict, Iterable, Optional

import requests
from requests.auth import AuthBase

from ..config import VerisigConfig, load_config
from ..errors import DeliveryError
from ..signer import sign_request
from .actor import ACTIVITY_JSON

# Configure logging
logger = logging.getLogger(__name__)


class HTTPSignatureAuth(AuthBase):
    """requests auth hook that signs each prepared request."""

    def __init__(self, key_id: str, private_key_pem, header_names: Optional[Iterable[str]] = None):
        """
        Initialize auth.

        Args:
            key_id: Key ID for signature
            private_key_pem: PEM-encoded RSA private key
            header_names: Headers to sign, defaults to the signer's default set
        """
        self.key_id = key_id
        self.private_key_pem = private_key_pem
        self.header_names = list(header_names) if header_names is not None else None

    def __call__(self, prepared: requests.PreparedRequest) -> requests.PreparedRequest:
        sign_request(prepared, self.key_id, self.private_key_pem, self.header_names)
        return prepared


def deliver_activity(
    inbox_url: str,
    activity: Dict,
    key_id: str,
    private_key_pem,
    session: Optional[requests.Session] = None,
    timeout: float = 10,
    header_names: Optional[Iterable[str]] = None,
    config: Optional[VerisigConfig] = None
) -> requests.Response:
    """
    Deliver an activity to a remote inbox.

    Args:
        inbox_url: Target inbox URL
        activity: Activity to deliver
        key_id: Key ID of the sending actor
        private_key_pem: Sending actor's private key
        session: Optional requests session
        timeout: Request timeout in seconds
        header_names: Headers to sign, defaults to the configured signed headers
        config: Configuration supplying defaults

    Returns:
        The inbox response

    Raises:
        DeliveryError: If the inbox responds with a non-2xx status
    """
    config = config or load_config()
    if header_names is None:
        header_names = config.signed_headers
    session = session or requests.Session()
    body = json.dumps(activity).encode("utf-8")

    response = session.post(
        inbox_url,
        data=body,
        headers={"Content-Type": ACTIVITY_JSON},
        auth=HTTPSignatureAuth(key_id, private_key_pem, header_names),
        timeout=timeout
    )

    if not 200 <= response.status_code < 300:
        logger.error(f"Failed to deliver activity to {inbox_url}: {response.status_code} {response.text}")
        raise DeliveryError(
            f"Inbox {inbox_url} rejected activity with status {response.status_code}",
            status_code=response.status_code
        )

    logger.info(f"Successfully delivered activity to {inbox_url}")
    return response
