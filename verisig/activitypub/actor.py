"""
Actor Key Resolution

Fetches the actor document referenced by a signature's keyId and extracts
the PEM-encoded public key, and builds the publicKey block that local
actors publish. Keys are fetched on every call; nothing is cached.
"""

import logging
from typing import Dict, List, Optional
from urllib.parse import urldefrag

import requests

from ..config import VerisigConfig, load_config
from ..errors import ActorResolutionError
from ..signature import SignatureParams
from ..verifier import preflight, verify_request

# Configure logging
logger = logging.getLogger(__name__)

ACTIVITY_JSON = "application/activity+json"
ACCEPT = f'{ACTIVITY_JSON}, application/ld+json; profile="https://www.w3.org/ns/activitystreams"'


def public_key_document(actor_id: str, public_key_pem: str, key_name: str = "main-key") -> Dict:
    """
    Build the publicKey block for an actor profile.

    Args:
        actor_id: Actor URL
        public_key_pem: PEM-encoded public key
        key_name: Fragment identifying the key

    Returns:
        Dict with id, owner and publicKeyPem
    """
    return {
        "id": f"{actor_id}#{key_name}",
        "owner": actor_id,
        "publicKeyPem": public_key_pem
    }


def _key_candidates(document: Dict) -> List[Dict]:
    if "publicKeyPem" in document:
        return [document]
    keys = document.get("publicKey")
    if isinstance(keys, dict):
        return [keys]
    if isinstance(keys, list):
        return [key for key in keys if isinstance(key, dict)]
    return []


def find_public_key(document: Dict, key_id: str) -> Optional[str]:
    """
    Pick the PEM matching ``key_id`` out of an actor or key document.

    An exact id match wins; otherwise a key whose fragment matches the
    key id's fragment is accepted.
    """
    candidates = _key_candidates(document)
    for key in candidates:
        if key.get("id") == key_id and key.get("publicKeyPem"):
            return key["publicKeyPem"]

    fragment = urldefrag(key_id).fragment
    if fragment:
        for key in candidates:
            if urldefrag(key.get("id", "")).fragment == fragment and key.get("publicKeyPem"):
                return key["publicKeyPem"]
    return None


class ActorKeyResolver:
    """Resolves signature key ids to PEM public keys over HTTP."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        config: Optional[VerisigConfig] = None
    ):
        """
        Initialize resolver.

        Args:
            session: Optional requests session to fetch with
            timeout: Fetch timeout in seconds
            user_agent: User agent string for requests
            config: Configuration supplying defaults
        """
        config = config or load_config()
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else config.actor_fetch_timeout
        self.user_agent = user_agent or config.user_agent

    def fetch_document(self, url: str) -> Dict:
        """
        Fetch an actor document.

        Raises:
            ActorResolutionError: On network errors, non-2xx responses or non-JSON bodies
        """
        logger.info(f"Fetching actor document {url}")
        try:
            response = self.session.get(
                url,
                headers={"Accept": ACCEPT, "User-Agent": self.user_agent},
                timeout=self.timeout
            )
            response.raise_for_status()
            document = response.json()
        except requests.RequestException as e:
            logger.error(f"Failed to fetch actor document {url}: {e}")
            raise ActorResolutionError(f"Failed to fetch actor document {url}: {e}") from e
        except ValueError as e:
            logger.error(f"Actor document {url} is not JSON: {e}")
            raise ActorResolutionError(f"Actor document {url} is not JSON") from e

        if not isinstance(document, dict):
            raise ActorResolutionError(f"Actor document {url} is not a JSON object")
        return document

    def resolve(self, key_id: str) -> str:
        """
        Get the public key PEM for a key id.

        Args:
            key_id: Key ID URL, usually actor URL + #main-key

        Returns:
            PEM-encoded public key

        Raises:
            ActorResolutionError: If the key cannot be fetched or is not published
        """
        url = urldefrag(key_id).url
        if not url.startswith(("http://", "https://")):
            raise ActorResolutionError(f"Key id is not an HTTP(S) URL: {key_id}")

        document = self.fetch_document(url)
        public_key = find_public_key(document, key_id)
        if not public_key:
            logger.error(f"Actor document {url} has no public key {key_id}")
            raise ActorResolutionError(f"Actor document {url} has no public key {key_id}")
        return public_key

    __call__ = resolve


def verify_actor_request(
    request,
    max_age_hours: Optional[float] = None,
    resolver: Optional[ActorKeyResolver] = None,
    config: Optional[VerisigConfig] = None,
    **kwargs
) -> SignatureParams:
    """
    Verify a request signed by a remote actor.

    Stale or malformed requests are rejected before the key is fetched.

    Args:
        request: Incoming request
        max_age_hours: Freshness window, defaults to the configured value
        resolver: Key resolver, defaults to an :class:`ActorKeyResolver`
        config: Configuration supplying defaults
        **kwargs: Passed through to :func:`verisig.verifier.verify_request`

    Returns:
        The verified signature parameters

    Raises:
        HttpSignatureError: A subclass identifying the failed stage
    """
    config = config or load_config()
    if max_age_hours is None:
        max_age_hours = config.max_age_hours
    kwargs.setdefault("max_clock_skew", config.max_clock_skew)
    resolver = resolver or ActorKeyResolver(config=config)

    params = preflight(
        request,
        max_age_hours,
        now=kwargs.get("now"),
        max_clock_skew=kwargs["max_clock_skew"]
    )
    public_key_pem = resolver(params.key_id)
    return verify_request(request, public_key_pem, max_age_hours, **kwargs)
