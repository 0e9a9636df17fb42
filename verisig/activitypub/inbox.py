"""
Inbox Signature Verification

FastAPI dependency that rejects inbox deliveries whose HTTP signature is
missing, malformed, stale or forged.

    verify_signature = SignedRequestVerifier()

    @app.post("/users/{username}/inbox")
    async def inbox(activity: dict, signature: SignatureParams = Depends(verify_signature)):
        ...
"""

import logging
from typing import Optional

from fastapi import HTTPException, Request
from fastapi.concurrency import run_in_threadpool

from ..config import VerisigConfig, load_config
from ..errors import HttpSignatureError
from ..request import HttpRequest
from ..signature import SignatureParams
from .actor import ActorKeyResolver, verify_actor_request

# Configure logging
logger = logging.getLogger(__name__)


async def to_http_request(request: Request) -> HttpRequest:
    """
    Copy a Starlette request into an :class:`HttpRequest`.

    Repeated headers are joined with ", ". The URL keeps the path exactly as
    it arrived on the wire, percent-encoding included, since that is what
    the sender signed.
    """
    headers = {}
    for name in request.headers.keys():
        if name not in headers:
            headers[name] = ", ".join(request.headers.getlist(name))
    body = await request.body()
    return HttpRequest(request.method, raw_url(request), headers, body)


def raw_url(request: Request) -> str:
    """Rebuild the request URL from the undecoded ``raw_path`` and query string."""
    raw_path = request.scope.get("raw_path")
    if not raw_path:
        return str(request.url)

    url = f"{request.url.scheme}://{request.url.netloc}{raw_path.decode('latin-1')}"
    query = request.scope.get("query_string", b"")
    if query and b"?" not in raw_path:
        url += f"?{query.decode('latin-1')}"
    return url


class SignedRequestVerifier:
    """Verifies HTTP signatures on incoming requests."""

    def __init__(
        self,
        resolver: Optional[ActorKeyResolver] = None,
        config: Optional[VerisigConfig] = None
    ):
        """
        Initialize verifier.

        Args:
            resolver: Key resolver, defaults to an :class:`ActorKeyResolver`
            config: Configuration, defaults to :func:`verisig.config.load_config`
        """
        self.config = config or load_config()
        self.resolver = resolver or ActorKeyResolver(config=self.config)

    async def __call__(self, request: Request) -> SignatureParams:
        """
        Verify the signature on ``request``.

        Raises:
            HTTPException: 401 with the failure kind if verification fails
        """
        http_request = await to_http_request(request)
        try:
            return await run_in_threadpool(
                verify_actor_request,
                http_request,
                self.config.max_age_hours,
                resolver=self.resolver,
                config=self.config
            )
        except HttpSignatureError as e:
            logger.warning(f"Rejected {request.method} {request.url.path}: {e.kind}: {e}")
            raise HTTPException(
                status_code=401,
                detail={"error": e.kind, "message": str(e)}
            ) from e
