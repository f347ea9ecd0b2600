"""FastAPI route handlers."""

from fastapi import Request
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from core.request_types import InboundRequest, RelayedResponse
from core.rewrite import BODYLESS_METHODS


def build_inbound_request(request: Request) -> InboundRequest:
    """Capture the edge request without decoding its path or buffering its body."""
    headers = [(key.decode("latin-1"), value.decode("latin-1")) for key, value in request.headers.raw]
    method = request.method.upper()
    # Without framing headers the request carries no body at all.
    has_body = "content-length" in request.headers or "transfer-encoding" in request.headers
    return InboundRequest(
        method=method,
        url=_inbound_url(request),
        headers=headers,
        body=request.stream() if has_body and method not in BODYLESS_METHODS else None,
    )


def _inbound_url(request: Request) -> str:
    """Rebuild the URL from the raw ASGI path so percent-encoding survives."""
    raw_path = request.scope.get("raw_path")
    path = raw_path.split(b"?", 1)[0].decode("latin-1") if raw_path else request.url.path
    query = request.scope.get("query_string", b"").decode("latin-1")
    url = f"{request.url.scheme}://{request.url.netloc}{path}"
    if query:
        url += f"?{query}"
    return url


def to_starlette_response(relayed: RelayedResponse) -> StreamingResponse:
    """Wrap a relayed response, keeping repeated headers such as Set-Cookie."""
    # The body generator closes the origin response when it finishes; the
    # background task covers bodies that were never iterated. aclose is idempotent.
    response = StreamingResponse(
        relayed.body,
        status_code=relayed.status_code,
        background=BackgroundTask(relayed.aclose) if relayed.aclose else None,
    )
    response.raw_headers = [
        (key.lower().encode("latin-1"), value.encode("latin-1")) for key, value in relayed.headers
    ]
    return response


async def handle_proxy(request: Request) -> StreamingResponse:
    """Relay any request under the bound domain to the origin."""
    relay_service = request.app.state.relay_service
    relayed = await relay_service.handle(build_inbound_request(request))
    return to_starlette_response(relayed)
