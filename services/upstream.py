"""HTTP forwarding to the origin."""

import httpx

from core.exceptions import OriginTimeoutError, OriginUnreachableError
from core.request_types import RewrittenRequest


class UpstreamClient:
    """Send rewritten requests to the origin over a shared connection pool."""

    def __init__(self, client: httpx.AsyncClient, timeout: httpx.Timeout) -> None:
        self._client = client
        self._timeout = timeout

    async def send(self, rewritten: RewrittenRequest) -> httpx.Response:
        """Issue the request once and return the response with its body unread.

        The request is built directly rather than through the client so the
        client's default headers (User-Agent, Accept, ...) are not mixed into
        the caller's header set. The caller owns the returned response and
        must close it.
        """
        request = httpx.Request(
            rewritten.method,
            rewritten.url,
            headers=rewritten.headers,
            content=rewritten.body,
            extensions={"timeout": self._timeout.as_dict()},
        )
        try:
            return await self._client.send(request, stream=True, follow_redirects=False)
        except httpx.TimeoutException as e:
            raise OriginTimeoutError(origin=rewritten.url.host) from e
        except httpx.RequestError as e:
            raise OriginUnreachableError(_describe(e), origin=rewritten.url.host) from e

    async def aclose(self) -> None:
        await self._client.aclose()


def _describe(error: httpx.RequestError) -> str:
    """Exception text without the request URL; falls back to the class name."""
    return str(error) or type(error).__name__
