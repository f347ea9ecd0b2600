"""Shared request and response data types."""

from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from http import HTTPStatus

import httpx

Headers = list[tuple[str, str]]
Body = bytes | AsyncIterable[bytes] | None


@dataclass(frozen=True)
class InboundRequest:
    """A request as delivered by the edge, before rewriting."""

    method: str
    url: str
    headers: Headers
    body: Body = None


@dataclass(frozen=True)
class RewrittenRequest:
    """Prepared data for the origin request."""

    method: str
    url: httpx.URL
    headers: Headers
    body: Body = None


@dataclass(frozen=True)
class RelayedResponse:
    """Response handed back to the caller."""

    status_code: int
    reason_phrase: str
    headers: Headers
    body: AsyncIterator[bytes]
    aclose: Callable[[], Awaitable[None]] | None = None

    @classmethod
    def error(cls, message: str, status_code: int = 500) -> "RelayedResponse":
        """Build a plain-text error response carrying a diagnostic message."""
        content = message.encode("utf-8")
        headers = [
            ("content-type", "text/plain; charset=utf-8"),
            ("content-length", str(len(content))),
        ]
        return cls(
            status_code=status_code,
            reason_phrase=HTTPStatus(status_code).phrase,
            headers=headers,
            body=_single_chunk(content),
        )


async def _single_chunk(content: bytes) -> AsyncIterator[bytes]:
    yield content
