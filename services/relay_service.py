"""Per-request orchestration: rewrite, forward, relay."""

import time
from collections.abc import AsyncIterator

import httpx

from core.exceptions import ProxyError
from core.headers import HeaderPolicy
from core.protocols import RequestLogger
from core.request_types import InboundRequest, RelayedResponse
from core.rewrite import RequestRewriter
from services.upstream import UpstreamClient


class RelayService:
    """Turn every inbound request into exactly one relayed response.

    Nothing is kept between calls; concurrent requests only share the
    read-only rewriter and policy and the upstream connection pool.
    """

    def __init__(
        self,
        rewriter: RequestRewriter,
        upstream: UpstreamClient,
        policy: HeaderPolicy,
        logger: RequestLogger,
    ) -> None:
        self._rewriter = rewriter
        self._upstream = upstream
        self._policy = policy
        self._logger = logger

    async def handle(self, inbound: InboundRequest) -> RelayedResponse:
        """Forward the request and relay the origin response; never raises."""
        started = time.monotonic()
        try:
            rewritten = self._rewriter.rewrite(inbound)
            self._logger.log_forward(
                rewritten.method, inbound.url, str(rewritten.url), rewritten.headers
            )
            response = await self._upstream.send(rewritten)
        except ProxyError as e:
            self._logger.log_error(type(e).__name__, 500, str(e))
            return RelayedResponse.error(e.diagnostic)
        except Exception as e:
            self._logger.log_error(type(e).__name__, 500, repr(e))
            return RelayedResponse.error(f"Worker Error: internal error ({type(e).__name__})")

        try:
            relayed = RelayedResponse(
                status_code=response.status_code,
                reason_phrase=response.reason_phrase,
                headers=self._policy.build_relay_headers(_decode_headers(response.headers.raw)),
                body=self._relay_body(response),
                aclose=response.aclose,
            )
            self._logger.log_relay(
                rewritten.method,
                rewritten.url.raw_path.decode("ascii", errors="replace"),
                response.status_code,
                elapsed=time.monotonic() - started,
            )
        except Exception as e:
            await response.aclose()
            self._logger.log_error(type(e).__name__, 500, repr(e))
            return RelayedResponse.error(f"Worker Error: internal error ({type(e).__name__})")
        return relayed

    async def _relay_body(self, response: httpx.Response) -> AsyncIterator[bytes]:
        """Stream raw origin bytes; content encodings are passed through untouched."""
        try:
            if response.is_stream_consumed:
                # Body already loaded by the transport; its stream still yields the raw bytes.
                async for chunk in response.stream:
                    yield chunk
            else:
                async for chunk in response.aiter_raw():
                    yield chunk
        except Exception as e:
            # Headers are already on the wire; all we can do is end the body early.
            self._logger.log_error(type(e).__name__, response.status_code, f"body stream aborted: {e}")
        finally:
            await response.aclose()


def _decode_headers(raw: list[tuple[bytes, bytes]]) -> list[tuple[str, str]]:
    return [(key.decode("latin-1"), value.decode("latin-1")) for key, value in raw]
