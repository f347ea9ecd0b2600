"""Rewrite inbound edge requests so they target the origin."""

import httpx

from core.config import OriginTarget
from core.exceptions import ConfigurationError, MalformedURLError
from core.headers import HeaderPolicy
from core.request_types import InboundRequest, RewrittenRequest

BODYLESS_METHODS = frozenset({"GET", "HEAD"})


class RequestRewriter:
    """Point requests at a fixed origin host and scheme.

    Holds only read-only configuration, so one instance is shared by every
    concurrent request.
    """

    def __init__(self, origin: OriginTarget, policy: HeaderPolicy) -> None:
        if not origin.host:
            raise ConfigurationError("origin host is not configured")
        try:
            base = httpx.URL(f"{origin.scheme}://{origin.host}")
        except httpx.InvalidURL as e:
            raise ConfigurationError(f"invalid origin host {origin.host!r}: {e}") from e
        self._origin = origin
        self._origin_host = base.host
        self._origin_port = base.port
        self._policy = policy

    @property
    def origin(self) -> OriginTarget:
        return self._origin

    def rewrite(self, inbound: InboundRequest) -> RewrittenRequest:
        """Swap scheme and host; path, query and fragment are kept as parsed."""
        url = self.rewrite_url(inbound.url)
        method = inbound.method.upper()
        with_body = method not in BODYLESS_METHODS
        headers = self._policy.build_origin_headers(
            inbound.headers,
            self._origin.host,
            with_body=with_body,
        )
        return RewrittenRequest(
            method=method,
            url=url,
            headers=headers,
            body=inbound.body if with_body else None,
        )

    def rewrite_url(self, raw_url: str) -> httpx.URL:
        try:
            url = httpx.URL(raw_url)
            # Userinfo is dropped; httpx would turn it into an Authorization header.
            return url.copy_with(
                scheme=self._origin.scheme,
                username=None,
                password=None,
                host=self._origin_host,
                port=self._origin_port,
            )
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise MalformedURLError(str(e) or "invalid URL") from e
