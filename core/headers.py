"""Header policy for origin-bound requests and relayed responses."""

from collections.abc import Iterable
from dataclasses import dataclass

from core.config import HeaderSettings

# Framing headers that only describe a body; meaningless once the body is dropped.
BODY_FRAMING_HEADERS = frozenset({"content-length", "transfer-encoding"})


@dataclass(frozen=True)
class HeaderPolicy:
    """Case-insensitive header names treated specially by the proxy."""

    excluded_request_headers: frozenset[str]
    excluded_response_headers: frozenset[str]

    @classmethod
    def from_settings(cls, settings: HeaderSettings) -> "HeaderPolicy":
        return cls(
            excluded_request_headers=frozenset(h.lower() for h in settings.excluded_request_headers),
            excluded_response_headers=frozenset(h.lower() for h in settings.excluded_response_headers),
        )

    def build_origin_headers(
        self,
        headers: Iterable[tuple[str, str]],
        origin_host: str,
        *,
        with_body: bool = True,
    ) -> list[tuple[str, str]]:
        """Copy inbound headers in order, then pin Host to the origin.

        Host is always stripped from the copy, even if the exclusion set omits
        it, so the pinned value is the only one sent.
        """
        upstream: list[tuple[str, str]] = []
        for key, value in headers:
            key_lower = key.lower()
            if key_lower == "host" or key_lower in self.excluded_request_headers:
                continue
            if not with_body and key_lower in BODY_FRAMING_HEADERS:
                continue
            upstream.append((key, value))
        upstream.append(("host", origin_host))
        return upstream

    def build_relay_headers(self, headers: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
        """Pass through origin response headers minus the excluded set."""
        return [
            (key, value)
            for key, value in headers
            if key.lower() not in self.excluded_response_headers
        ]
