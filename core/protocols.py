"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard)."""

    def log_forward(
        self,
        method: str,
        inbound_url: str,
        origin_url: str,
        headers: list[tuple[str, str]],
    ) -> None: ...
    def log_relay(
        self,
        method: str,
        path: str,
        status: int,
        *,
        elapsed: float,
    ) -> None: ...
    def log_error(self, kind: str, status: int, message: str) -> None: ...
