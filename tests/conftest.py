from unittest.mock import Mock

import httpx
import pytest

from core.config import Config, HeaderSettings, OriginTarget
from core.headers import HeaderPolicy
from core.rewrite import RequestRewriter
from services.relay_service import RelayService
from services.upstream import UpstreamClient

ORIGIN_HOST = "origin.example.amazonaws.com"
PUBLIC_HOST = "static.example.co.in"


@pytest.fixture
def origin():
    return OriginTarget(host=ORIGIN_HOST, scheme="http")


@pytest.fixture
def policy():
    return HeaderPolicy.from_settings(HeaderSettings())


@pytest.fixture
def rewriter(origin, policy):
    return RequestRewriter(origin, policy)


@pytest.fixture
def config(tmp_path):
    return Config.model_validate(
        {
            "origin": {"host": ORIGIN_HOST, "scheme": "http"},
            "logging": {"log_dir": str(tmp_path / "logs")},
        }
    )


@pytest.fixture
def logger():
    """Stand-in for the dashboard; records every logging call."""
    return Mock()


@pytest.fixture
def make_relay_service(rewriter, policy, logger):
    """Build a RelayService whose origin is an httpx.MockTransport handler."""

    def _make(handler, timeout=5.0):
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        upstream = UpstreamClient(client, httpx.Timeout(timeout))
        return RelayService(rewriter=rewriter, upstream=upstream, policy=policy, logger=logger)

    return _make

