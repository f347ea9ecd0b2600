import pytest

from core.config import HeaderSettings
from core.headers import HeaderPolicy

ORIGIN = "origin.example.amazonaws.com"


@pytest.fixture
def policy():
    return HeaderPolicy.from_settings(HeaderSettings())


class TestBuildOriginHeaders:
    def test_edge_headers_stripped(self, policy):
        inbound = [
            ("Host", "static.example.co.in"),
            ("CF-Ray", "7d1a2b3c4d5e-SIN"),
            ("CF-Connecting-IP", "1.2.3.4"),
            ("Accept", "text/html"),
        ]

        result = policy.build_origin_headers(inbound, ORIGIN)

        names = [key.lower() for key, _ in result]
        assert "cf-ray" not in names
        assert "cf-connecting-ip" not in names
        assert ("Accept", "text/html") in result

    def test_exactly_one_host_pinned_last(self, policy):
        inbound = [("Host", "a.example.com"), ("host", "b.example.com"), ("Accept", "*/*")]

        result = policy.build_origin_headers(inbound, ORIGIN)

        hosts = [value for key, value in result if key.lower() == "host"]
        assert hosts == [ORIGIN]
        assert result[-1] == ("host", ORIGIN)

    def test_order_and_duplicates_preserved(self, policy):
        inbound = [
            ("Accept", "text/html"),
            ("Cookie", "a=1"),
            ("X-Trace", "t"),
            ("Cookie", "b=2"),
        ]

        result = policy.build_origin_headers(inbound, ORIGIN)

        assert result[:-1] == inbound

    def test_exclusion_is_case_insensitive_and_configurable(self):
        policy = HeaderPolicy.from_settings(
            HeaderSettings(excluded_request_headers=["X-Vercel-Id", "Fly-Client-IP"])
        )
        inbound = [
            ("x-vercel-id", "iad1::abc"),
            ("FLY-CLIENT-IP", "5.6.7.8"),
            ("CF-Ray", "kept-on-this-platform"),
        ]

        result = policy.build_origin_headers(inbound, ORIGIN)

        assert result == [("CF-Ray", "kept-on-this-platform"), ("host", ORIGIN)]

    def test_host_stripped_even_when_not_configured(self):
        policy = HeaderPolicy.from_settings(HeaderSettings(excluded_request_headers=[]))

        result = policy.build_origin_headers([("Host", "static.example.co.in")], ORIGIN)

        assert result == [("host", ORIGIN)]

    def test_body_framing_dropped_without_body(self, policy):
        inbound = [("Content-Length", "12"), ("Transfer-Encoding", "chunked"), ("Accept", "*/*")]

        result = policy.build_origin_headers(inbound, ORIGIN, with_body=False)

        assert result == [("Accept", "*/*"), ("host", ORIGIN)]

    def test_body_framing_kept_with_body(self, policy):
        result = policy.build_origin_headers([("Content-Length", "12")], ORIGIN)

        assert ("Content-Length", "12") in result


class TestBuildRelayHeaders:
    def test_hop_by_hop_removed(self, policy):
        origin_headers = [
            ("Content-Type", "text/html"),
            ("Transfer-Encoding", "chunked"),
            ("Connection", "keep-alive"),
            ("Keep-Alive", "timeout=5"),
            ("ETag", '"abc"'),
        ]

        result = policy.build_relay_headers(origin_headers)

        assert result == [("Content-Type", "text/html"), ("ETag", '"abc"')]

    def test_repeated_headers_kept(self, policy):
        origin_headers = [("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")]

        assert policy.build_relay_headers(origin_headers) == origin_headers

    def test_empty_exclusion_relays_verbatim(self):
        policy = HeaderPolicy.from_settings(HeaderSettings(excluded_response_headers=[]))
        origin_headers = [("Transfer-Encoding", "chunked"), ("Content-Type", "text/css")]

        assert policy.build_relay_headers(origin_headers) == origin_headers
