from unittest.mock import Mock

import pytest

from ui import dashboard as dashboard_module
from ui.dashboard import Dashboard
from ui.log_utils import write_cli_log, write_request_log


@pytest.fixture
def submitted(monkeypatch):
    fake = Mock()
    monkeypatch.setattr(dashboard_module, "submit_log", fake)
    return fake


@pytest.fixture
def dashboard(config, submitted):
    return Dashboard(config)


def test_relay_counts_by_status_class(dashboard):
    dashboard.log_relay("GET", "/index.html", 200, elapsed=0.01)
    dashboard.log_relay("GET", "/old", 301, elapsed=0.01)
    dashboard.log_relay("GET", "/missing", 404, elapsed=0.01)
    dashboard.log_relay("GET", "/missing-too", 404, elapsed=0.01)

    assert dashboard._status_count == {"2xx": 1, "3xx": 1, "4xx": 2, "5xx": 0}


def test_recent_requests_capped(dashboard):
    for i in range(15):
        dashboard.log_relay("GET", f"/page-{i}.html", 200, elapsed=0.001)

    assert len(dashboard._recent) == 10
    assert dashboard._recent[0].path == "/page-14.html"


def test_relay_written_to_cli_log(dashboard, submitted):
    dashboard.log_relay("GET", "/index.html", 200, elapsed=0.0123)

    args, kwargs = submitted.call_args
    assert args[0] is write_cli_log
    assert args[1:] == ("RELAY", "GET /index.html")
    assert kwargs["status"] == 200
    assert kwargs["elapsed_ms"] == "12.3"


def test_errors_capped_and_truncated(dashboard):
    for i in range(5):
        dashboard.log_error("OriginUnreachableError", 500, f"error {i} " + "x" * 80)

    assert len(dashboard._errors) == 3
    assert dashboard._errors[0].startswith("OriginUnreachableError 500: error 4")
    assert dashboard._errors[0].endswith("...")


def test_forward_logged_only_when_enabled(config, submitted):
    Dashboard(config).log_forward("GET", "https://a/b", "http://o/b", [("host", "o")])
    submitted.assert_not_called()

    enabled = config.model_copy(
        update={"logging": config.logging.model_copy(update={"request_logs": True})}
    )
    Dashboard(enabled).log_forward("GET", "https://a/b", "http://o/b", [("host", "o")])

    assert submitted.call_args.args[0] is write_request_log


def test_layout_renders_with_data(dashboard):
    dashboard.log_relay("POST", "/api/" + "x" * 100, 502, elapsed=1.5)
    dashboard.log_error("OriginTimeoutError", 500, "timed out")

    layout = dashboard._build_layout()

    assert layout["header"] is not None
    assert dashboard._recent[0].path.endswith("...")
