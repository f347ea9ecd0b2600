"""Shared logging utilities."""

import json
import shutil
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_FILE_NAME = "proxy.log"

SENSITIVE_HEADER_MARKERS = ("key", "authorization", "cookie", "token")

# One writer thread keeps file I/O off the event loop and lines in order.
_log_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="proxy-log")


def write_request_log(
    method: str,
    inbound_url: str,
    origin_url: str,
    headers: list[tuple[str, str]],
    *,
    log_root: Path = LOG_ROOT,
) -> Path:
    """Write a single forwarded request log entry."""
    payload = {
        "timestamp": _utc_now(),
        "method": method,
        "inbound_url": inbound_url,
        "origin_url": origin_url,
        "headers": _redact_headers(headers),
    }
    return _write_json(log_root / "requests", payload)


def write_cli_log(
    level: str,
    message: str,
    *,
    log_root: Path = LOG_ROOT,
    **extra: Any,
) -> None:
    """Append a line to the rolling CLI log file."""
    log_file = log_root / CLI_LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
    extra_str = " ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""
    line = f"[{timestamp}] {level}: {message}"
    if extra_str:
        line += f" {extra_str}"
    line += "\n"
    with log_file.open("a") as f:
        f.write(line)


def submit_log(fn, *args: Any, **kwargs: Any) -> None:
    """Run a log writer on the background thread."""
    _log_executor.submit(fn, *args, **kwargs)


def shutdown_log_executor() -> None:
    """Flush pending log writes and stop the writer thread."""
    _log_executor.shutdown(wait=True)


def clear_logs(log_root: Path = LOG_ROOT) -> None:
    """Remove logs left over from a previous run."""
    (log_root / CLI_LOG_FILE_NAME).unlink(missing_ok=True)
    shutil.rmtree(log_root / "requests", ignore_errors=True)


def _write_json(folder: Path, payload: dict[str, Any]) -> Path:
    """Write payload to a unique JSON file in the given folder."""
    folder.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S.%fZ")
    file_path = folder / f"{timestamp}_{uuid4().hex}.json"
    file_path.write_text(json.dumps(payload, indent=2, default=str))
    return file_path


def _redact_headers(headers: list[tuple[str, str]]) -> list[tuple[str, str]]:
    """Redact sensitive headers."""
    redacted = []
    for key, value in headers:
        if any(marker in key.lower() for marker in SENSITIVE_HEADER_MARKERS):
            redacted.append((key, _mask(value)))
        else:
            redacted.append((key, value))
    return redacted


def _mask(value: str) -> str:
    if len(value) <= 10:
        return "***"
    return value[:6] + "..." + value[-4:]


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()
