"""Configuration models and loading."""

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

CONFIG_DIR = Path.home() / ".config" / "host-rewrite-proxy"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_EXCLUDED_REQUEST_HEADERS = ["host", "cf-ray", "cf-connecting-ip"]

# Connection-management headers; the ASGI server frames its own response.
DEFAULT_EXCLUDED_RESPONSE_HEADERS = [
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailer",
    "trailers",
    "transfer-encoding",
    "upgrade",
]


class ProxySettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8080
    keep_alive_timeout: int = 5
    dashboard: bool = True


class OriginTarget(BaseModel):
    """The fixed backend every request is rewritten to."""

    model_config = ConfigDict(frozen=True)

    host: str = ""
    scheme: Literal["http", "https"] = "http"

    @field_validator("scheme", mode="before")
    @classmethod
    def _lower_scheme(cls, value: str) -> str:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("host")
    @classmethod
    def _bare_host(cls, value: str) -> str:
        value = value.strip()
        if "://" in value or "/" in value:
            raise ValueError("origin host must be a bare host[:port], without scheme or path")
        return value


class HeaderSettings(BaseModel):
    excluded_request_headers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_REQUEST_HEADERS)
    )
    excluded_response_headers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_RESPONSE_HEADERS)
    )


class UpstreamSettings(BaseModel):
    timeout: float = 30.0
    connect_timeout: float = 10.0
    max_connections: int = 100
    max_keepalive_connections: int = 20


class LoggingSettings(BaseModel):
    log_dir: str = "logs"
    request_logs: bool = False


class Config(BaseModel):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    origin: OriginTarget = Field(default_factory=OriginTarget)
    headers: HeaderSettings = Field(default_factory=HeaderSettings)
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_config(config_file: Path = CONFIG_FILE) -> Config:
    """Load configuration from JSON file, creating default if needed."""
    if not config_file.exists():
        config_file.parent.mkdir(parents=True, exist_ok=True)
        default = Config()
        config_file.write_text(default.model_dump_json(indent=2))
        return default

    try:
        data = json.loads(config_file.read_text())
        return Config.model_validate(data)
    except (json.JSONDecodeError, ValidationError):
        # Backup corrupted config and recreate default
        backup = config_file.with_suffix(".json.bak")
        config_file.rename(backup)
        default = Config()
        config_file.write_text(default.model_dump_json(indent=2))
        return default
