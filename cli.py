"""CLI entry point for host-rewrite-proxy."""

import sys
from datetime import datetime
from pathlib import Path

import httpx
from rich.console import Console

from app import create_app
from core.config import CONFIG_FILE, Config, load_config
from core.exceptions import ConfigurationError
from ui.dashboard import Dashboard
from ui.log_utils import clear_logs, shutdown_log_executor, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    config = load_config()

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg == "--check":
            sys.exit(check_origin(config))

        if arg == "--config":
            console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

    # Validate origin (required for all server modes)
    if not config.origin.host:
        console.print("[red][ERROR][/red] Origin host not configured!")
        console.print(f"[dim]Edit {CONFIG_FILE} and set origin.host[/dim]")
        sys.exit(1)

    log_root = Path(config.logging.log_dir)
    clear_logs(log_root)
    dashboard = Dashboard(config)

    try:
        app = create_app(config, dashboard)
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        sys.exit(1)

    import uvicorn

    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="warning",
        timeout_keep_alive=config.proxy.keep_alive_timeout,
    )
    server = uvicorn.Server(uvicorn_config)

    if config.proxy.dashboard:
        dashboard.start()
    start_time = datetime.now()
    write_cli_log(
        "STARTUP",
        "Proxy started",
        log_root=log_root,
        port=config.proxy.port,
        origin=f"{config.origin.scheme}://{config.origin.host}",
    )
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        shutdown_log_executor()
        write_cli_log("SHUTDOWN", "Proxy stopped", log_root=log_root, duration=str(duration))
        dashboard.stop()


def check_origin(config: Config) -> int:
    """Send one HEAD / to the origin and report the outcome; returns an exit code."""
    origin = config.origin
    if not origin.host:
        console.print("[yellow]Origin host not configured[/yellow]")
        console.print(f"[dim]Edit {CONFIG_FILE} and set origin.host[/dim]")
        return 1

    url = f"{origin.scheme}://{origin.host}/"
    try:
        response = httpx.head(
            url,
            headers={"host": origin.host},
            timeout=httpx.Timeout(config.upstream.timeout, connect=config.upstream.connect_timeout),
        )
    except (httpx.RequestError, httpx.InvalidURL) as e:
        console.print(f"[red]Origin unreachable:[/red] {url} ({str(e) or type(e).__name__})")
        return 1

    style = "green" if response.status_code < 400 else "yellow"
    console.print(f"[{style}]{response.status_code} {response.reason_phrase}[/{style}] from {url}")
    return 0


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]Host Rewrite Proxy[/bold cyan]

Relays every request for a custom domain to a fixed origin (e.g. an
object-storage static-site endpoint), rewriting scheme and Host.

[bold]Usage:[/bold]
    host-rewrite-proxy              Start with live dashboard
    host-rewrite-proxy --check      Send HEAD / to the configured origin
    host-rewrite-proxy --config     Show config location
    host-rewrite-proxy --help       Show this help

[bold]Configuration:[/bold]
    Set origin.host and origin.scheme in the config file. Headers listed in
    headers.excluded_request_headers are never forwarded to the origin.
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
