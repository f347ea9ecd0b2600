"""Real-time CLI dashboard for proxy monitoring."""

from datetime import datetime
from pathlib import Path
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import submit_log, write_cli_log, write_request_log

console = Console()

STATUS_STYLES = {"2xx": "green", "3xx": "cyan", "4xx": "yellow", "5xx": "red"}


class RequestInfo:
    """Info about a single relayed request."""

    def __init__(self, method: str, path: str, status: int, elapsed: float, timestamp: datetime):
        self.method = method
        self.path = path[:60] + "..." if len(path) > 60 else path
        self.status = status
        self.elapsed_ms = elapsed * 1000
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing relayed traffic and origin errors."""

    def __init__(self, config: Config):
        self.config = config
        self.log_root = Path(config.logging.log_dir)
        self._lock = Lock()
        self._recent: list[RequestInfo] = []
        self._max_recent = 10
        self._status_count = {"2xx": 0, "3xx": 0, "4xx": 0, "5xx": 0}
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def log_forward(
        self,
        method: str,
        inbound_url: str,
        origin_url: str,
        headers: list[tuple[str, str]],
    ) -> None:
        """Record a request about to be sent to the origin."""
        if self.config.logging.request_logs:
            submit_log(
                write_request_log,
                method,
                inbound_url,
                origin_url,
                headers,
                log_root=self.log_root,
            )

    def log_relay(
        self,
        method: str,
        path: str,
        status: int,
        *,
        elapsed: float,
    ) -> None:
        """Record an origin response being relayed to the caller."""
        with self._lock:
            status_class = f"{status // 100}xx"
            if status_class in self._status_count:
                self._status_count[status_class] += 1
            info = RequestInfo(method, path, status, elapsed, datetime.now())
            self._recent.insert(0, info)
            self._recent = self._recent[: self._max_recent]
            self._refresh()

        submit_log(
            write_cli_log,
            "RELAY",
            f"{method} {path}",
            log_root=self.log_root,
            status=status,
            elapsed_ms=f"{elapsed * 1000:.1f}",
        )

    def log_error(self, kind: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{kind} {status}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
        submit_log(write_cli_log, "ERROR", message[:200], log_root=self.log_root, kind=kind, status=status)

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_requests_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("Host Rewrite Proxy", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Origin: {self.config.origin.scheme}://{self.config.origin.host}", style="blue")
        for status_class, count in self._status_count.items():
            stats.append("  |  ")
            stats.append(f"{status_class}: {count}", style=STATUS_STYLES[status_class])
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_requests_panel(self) -> Panel:
        """Build recent requests panel."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Method", width=7)
            table.add_column("Path", ratio=3)
            table.add_column("Status", width=6)
            table.add_column("ms", justify="right", width=8)

            for req in self._recent:
                style = STATUS_STYLES.get(f"{req.status // 100}xx", "")
                table.add_row(
                    req.timestamp.strftime("%H:%M:%S"),
                    req.method,
                    req.path,
                    Text(str(req.status), style=style),
                    f"{req.elapsed_ms:.0f}",
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Recent Requests[/blue]", border_style="blue")

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            content = Text(
                f"Listening on http://{self.config.proxy.host}:{self.config.proxy.port}",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")
