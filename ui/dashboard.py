"""Real-time CLI dashboard for proxy monitoring."""

from datetime import datetime
from threading import Lock
from typing import Any

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from core.urls import normalize_base_url
from ui.log_utils import write_body_log, write_cli_log

console = Console()

METHOD_STYLES = {
    "GET": "green",
    "POST": "blue",
    "PUT": "yellow",
    "PATCH": "yellow",
    "DELETE": "red",
}


class RequestInfo:
    """Info about a single forwarded request."""

    def __init__(self, method: str, url: str, timestamp: datetime):
        self.method = method
        self.url = url[:80] + "..." if len(url) > 80 else url
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing recent forwarded requests."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._recent: list[RequestInfo] = []
        self._max_recent = 10
        self._request_count: dict[str, int] = {"forward": 0, "image": 0}
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

    def log_forward(self, method: str, url: str) -> None:
        """Log a request forwarded upstream."""
        with self._lock:
            self._request_count["forward"] += 1
            self._push(RequestInfo(method, url, datetime.now()))
            write_cli_log("FORWARD", url, method=method)
            self._refresh()

    def log_body(self, method: str, path: str, body: Any) -> None:
        """Log an outbound body selected for diagnostics."""
        with self._lock:
            write_body_log(method, path, body)
            write_cli_log("BODY", f"{method} /{path}")

    def log_image(self, url: str) -> None:
        """Log an image fetch."""
        with self._lock:
            self._request_count["image"] += 1
            self._push(RequestInfo("IMAGE", url, datetime.now()))
            write_cli_log("IMAGE", url)
            self._refresh()

    def log_error(self, route: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{route} {status}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
            write_cli_log("ERROR", message[:200], route=route, status=status)

    def _push(self, info: RequestInfo) -> None:
        self._recent.insert(0, info)
        self._recent = self._recent[: self._max_recent]

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
        stats.append("Storefront API Proxy", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Forwarded: {self._request_count['forward']}", style="blue")
        stats.append("  |  ")
        stats.append(f"Images: {self._request_count['image']}", style="magenta")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_requests_panel(self) -> Panel:
        """Build recent requests panel."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Method", width=7)
            table.add_column("Upstream URL", ratio=1)

            for info in self._recent:
                table.add_row(
                    info.timestamp.strftime("%H:%M:%S"),
                    Text(info.method, style=METHOD_STYLES.get(info.method, "magenta")),
                    info.url,
                )
            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Recent Requests[/blue]", border_style="blue")

    def _build_footer(self) -> Panel:
        """Build footer with errors and upstream info."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            content = Text(
                f"Forwarding /api/* to {normalize_base_url(self.config.upstream.base_url)}",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")
