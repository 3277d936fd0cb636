"""CLI entry point for storefront-proxy."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from core.config import BASE_URL_ENV, CONFIG_FILE, load_config
from core.exceptions import ConfigurationError
from ui.dashboard import Dashboard
from ui.log_utils import clear_logs, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    config = load_config()

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg == "--config":
            console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
            console.print(f"[bold]Upstream:[/bold] {config.upstream.base_url}")
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

    dashboard = Dashboard(config)
    try:
        app = create_app(config, dashboard)
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        console.print(f"[dim]Edit {CONFIG_FILE} or set {BASE_URL_ENV}[/dim]")
        sys.exit(1)

    # Clear previous logs and start dashboard
    clear_logs()

    import uvicorn

    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="warning",
    )
    server = uvicorn.Server(uvicorn_config)

    dashboard.start()
    start_time = datetime.now()
    write_cli_log("STARTUP", "Proxy started", port=config.proxy.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        dashboard.stop()


def _print_help():
    """Print help message."""
    help_text = f"""
[bold cyan]Storefront API Proxy[/bold cyan]

Forwards /api/* to the storefront backend and fetches images server-side.

[bold]Usage:[/bold]
    storefront-proxy              Start with live dashboard
    storefront-proxy --config     Show config location and upstream
    storefront-proxy --help       Show this help

[bold]Upstream:[/bold]
    Set {BASE_URL_ENV} to override upstream.base_url from the config file.
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
