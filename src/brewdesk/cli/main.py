"""CLI entry point for brewdesk."""

from __future__ import annotations

import asyncio
import sys
from typing import Optional

import typer

from brewdesk.cli.renderers import alert_text, console, package_table, tap_table
from brewdesk.core.errors import (
    EXIT_SYSTEM_ERROR,
    EXIT_TRANSIENT_ERROR,
    EXIT_USER_ERROR,
    BrewError,
    SystemError,
    TransientError,
    UserError,
    format_error_message,
)
from brewdesk.core.logging import configure_logging, get_logger
from brewdesk.core.models import PackageKind
from brewdesk.core.repo import Repository
from brewdesk.core.store import AppState, AvailableTaps
from brewdesk.core.taps import add_tap, remove_tap

app = typer.Typer(help="brewdesk: a front-end for Homebrew packages and taps.")

log = get_logger(__name__)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log to the console")) -> None:
    configure_logging(level="DEBUG" if verbose else None, enable_console=verbose, force=True)


def handle_error(error: Exception) -> int:
    """Handle errors and return appropriate exit codes.

    Args:
        error: The exception to handle.

    Returns:
        An integer exit code.
    """
    if isinstance(error, BrewError):
        log.error(
            "cli_error",
            error_type=type(error).__name__,
            message=error.message,
            context=error.context,
        )
        console.print(f"\n{format_error_message(error)}\n", style="bold red")

        if isinstance(error, TransientError):
            return EXIT_TRANSIENT_ERROR
        elif isinstance(error, SystemError):
            return EXIT_SYSTEM_ERROR
        else:
            return EXIT_USER_ERROR
    else:
        log.error(
            "unexpected_error",
            error=str(error),
            exc_info=True
        )
        console.print(
            f"\n⚠️ Unexpected error occurred: {error}\n",
            style="bold red"
        )
        return EXIT_SYSTEM_ERROR


@app.command("list")
def list_packages(
    kind: Optional[PackageKind] = typer.Option(
        None, "--kind", "-k", help="formula | cask"
    ),
) -> None:
    """List installed packages."""
    try:
        repo = Repository()
        pkgs = asyncio.run(repo.get_all_installed(kind_filter=kind))
        console.print(package_table(pkgs))
    except Exception as e:
        sys.exit(handle_error(e))


@app.command()
def taps() -> None:
    """List added taps."""
    try:
        available_taps = AvailableTaps()
        asyncio.run(Repository().load_taps(available_taps))
        console.print(tap_table(available_taps.added_taps))
    except Exception as e:
        sys.exit(handle_error(e))


@app.command()
def tap(
    name: str,
    url: Optional[str] = typer.Argument(None, help="Git URL for taps outside GitHub"),
) -> None:
    """Add a tap."""

    async def run() -> None:
        available_taps = AvailableTaps()
        await Repository().load_taps(available_taps)
        with console.status(f"Tapping {name}…"):
            await add_tap(name, available_taps, url=url)

    try:
        asyncio.run(run())
        console.print(f"✅ Tapped {name}", style="bold green")
    except Exception as e:
        sys.exit(handle_error(e))


@app.command()
def untap(name: str) -> None:
    """Remove a tap."""
    app_state = AppState()

    async def run() -> None:
        available_taps = AvailableTaps()
        await Repository().load_taps(available_taps)
        with console.status(f"Untapping {name}…"):
            await remove_tap(name, available_taps, app_state)

    try:
        asyncio.run(run())
        console.print(f"✅ Untapped {name}", style="bold green")
    except Exception as e:
        if app_state.alert is not None:
            console.print(alert_text(app_state.alert), style="bold yellow")
        sys.exit(handle_error(e))


@app.command()
def tui() -> None:
    """Open the interactive terminal front-end."""
    from brewdesk.app.main import run

    run()


if __name__ == "__main__":
    app()
