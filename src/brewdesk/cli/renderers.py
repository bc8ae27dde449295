"""Renderers for displaying package and tap information in the CLI using Rich."""

from __future__ import annotations

from typing import Iterable

from rich import box
from rich.console import Console
from rich.table import Table

from brewdesk.core.models import Alert, PackageRecord, Tap
from brewdesk.providers.common import human_size_from_bytes

console = Console()


def package_table(pkgs: Iterable[PackageRecord]) -> Table:
    """Create a Rich Table displaying package information.

    Args:
        pkgs: An iterable of PackageRecord instances to display.

    Returns:
        A Rich Table displaying package information.
    """
    table = Table(box=box.MINIMAL_HEAVY_HEAD)
    table.add_column("Kind", style="bold")
    table.add_column("Name", style="bold")
    table.add_column("Versions")
    table.add_column("Size", justify="right")
    table.add_column("Installed On", style="dim")
    table.add_column("Tagged")

    for p in pkgs:
        table.add_row(
            p.kind.value,
            p.name,
            ", ".join(p.versions),
            human_size_from_bytes(p.size_in_bytes),
            p.installed_on.isoformat(timespec="minutes") if p.installed_on else "",
            "[yellow]★[/yellow]" if p.is_tagged else "",
        )

    return table


def tap_table(taps: Iterable[Tap]) -> Table:
    """Create a Rich Table listing taps."""
    table = Table(box=box.MINIMAL_HEAVY_HEAD)
    table.add_column("Tap", style="bold")
    table.add_column("Status")

    for t in taps:
        table.add_row(t.name, "[cyan]working…[/cyan]" if t.is_being_modified else "")

    return table


def alert_text(alert: Alert) -> str:
    return f"🚫 {alert.message}"
