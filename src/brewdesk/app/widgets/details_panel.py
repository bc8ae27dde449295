"""Details panel widget for displaying package information."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Static

from brewdesk.core.models import PackageRecord
from brewdesk.providers.common import human_size_from_bytes

PLACEHOLDER = "Select a package to see details"


def describe(record: PackageRecord) -> str:
    """Render a package as the text shown in the panel."""
    lines = [
        f"[b]{record.name}[/b] ({record.kind.value})",
        f"Versions: {', '.join(record.versions) or '-'}",
        f"Size: {human_size_from_bytes(record.size_in_bytes)}",
    ]
    if record.installed_on:
        lines.append(f"Installed: {record.installed_on:%Y-%m-%d %H:%M}")
    if record.is_tagged:
        lines.append("[yellow]Tagged[/yellow]")
    return "\n".join(lines)


class DetailsPanel(Vertical):
    """Panel to show details of the selected package."""

    def compose(self) -> ComposeResult:
        yield Static("Details", classes="details_title")
        yield Static(PLACEHOLDER, id="details_body")

    def show_details(self, record: PackageRecord | None) -> None:
        """Show a package, or the placeholder when there is none.

        Args:
            record: The selected package, if it still exists.
        """
        body = self.query_one("#details_body", Static)
        body.update(describe(record) if record is not None else PLACEHOLDER)
