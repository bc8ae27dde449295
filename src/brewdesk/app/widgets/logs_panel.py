"""Widgets for displaying operation logs in the application."""

from __future__ import annotations

from textual.widgets import Log


class LogsPanel(Log):
    """Panel listing what the user's operations did."""

    def on_mount(self) -> None:
        """Called when the logs panel is mounted."""
        self.highlight = True
        self.write_line("Ready.")

    def record(self, line: str) -> None:
        self.write_line(line)
