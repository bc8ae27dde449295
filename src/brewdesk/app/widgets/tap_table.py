"""Widget to display the added taps."""

from __future__ import annotations

from typing import Iterable

from textual.widgets import DataTable

from brewdesk.core.models import Tap


class TapTable(DataTable):
    """Widget listing taps, with a marker on taps being modified."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._names: list[str] = []

    def _ensure_columns(self) -> None:
        if not self.columns:
            self.add_column("Tap", key="name")
            self.add_column("", key="busy")

    def on_mount(self) -> None:
        self.cursor_type = "row"
        self._ensure_columns()

    def load_taps(self, taps: Iterable[Tap]) -> None:
        """Replace the rows with the given taps, keeping the cursor in place."""
        self._ensure_columns()
        row = self.cursor_row
        self.clear()
        self._names = []
        # names may repeat, so rows are keyed by position
        for index, tap in enumerate(taps):
            self._names.append(tap.name)
            self.add_row(tap.name, "⟳" if tap.is_being_modified else "", key=str(index))
        if self._names:
            self.move_cursor(row=min(row, len(self._names) - 1))

    def selected_name(self) -> str | None:
        if 0 <= self.cursor_row < len(self._names):
            return self._names[self.cursor_row]
        return None
