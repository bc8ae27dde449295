"""Widget to display a table of packages."""

from __future__ import annotations

from typing import Iterable
from uuid import UUID

from textual.message import Message
from textual.widgets import DataTable

from brewdesk.core.models import PackageRecord
from brewdesk.providers.common import human_size_from_bytes


class PackageTable(DataTable):
    """Widget to display a table of installed packages."""

    class PackageSelected(Message):
        """Message sent when a package row is selected."""
        def __init__(self, package_id: UUID) -> None:
            self.package_id = package_id
            super().__init__()

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._ids: list[UUID] = []

    def _ensure_columns(self) -> None:
        if self.columns:
            return
        self.add_column("", key="tag")
        self.add_column("Name", key="name")
        self.add_column("Kind", key="kind")
        self.add_column("Version", key="version")
        self.add_column("Size", key="size")

    def on_mount(self) -> None:
        """Called when the widget is mounted."""
        self.zebra_stripes = True
        self.cursor_type = "row"
        self._ensure_columns()

    def load_rows(self, records: Iterable[PackageRecord]) -> None:
        """Replace the rows with the given packages, sorted by name."""
        self._ensure_columns()
        self.clear()
        rows = sorted(records, key=lambda r: (r.name.lower(), r.kind.value))
        self._ids = [r.id for r in rows]
        for r in rows:
            self.add_row(
                "★" if r.is_tagged else "",
                r.name,
                r.kind.value,
                r.versions[-1] if r.versions else "",
                human_size_from_bytes(r.size_in_bytes),
                key=str(r.id),
            )

    def selected_id(self) -> UUID | None:
        """Id of the package under the cursor, if any."""
        if 0 <= self.cursor_row < len(self._ids):
            return self._ids[self.cursor_row]
        return None

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Handle row selection event."""
        event.stop()
        if (package_id := self.selected_id()) is not None:
            self.post_message(self.PackageSelected(package_id))
