"""Main application module for brewdesk."""

from __future__ import annotations

import asyncio
from typing import Callable, Optional

from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Footer, Header

from brewdesk.core.errors import BrewError, format_error_message
from brewdesk.core.logging import get_logger
from brewdesk.core.repo import Repository
from brewdesk.core.shell import BrewRunner, run_brew
from brewdesk.core.store import AppState, AvailableTaps, PackageStore
from brewdesk.core.tagging import toggle_tag
from brewdesk.core.taps import remove_tap
from .keymap import KEYMAP
from .theme import APP_CSS, set_theme
from .widgets.details_panel import DetailsPanel
from .widgets.logs_panel import LogsPanel
from .widgets.package_table import PackageTable
from .widgets.tap_table import TapTable

log = get_logger(__name__)

PACKAGE_FIELDS = {"installed_formulae", "installed_casks", "tagged_package_ids"}


class BrewdeskApp(App):
    """Terminal front-end that renders the stores and drives operations."""

    TITLE = "brewdesk"
    CSS = APP_CSS
    BINDINGS = KEYMAP

    def __init__(
        self,
        repository: Optional[Repository] = None,
        runner: BrewRunner = run_brew,
        autoload: bool = True,
        package_store: Optional[PackageStore] = None,
        app_state: Optional[AppState] = None,
        available_taps: Optional[AvailableTaps] = None,
    ) -> None:
        super().__init__()
        self.repository = repository or Repository()
        self.runner = runner
        self.autoload = autoload
        self.package_store = package_store or PackageStore()
        self.app_state = app_state or AppState()
        self.available_taps = available_taps or AvailableTaps()
        self._unsubscribers: list[Callable[[], None]] = []

    def compose(self) -> ComposeResult:
        """Compose the UI layout."""
        yield Header(show_clock=True)
        with Horizontal(id="main"):
            yield PackageTable(id="packages")
            with Vertical(id="side"):
                yield TapTable(id="taps")
                yield DetailsPanel(id="details")
        yield LogsPanel(id="logs")
        yield Footer()

    def on_mount(self) -> None:
        """Subscribe to the stores and render their current contents."""
        set_theme(self)
        for store in (self.package_store, self.app_state, self.available_taps):
            self._unsubscribers.append(store.subscribe(self.on_store_changed))

        self.render_packages()
        self.render_taps()
        self.render_details()

        if self.autoload:
            self.run_worker(self.reload(), group="reload", exclusive=True)

    def on_unmount(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def on_store_changed(self, field_name: str) -> None:
        """Re-render whatever depends on the changed field."""
        if field_name in PACKAGE_FIELDS:
            self.render_packages()
            self.render_details()
        elif field_name == "added_taps":
            self.render_taps()
        elif field_name == "navigation_selection":
            self.render_details()
        elif field_name == "is_showing_uninstallation_progress":
            self.sub_title = "Removing tap…" if self.app_state.is_showing_uninstallation_progress else ""
        elif field_name == "alert" and self.app_state.alert is not None:
            self.notify(self.app_state.alert.message, title="Tap in use", severity="error")
            self.app_state.dismiss_alert()

    def render_packages(self) -> None:
        records = self.package_store.installed_formulae + self.package_store.installed_casks
        self.query_one(PackageTable).load_rows(records)

    def render_taps(self) -> None:
        self.query_one(TapTable).load_taps(self.available_taps.added_taps)

    def render_details(self) -> None:
        selection = self.app_state.navigation_selection
        record = self.package_store.find(selection) if selection is not None else None
        self.query_one(DetailsPanel).show_details(record)

    async def reload(self) -> None:
        """Load packages and taps from brew."""
        try:
            await asyncio.gather(
                self.repository.load_installed(self.package_store, self.app_state),
                self.repository.load_taps(self.available_taps),
            )
            self.query_one(LogsPanel).record("Loaded packages and taps.")
        except BrewError as e:
            log.error("reload_failed", error=str(e))
            self.query_one(LogsPanel).record(format_error_message(e))
            self.notify(e.message, title="Could not load data", severity="error")

    async def untap(self, name: str) -> None:
        """Remove a tap, showing the spinner on its row."""
        logs = self.query_one(LogsPanel)
        logs.record(f"Untapping {name}…")
        try:
            await remove_tap(
                name,
                self.available_taps,
                self.app_state,
                apply_spinner_to_sidebar=True,
                runner=self.runner,
            )
            logs.record(f"Untapped {name}.")
        except BrewError as e:
            log.warning("untap_action_failed", tap=name, error=str(e))
            logs.record(format_error_message(e))

    def on_package_table_package_selected(self, message: PackageTable.PackageSelected) -> None:
        self.app_state.navigation_selection = message.package_id

    def action_close_details(self) -> None:
        self.app_state.navigation_selection = None

    def action_toggle_tag(self) -> None:
        package_id = self.query_one(PackageTable).selected_id()
        record = self.package_store.find(package_id) if package_id is not None else None
        if record is not None:
            toggle_tag(record, self.package_store, self.app_state)

    def action_untap_selected(self) -> None:
        name = self.query_one(TapTable).selected_name()
        if name is not None:
            self.run_worker(self.untap(name), group="untap")

    def action_reload(self) -> None:
        self.run_worker(self.reload(), group="reload", exclusive=True)


def run() -> None:
    """Run the brewdesk application."""
    BrewdeskApp().run()

if __name__ == "__main__":
    run()
