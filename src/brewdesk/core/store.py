"""Core application state management for package, tag and tap data.

All state here is owned by the event loop the front-end runs on. Mutations
are plain synchronous method calls, so any single call (or a group of calls
inside ``batch_updates``) completes without another task observing it
half-applied.
"""

from __future__ import annotations

from contextlib import ExitStack, contextmanager
from typing import Callable, Iterable, Iterator, List
from uuid import UUID

from brewdesk.core.models import Alert, PackageKind, PackageRecord, Tap

StoreListener = Callable[[str], None]


class Observable:
    """Base class for stores that notify listeners about changed fields."""

    def __init__(self) -> None:
        self._listeners: List[StoreListener] = []
        self._batch_depth = 0
        self._pending: list[str] = []

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register a listener and return a callable that removes it.

        Args:
            listener: Called with the name of each changed field.

        Returns:
            A function that unsubscribes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @contextmanager
    def batch(self) -> Iterator[None]:
        """Defer notifications until the outermost batch exits."""
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                self._flush()

    def _changed(self, field_name: str) -> None:
        if self._batch_depth:
            if field_name not in self._pending:
                self._pending.append(field_name)
            return
        self._emit(field_name)

    def _flush(self) -> None:
        pending, self._pending = self._pending, []
        for field_name in pending:
            self._emit(field_name)

    def _emit(self, field_name: str) -> None:
        for listener in list(self._listeners):
            listener(field_name)


@contextmanager
def batch_updates(*observables: Observable) -> Iterator[None]:
    """Batch notifications across several stores at once.

    Listeners only run after every mutation in the block has been applied.
    """
    with ExitStack() as stack:
        for observable in observables:
            stack.enter_context(observable.batch())
        yield


class PackageStore(Observable):
    """Installed packages, partitioned into formulae and casks."""

    def __init__(self) -> None:
        super().__init__()
        self.installed_formulae: List[PackageRecord] = []
        self.installed_casks: List[PackageRecord] = []

    def partition(self, kind: PackageKind) -> List[PackageRecord]:
        """Get the list holding packages of the given kind."""
        return self.installed_casks if kind is PackageKind.CASK else self.installed_formulae

    def load(self, records: Iterable[PackageRecord]) -> None:
        """Replace the store contents with the given records.

        Later records win when two share an identifier, so each partition
        holds exactly one record per id.
        """
        formulae: dict[UUID, PackageRecord] = {}
        casks: dict[UUID, PackageRecord] = {}
        for record in records:
            (casks if record.is_cask else formulae)[record.id] = record

        self.installed_formulae = list(formulae.values())
        self.installed_casks = list(casks.values())
        self._changed("installed_formulae")
        self._changed("installed_casks")

    def find(self, package_id: UUID) -> PackageRecord | None:
        for record in self.installed_formulae + self.installed_casks:
            if record.id == package_id:
                return record
        return None

    def replace(self, record: PackageRecord) -> bool:
        """Swap the record with the same id in the record's own partition.

        Args:
            record: The new snapshot.

        Returns:
            True if a record was replaced, False if none matched.
        """
        partition = self.partition(record.kind)
        for index, existing in enumerate(partition):
            if existing.id == record.id:
                partition[index] = record
                self._changed("installed_casks" if record.is_cask else "installed_formulae")
                return True
        return False


class AppState(Observable):
    """Shared UI state: tagged packages, navigation, progress and alerts."""

    def __init__(self) -> None:
        super().__init__()
        self.tagged_package_ids: List[UUID] = []
        self._navigation_selection: UUID | None = None
        self._is_showing_uninstallation_progress = False
        self.alert: Alert | None = None

    @property
    def navigation_selection(self) -> UUID | None:
        """Id of the package whose details are open, if any.

        This is a weak reference: the package may no longer exist.
        """
        return self._navigation_selection

    @navigation_selection.setter
    def navigation_selection(self, value: UUID | None) -> None:
        if value != self._navigation_selection:
            self._navigation_selection = value
            self._changed("navigation_selection")

    def clear_navigation_if(self, expected: UUID | None) -> bool:
        """Clear the selection only if it is set and still equals ``expected``.

        Returns:
            True if the selection was cleared.
        """
        if self._navigation_selection is not None and self._navigation_selection == expected:
            self.navigation_selection = None
            return True
        return False

    @property
    def is_showing_uninstallation_progress(self) -> bool:
        return self._is_showing_uninstallation_progress

    @is_showing_uninstallation_progress.setter
    def is_showing_uninstallation_progress(self, value: bool) -> None:
        if value != self._is_showing_uninstallation_progress:
            self._is_showing_uninstallation_progress = value
            self._changed("is_showing_uninstallation_progress")

    def add_tagged_id(self, package_id: UUID) -> bool:
        if package_id in self.tagged_package_ids:
            return False
        self.tagged_package_ids.append(package_id)
        self._changed("tagged_package_ids")
        return True

    def remove_tagged_id(self, package_id: UUID) -> bool:
        """Remove an id from the tag set. Absence is not an error."""
        if package_id not in self.tagged_package_ids:
            return False
        self.tagged_package_ids.remove(package_id)
        self._changed("tagged_package_ids")
        return True

    def show_alert(self, alert: Alert) -> None:
        self.alert = alert
        self._changed("alert")

    def dismiss_alert(self) -> None:
        if self.alert is not None:
            self.alert = None
            self._changed("alert")


class AvailableTaps(Observable):
    """Registry of added taps and the removals currently running."""

    def __init__(self) -> None:
        super().__init__()
        self.added_taps: List[Tap] = []
        self._removals_in_flight: set[str] = set()

    def load(self, names: Iterable[str]) -> None:
        """Replace the registry with the given tap names, keeping busy flags."""
        busy = {t.name for t in self.added_taps if t.is_being_modified}
        seen: dict[str, Tap] = {}
        for name in names:
            seen.setdefault(name, Tap(name=name, is_being_modified=name in busy))
        self.added_taps = list(seen.values())
        self._changed("added_taps")

    def add(self, tap: Tap) -> None:
        self.added_taps.append(tap)
        self._changed("added_taps")

    def index_of(self, name: str) -> int | None:
        for index, tap in enumerate(self.added_taps):
            if tap.name == name:
                return index
        return None

    def set_being_modified(self, index: int, is_being_modified: bool) -> None:
        tap = self.added_taps[index]
        if tap.is_being_modified != is_being_modified:
            tap.change_being_modified_status()
            self._changed("added_taps")

    def remove_all(self, name: str) -> int:
        """Remove every tap with the given name.

        Returns:
            The number of entries removed.
        """
        before = len(self.added_taps)
        self.added_taps = [t for t in self.added_taps if t.name != name]
        removed = before - len(self.added_taps)
        if removed:
            self._changed("added_taps")
        return removed

    def clear_busy_flags(self, exclude: Iterable[str] = ()) -> int:
        """Reset the busy flag on every tap except those named in ``exclude``.

        Returns:
            The number of flags that were reset.
        """
        skip = set(exclude)
        cleared = 0
        for tap in self.added_taps:
            if tap.is_being_modified and tap.name not in skip:
                tap.is_being_modified = False
                cleared += 1
        if cleared:
            self._changed("added_taps")
        return cleared

    def begin_removal(self, name: str) -> bool:
        """Mark a removal of ``name`` as running.

        Returns:
            False if a removal of the same tap is already running.
        """
        if name in self._removals_in_flight:
            return False
        self._removals_in_flight.add(name)
        return True

    def end_removal(self, name: str) -> None:
        self._removals_in_flight.discard(name)

    def is_removal_in_flight(self, name: str) -> bool:
        return name in self._removals_in_flight

    @property
    def removals_in_flight(self) -> frozenset[str]:
        return frozenset(self._removals_in_flight)
