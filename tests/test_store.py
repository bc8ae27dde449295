"""
Tests for the observable stores.
"""

import uuid

from brewdesk.core.models import Alert, PackageKind, PackageRecord
from brewdesk.core.store import AppState, AvailableTaps, PackageStore, batch_updates


class TestObservable:
    """Notification and batching behaviour shared by all stores."""

    def test_listener_receives_field_names(self):
        state = AppState()
        seen = []
        state.subscribe(seen.append)

        state.navigation_selection = uuid.uuid4()
        state.is_showing_uninstallation_progress = True

        assert seen == ["navigation_selection", "is_showing_uninstallation_progress"]

    def test_unsubscribe(self):
        state = AppState()
        seen = []
        unsubscribe = state.subscribe(seen.append)
        unsubscribe()
        unsubscribe()

        state.navigation_selection = uuid.uuid4()

        assert seen == []

    def test_batch_defers_and_deduplicates(self):
        state = AppState()
        seen = []
        state.subscribe(seen.append)

        with state.batch():
            state.add_tagged_id(uuid.uuid4())
            state.add_tagged_id(uuid.uuid4())
            with state.batch():
                state.navigation_selection = uuid.uuid4()
            assert seen == []

        assert seen == ["tagged_package_ids", "navigation_selection"]

    def test_batch_updates_spans_stores(self):
        taps = AvailableTaps()
        state = AppState()
        seen = []
        taps.subscribe(lambda f: seen.append((f, len(taps.added_taps), state.is_showing_uninstallation_progress)))

        with batch_updates(taps, state):
            taps.load(["a/b"])
            state.is_showing_uninstallation_progress = True

        assert seen == [("added_taps", 1, True)]

    def test_setting_same_value_is_silent(self):
        state = AppState()
        seen = []
        state.subscribe(seen.append)

        state.navigation_selection = None
        state.is_showing_uninstallation_progress = False

        assert seen == []


class TestPackageStore:
    """Tests for PackageStore."""

    def test_load_partitions_by_kind(self):
        store = PackageStore()
        store.load([
            PackageRecord("wget", PackageKind.FORMULA),
            PackageRecord("firefox", PackageKind.CASK),
        ])
        assert [r.name for r in store.installed_formulae] == ["wget"]
        assert [r.name for r in store.installed_casks] == ["firefox"]

    def test_load_keeps_one_record_per_id(self):
        store = PackageStore()
        store.load([
            PackageRecord("wget", PackageKind.FORMULA, versions=("1",)),
            PackageRecord("wget", PackageKind.FORMULA, versions=("2",)),
        ])
        assert [r.versions for r in store.installed_formulae] == [("2",)]

    def test_replace_missing_returns_false(self):
        store = PackageStore()
        assert store.replace(PackageRecord("nope", PackageKind.CASK)) is False

    def test_find(self):
        wget = PackageRecord("wget", PackageKind.FORMULA)
        store = PackageStore()
        store.load([wget])
        assert store.find(wget.id) == wget
        assert store.find(uuid.uuid4()) is None


class TestAppState:
    """Tests for AppState."""

    def test_clear_navigation_if_matches(self):
        state = AppState()
        selected = uuid.uuid4()
        state.navigation_selection = selected

        assert state.clear_navigation_if(selected) is True
        assert state.navigation_selection is None

    def test_clear_navigation_if_changed(self):
        state = AppState()
        state.navigation_selection = uuid.uuid4()
        current = uuid.uuid4()
        state.navigation_selection = current

        assert state.clear_navigation_if(uuid.uuid4()) is False
        assert state.navigation_selection == current

    def test_clear_navigation_if_empty(self):
        state = AppState()
        assert state.clear_navigation_if(None) is False

    def test_remove_absent_tag_is_not_error(self):
        assert AppState().remove_tagged_id(uuid.uuid4()) is False

    def test_alerts(self):
        state = AppState()
        state.show_alert(Alert.tap_in_use("foo/bar"))
        assert state.alert.tap_name == "foo/bar"
        state.dismiss_alert()
        assert state.alert is None


class TestAvailableTaps:
    """Tests for AvailableTaps."""

    def test_load_deduplicates_and_keeps_busy_flags(self):
        taps = AvailableTaps()
        taps.load(["a/one", "b/two"])
        taps.set_being_modified(1, True)

        taps.load(["b/two", "a/one", "b/two"])

        assert [(t.name, t.is_being_modified) for t in taps.added_taps] == [
            ("b/two", True),
            ("a/one", False),
        ]

    def test_remove_all_missing(self):
        taps = AvailableTaps()
        taps.load(["a/one"])
        assert taps.remove_all("nope") == 0
        assert taps.remove_all("a/one") == 1

    def test_clear_busy_flags_with_exclusions(self):
        taps = AvailableTaps()
        taps.load(["a/one", "b/two", "c/three"])
        for i in range(3):
            taps.set_being_modified(i, True)

        assert taps.clear_busy_flags(exclude=["b/two"]) == 2
        assert [t.is_being_modified for t in taps.added_taps] == [False, True, False]

    def test_in_flight_markers(self):
        taps = AvailableTaps()
        assert taps.begin_removal("a/one") is True
        assert taps.begin_removal("a/one") is False
        assert taps.removals_in_flight == frozenset({"a/one"})
        taps.end_removal("a/one")
        taps.end_removal("a/one")
        assert taps.begin_removal("a/one") is True
