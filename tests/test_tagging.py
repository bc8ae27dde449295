"""
Tests for tagging and untagging packages.
"""

from datetime import datetime

from brewdesk.core.models import PackageKind, PackageRecord
from brewdesk.core.store import AppState, PackageStore
from brewdesk.core.tagging import tag_package, toggle_tag, untag_package


def record(name, kind=PackageKind.FORMULA, tagged=True):
    return PackageRecord(
        name=name,
        kind=kind,
        is_tagged=tagged,
        installed_on=datetime(2024, 5, 1, 12, 30),
        versions=("1.0", "1.1"),
        size_in_bytes=4096,
    )


def make_stores(*records):
    store = PackageStore()
    store.load(records)
    state = AppState()
    for r in records:
        if r.is_tagged:
            state.add_tagged_id(r.id)
    return store, state


class TestUntagPackage:
    """Tests for untag_package."""

    def test_clears_flag_and_tag_set(self):
        wget = record("wget")
        store, state = make_stores(wget)

        untag_package(wget, store, state)

        assert store.installed_formulae[0].is_tagged is False
        assert wget.id not in state.tagged_package_ids

    def test_other_fields_unchanged(self):
        wget = record("wget")
        store, state = make_stores(wget)

        result = untag_package(wget, store, state)

        stored = store.installed_formulae[0]
        assert stored == result
        assert (stored.id, stored.name, stored.kind, stored.installed_on, stored.versions, stored.size_in_bytes) == (
            wget.id, wget.name, wget.kind, wget.installed_on, wget.versions, wget.size_in_bytes
        )

    def test_replaces_in_cask_partition(self):
        firefox = record("firefox", kind=PackageKind.CASK)
        wget = record("wget")
        store, state = make_stores(wget, firefox)

        untag_package(firefox, store, state)

        assert store.installed_casks[0].is_tagged is False
        assert store.installed_formulae[0].is_tagged is True
        assert state.tagged_package_ids == [wget.id]

    def test_keeps_position_in_partition(self):
        a, b, c = record("a"), record("b"), record("c")
        store, state = make_stores(a, b, c)

        untag_package(b, store, state)

        assert [r.name for r in store.installed_formulae] == ["a", "b", "c"]
        assert [r.is_tagged for r in store.installed_formulae] == [True, False, True]

    def test_package_missing_from_store_is_noop(self):
        """No error, and unrelated tags survive."""
        wget = record("wget")
        store, state = make_stores(wget)
        stray = record("stray")

        untag_package(stray, store, state)

        assert store.installed_formulae == [wget]
        assert state.tagged_package_ids == [wget.id]

    def test_wrong_partition_is_not_searched(self):
        """A cask with a formula's name does not touch the formula."""
        wget = record("wget")
        store, state = make_stores(wget)

        untag_package(record("wget", kind=PackageKind.CASK), store, state)

        assert store.installed_formulae[0].is_tagged is True

    def test_id_absent_from_tag_set(self):
        wget = record("wget", tagged=False)
        store, state = make_stores(wget)

        untag_package(wget, store, state)

        assert state.tagged_package_ids == []

    def test_listeners_see_consistent_state(self):
        """Store and tag set change before any listener runs."""
        wget = record("wget")
        store, state = make_stores(wget)
        seen = []

        def check(field_name):
            seen.append((field_name, store.installed_formulae[0].is_tagged, list(state.tagged_package_ids)))

        store.subscribe(check)
        state.subscribe(check)

        untag_package(wget, store, state)

        assert sorted(seen) == [
            ("installed_formulae", False, []),
            ("tagged_package_ids", False, []),
        ]


class TestTagPackage:
    """Tests for tag_package and toggle_tag."""

    def test_tag_sets_flag_and_appends_once(self):
        wget = record("wget", tagged=False)
        store, state = make_stores(wget)

        tag_package(wget, store, state)
        tag_package(store.installed_formulae[0], store, state)

        assert store.installed_formulae[0].is_tagged is True
        assert state.tagged_package_ids == [wget.id]

    def test_tag_missing_package_leaves_tag_set_alone(self):
        store, state = make_stores()
        tag_package(record("ghost", tagged=False), store, state)
        assert state.tagged_package_ids == []

    def test_toggle_round_trip(self):
        wget = record("wget", tagged=False)
        store, state = make_stores(wget)

        tagged = toggle_tag(wget, store, state)
        assert tagged.is_tagged and state.tagged_package_ids == [wget.id]

        untagged = toggle_tag(tagged, store, state)
        assert not untagged.is_tagged and state.tagged_package_ids == []
