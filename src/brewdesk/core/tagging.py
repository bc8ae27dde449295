"""Tagging and untagging of installed packages."""

from __future__ import annotations

from brewdesk.core.logging import get_logger
from brewdesk.core.models import PackageRecord
from brewdesk.core.store import AppState, PackageStore, batch_updates

log = get_logger(__name__)


def _log_tagged(app_state: AppState) -> None:
    log.debug(
        "tagged_packages",
        tagged=[str(i) for i in app_state.tagged_package_ids],
        count=len(app_state.tagged_package_ids),
    )


def untag_package(
    package: PackageRecord, package_store: PackageStore, app_state: AppState
) -> PackageRecord:
    """Clear the tag on a package.

    The record in the package's partition is replaced by an untagged copy and
    its id is removed from the tag set. Both happen inside one batch so
    listeners never see one without the other. A package missing from its
    partition or from the tag set is left alone.

    Args:
        package: The package to untag.
        package_store: Store holding installed formulae and casks.
        app_state: Application state holding the tag set.

    Returns:
        The untagged snapshot.
    """
    untagged = package.with_tagged(False)

    with batch_updates(package_store, app_state):
        if not package_store.replace(untagged):
            log.debug("untag_package_not_in_store", package=package.name, kind=package.kind.value)
        app_state.remove_tagged_id(package.id)

    _log_tagged(app_state)
    return untagged


def tag_package(
    package: PackageRecord, package_store: PackageStore, app_state: AppState
) -> PackageRecord:
    """Set the tag on a package. The inverse of :func:`untag_package`.

    Unlike untagging, a package missing from its partition is not added to
    the tag set, as every tagged id must have a tagged record.
    """
    tagged = package.with_tagged(True)

    with batch_updates(package_store, app_state):
        if package_store.replace(tagged):
            app_state.add_tagged_id(package.id)
        else:
            log.debug("tag_package_not_in_store", package=package.name, kind=package.kind.value)

    _log_tagged(app_state)
    return tagged


def toggle_tag(
    package: PackageRecord, package_store: PackageStore, app_state: AppState
) -> PackageRecord:
    if package.is_tagged or package.id in app_state.tagged_package_ids:
        return untag_package(package, package_store, app_state)
    return tag_package(package, package_store, app_state)
