"""Adding and removing Homebrew taps.

Both operations await brew as their only suspension point. Everything they
do to shared state happens on the event loop that awaited them, in
synchronous steps, so a store is never seen half-updated.
"""

from __future__ import annotations

import time
from typing import Optional

from brewdesk.core.classify import (
    BrewTapClassifier,
    BrewUntapClassifier,
    TapClassifier,
    TapOutcome,
    UntapClassifier,
    UntapOutcome,
)
from brewdesk.core.errors import AddTapError, BrewLaunchError, TapBusyError, UntapError
from brewdesk.core.logging import get_logger
from brewdesk.core.models import Alert, Tap
from brewdesk.core.shell import BrewRunner, run_brew
from brewdesk.core.store import AppState, AvailableTaps, batch_updates

log = get_logger(__name__)


def _reset_busy_flag(available_taps: AvailableTaps, name: str, busy_index: int | None) -> None:
    """Put the spinner for ``name`` back to rest after a failed removal."""
    if busy_index is not None:
        # the registry may have been reloaded while brew ran
        if (
            busy_index >= len(available_taps.added_taps)
            or available_taps.added_taps[busy_index].name != name
        ):
            busy_index = available_taps.index_of(name)
        if busy_index is not None:
            available_taps.set_being_modified(busy_index, False)
        return

    log.warning("untap_busy_index_missing", tap=name)
    others = available_taps.removals_in_flight - {name}
    available_taps.clear_busy_flags(exclude=others)


async def remove_tap(
    name: str,
    available_taps: AvailableTaps,
    app_state: AppState,
    apply_spinner_to_sidebar: bool = False,
    *,
    runner: BrewRunner = run_brew,
    classifier: Optional[UntapClassifier] = None,
) -> None:
    """Remove a tap through ``brew untap`` and reconcile state.

    On success every registry entry named ``name`` is removed, and the
    navigation selection is cleared unless the user moved it while brew was
    running. On failure the tap stays, an alert is shown if brew refused
    because packages from the tap are still installed, and ``UntapError`` is
    raised. Progress indicators are back at rest on every exit path.

    Args:
        name: Name of the tap, e.g. ``homebrew/cask``.
        available_taps: Registry of added taps.
        app_state: Shared application state.
        apply_spinner_to_sidebar: Show a spinner on the tap's own row instead
            of the global uninstallation progress view.
        runner: Runs brew; defaults to the configured executable.
        classifier: Interprets brew's output; defaults to
            :class:`BrewUntapClassifier`.

    Raises:
        TapBusyError: If a removal of the same tap is already running.
        UntapError: If brew did not report the tap as untapped.
    """
    classifier = classifier or BrewUntapClassifier()

    if not available_taps.begin_removal(name):
        log.warning("untap_already_running", tap=name)
        raise TapBusyError(name)

    start = time.perf_counter()
    log.info("untap_start", tap=name, spinner=apply_spinner_to_sidebar)

    old_navigation_selection = app_state.navigation_selection
    busy_index: int | None = None
    untapped = False

    try:
        if apply_spinner_to_sidebar:
            busy_index = available_taps.index_of(name)
            if busy_index is not None:
                available_taps.set_being_modified(busy_index, True)
        else:
            app_state.is_showing_uninstallation_progress = True

        try:
            untap_result = (await runner("untap", name)).standard_error
        except BrewLaunchError as e:
            untap_result = str(e)
        log.debug("untap_result", tap=name, result=untap_result)

        outcome = classifier.classify(untap_result)
        duration_ms = int((time.perf_counter() - start) * 1000)

        if outcome is UntapOutcome.UNTAPPED:
            with batch_updates(available_taps, app_state):
                available_taps.remove_all(name)
                # only go back to the overview if the user stayed where they were
                app_state.clear_navigation_if(old_navigation_selection)
            untapped = True
            log.info("untap_complete", tap=name, duration_ms=duration_ms)
            return

        log.warning("untap_failed", tap=name, outcome=outcome.value, duration_ms=duration_ms)
        if outcome is UntapOutcome.TAP_IN_USE:
            app_state.show_alert(Alert.tap_in_use(name))

        raise UntapError(tap_name=name, failure_reason=untap_result)

    finally:
        with batch_updates(available_taps, app_state):
            if not untapped:
                _reset_busy_flag(available_taps, name, busy_index)
            app_state.is_showing_uninstallation_progress = False
        available_taps.end_removal(name)


async def add_tap(
    name: str,
    available_taps: AvailableTaps,
    *,
    url: Optional[str] = None,
    runner: BrewRunner = run_brew,
    classifier: Optional[TapClassifier] = None,
) -> Tap:
    """Add a tap through ``brew tap`` and register it.

    Args:
        name: Name of the tap, e.g. ``user/repo``.
        available_taps: Registry of added taps.
        url: Optional git URL for taps outside GitHub.
        runner: Runs brew; defaults to the configured executable.
        classifier: Interprets brew's output; defaults to
            :class:`BrewTapClassifier`.

    Returns:
        The newly registered tap.

    Raises:
        AddTapError: If the tap is already added or brew did not tap it.
    """
    classifier = classifier or BrewTapClassifier()

    if available_taps.index_of(name) is not None:
        log.warning("tap_already_added", tap=name)
        raise AddTapError(name, TapOutcome.ALREADY_TAPPED)

    start = time.perf_counter()
    log.info("tap_start", tap=name, url=url)

    args = ["tap", name] if url is None else ["tap", name, url]
    try:
        output = await runner(*args)
        tap_result = "\n".join(filter(None, (output.standard_error, output.standard_output)))
    except BrewLaunchError as e:
        tap_result = str(e)
    log.debug("tap_result", tap=name, result=tap_result)

    outcome = classifier.classify(tap_result)
    duration_ms = int((time.perf_counter() - start) * 1000)

    if outcome is not TapOutcome.TAPPED:
        log.warning("tap_failed", tap=name, outcome=outcome.value, duration_ms=duration_ms)
        raise AddTapError(name, outcome, failure_reason=tap_result)

    tap = Tap(name=name)
    # another add may have finished while brew ran
    if available_taps.index_of(name) is None:
        available_taps.add(tap)
    log.info("tap_complete", tap=name, duration_ms=duration_ms)
    return tap
