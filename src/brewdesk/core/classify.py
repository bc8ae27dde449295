"""Classification of brew's text output for tap operations.

brew reports tap results as free text, mostly on standard error. The
classifiers below turn that text into outcomes so the orchestration in
``brewdesk.core.taps`` never matches strings itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class UntapOutcome(Enum):
    """Result of a ``brew untap`` run."""

    UNTAPPED = "untapped"
    TAP_IN_USE = "tap_in_use"
    FAILED = "failed"


class TapOutcome(Enum):
    """Result of a ``brew tap`` run."""

    TAPPED = "tapped"
    ALREADY_TAPPED = "already_tapped"
    REPOSITORY_NOT_FOUND = "repository_not_found"
    INVALID_NAME = "invalid_name"
    FAILED = "failed"


class UntapClassifier(Protocol):
    """Protocol for untap output classifiers."""

    def classify(self, output: str) -> UntapOutcome:
        """Classify the text printed by ``brew untap``."""
        ...


class TapClassifier(Protocol):
    """Protocol for tap output classifiers."""

    def classify(self, output: str) -> TapOutcome:
        """Classify the text printed by ``brew tap``."""
        ...


@dataclass(frozen=True)
class BrewUntapClassifier:
    """Matches the wording of Homebrew's untap command.

    Matching is by exact, case sensitive substring.
    """

    success_marker: str = "Untapped"
    in_use_marker: str = "because it contains the following installed formulae or casks"

    def classify(self, output: str) -> UntapOutcome:
        if self.success_marker in output:
            return UntapOutcome.UNTAPPED
        if self.in_use_marker in output:
            return UntapOutcome.TAP_IN_USE
        return UntapOutcome.FAILED


@dataclass(frozen=True)
class BrewTapClassifier:
    """Matches the wording of Homebrew's tap command."""

    success_marker: str = "Tapped"
    not_found_marker: str = "Repository not found"
    invalid_name_marker: str = "Invalid tap name"

    def classify(self, output: str) -> TapOutcome:
        # case sensitive: "Untapped" must not count as "Tapped"
        if self.success_marker in output:
            return TapOutcome.TAPPED
        if self.not_found_marker in output:
            return TapOutcome.REPOSITORY_NOT_FOUND
        if self.invalid_name_marker in output:
            return TapOutcome.INVALID_NAME
        return TapOutcome.FAILED
