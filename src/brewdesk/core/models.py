"""Data models for Homebrew packages, taps and alerts."""

from __future__ import annotations

import dataclasses
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

_PACKAGE_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "https://brew.sh/brewdesk/package")


class PackageKind(Enum):
    """Enumeration of package kinds."""

    FORMULA = "formula"
    CASK = "cask"


def package_id(name: str, kind: PackageKind) -> UUID:
    """Stable identifier for a package, identical across reloads."""
    return uuid.uuid5(_PACKAGE_NAMESPACE, f"{kind.value}:{name}")


@dataclass(frozen=True)
class PackageRecord:
    """Snapshot of an installed Homebrew package.

    Records are never mutated; changes produce a new snapshot which replaces
    the old one in its store partition.
    """

    name: str
    kind: PackageKind
    is_tagged: bool = False
    installed_on: datetime | None = None
    versions: tuple[str, ...] = ()
    size_in_bytes: int = 0
    id: UUID | None = None

    def __post_init__(self) -> None:
        if self.id is None:
            object.__setattr__(self, "id", package_id(self.name, self.kind))

    @property
    def is_cask(self) -> bool:
        return self.kind is PackageKind.CASK

    def with_tagged(self, is_tagged: bool) -> PackageRecord:
        """Return a copy of this record with only the tagged flag changed."""
        return dataclasses.replace(self, is_tagged=is_tagged)


@dataclass
class Tap:
    """A third-party repository registered with Homebrew."""

    name: str
    is_being_modified: bool = False

    def change_being_modified_status(self) -> None:
        self.is_being_modified = not self.is_being_modified


class AlertKind(Enum):
    """Alerts the presentation layer knows how to show."""

    TAP_IN_USE = "tap_in_use"


@dataclass(frozen=True)
class Alert:
    """A user-facing alert delivered through application state."""

    kind: AlertKind
    tap_name: str

    @classmethod
    def tap_in_use(cls, tap_name: str) -> Alert:
        return cls(kind=AlertKind.TAP_IN_USE, tap_name=tap_name)

    @property
    def message(self) -> str:
        if self.kind is AlertKind.TAP_IN_USE:
            return (
                f"Cannot remove {self.tap_name}: packages from it are still installed. "
                "Uninstall them first."
            )
        return self.kind.value
