"""Type definitions for package and tap providers."""

from __future__ import annotations

from typing import Awaitable, Callable, List

from brewdesk.core.models import PackageRecord

# async () -> records, e.g. brew_formula.list_installed
PackageLister = Callable[[], Awaitable[List[PackageRecord]]]

# async () -> tap names, e.g. brew_tap.list_taps
TapLister = Callable[[], Awaitable[List[str]]]
