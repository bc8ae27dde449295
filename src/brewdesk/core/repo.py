"""Repository module for loading package and tap data into the stores."""

from __future__ import annotations

import asyncio
import time
from typing import List, Optional

from brewdesk.core.logging import get_logger
from brewdesk.core.models import PackageKind, PackageRecord
from brewdesk.core.store import AppState, AvailableTaps, PackageStore, batch_updates
from brewdesk.providers import brew_cask, brew_formula, brew_tap
from brewdesk.providers.base import PackageLister, TapLister

log = get_logger(__name__)


class Repository:
    """Loads data from brew and reconciles it into the stores."""

    def __init__(
        self,
        formula_lister: PackageLister = brew_formula.list_installed,
        cask_lister: PackageLister = brew_cask.list_installed,
        tap_lister: TapLister = brew_tap.list_taps,
    ) -> None:
        self.formula_lister = formula_lister
        self.cask_lister = cask_lister
        self.tap_lister = tap_lister

    async def get_all_installed(self, kind_filter: Optional[PackageKind] = None) -> List[PackageRecord]:
        """Get all installed packages, optionally filtered by kind.

        Args:
            kind_filter: Optional filter for package kind (formula or cask).

        Returns:
            Installed packages sorted by kind, then name.
        """
        start = time.perf_counter()
        log.info("fetch_packages_start", kind_filter=kind_filter.value if kind_filter else "all")

        listers = []
        if kind_filter in (None, PackageKind.FORMULA):
            listers.append(self.formula_lister())
        if kind_filter in (None, PackageKind.CASK):
            listers.append(self.cask_lister())

        pkgs = [p for batch in await asyncio.gather(*listers) for p in batch]
        pkgs.sort(key=lambda p: (p.kind.value, p.name.lower()))

        duration_ms = int((time.perf_counter() - start) * 1000)
        log.info(
            "fetch_packages_complete",
            kind_filter=kind_filter.value if kind_filter else "all",
            count=len(pkgs),
            duration_ms=duration_ms,
        )

        return pkgs

    async def load_installed(self, package_store: PackageStore, app_state: AppState) -> None:
        """Reload installed packages, keeping tags consistent with the tag set.

        Records whose id is in the tag set come back tagged. Tagged ids whose
        package is no longer installed are dropped from the tag set.
        """
        pkgs = await self.get_all_installed()
        tagged = set(app_state.tagged_package_ids)
        records = [p.with_tagged(p.id in tagged) for p in pkgs]
        present = {r.id for r in records}

        with batch_updates(package_store, app_state):
            package_store.load(records)
            for stale in [i for i in app_state.tagged_package_ids if i not in present]:
                app_state.remove_tagged_id(stale)

    async def load_taps(self, available_taps: AvailableTaps) -> None:
        """Reload the tap registry from brew."""
        names = await self.tap_lister()
        available_taps.load(names)
