"""Homebrew formula provider."""

from __future__ import annotations

import asyncio
import time
from typing import Any, List

from brewdesk.core.config import Brewdesk
from brewdesk.core.logging import get_logger
from brewdesk.core.models import PackageKind, PackageRecord
from brewdesk.core.shell import run_json
from brewdesk.providers.common import directory_size, timestamp_to_datetime

log = get_logger(__name__)


async def list_installed() -> List[PackageRecord]:
    """List installed Homebrew formulae.

    Returns:
        A list of installed PackageRecord instances.
    """
    start = time.perf_counter()
    log.debug("formula_list_start")

    data = await run_json(Brewdesk.brew, "info", "--json=v2", "--installed")
    pkgs = await records_from_items(data.get("formulae", []))

    duration_ms = int((time.perf_counter() - start) * 1000)
    log.info(
        "formula_list_complete",
        count=len(pkgs),
        duration_ms=duration_ms
    )

    return pkgs


async def records_from_items(items: list[dict[str, Any]]) -> List[PackageRecord]:
    """Build records from ``brew info --json=v2`` formula items.

    Args:
        items: List of formula data items.

    Returns:
        A list of PackageRecord instances, sized from their kegs in the Cellar.
    """
    pkgs: List[PackageRecord] = []

    for f in items:
        installed = f.get("installed", [])
        versions = tuple(v["version"] for v in installed if v.get("version"))
        installed_on = timestamp_to_datetime(installed[-1].get("installed_time")) if installed else None
        size = await asyncio.to_thread(directory_size, Brewdesk.cellar / f["name"])

        pkgs.append(
            PackageRecord(
                name=f["name"],
                kind=PackageKind.FORMULA,
                installed_on=installed_on,
                versions=versions,
                size_in_bytes=size,
            )
        )

    return pkgs
