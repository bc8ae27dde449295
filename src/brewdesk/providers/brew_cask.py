"""Homebrew Cask provider."""

from __future__ import annotations

import asyncio
import time
from typing import Any, List, Optional

from brewdesk.core.config import Brewdesk
from brewdesk.core.logging import get_logger
from brewdesk.core.models import PackageKind, PackageRecord
from brewdesk.core.shell import run_capture, run_json
from brewdesk.providers.common import directory_size, timestamp_to_datetime

log = get_logger(__name__)

BATCH_SIZE = 30


async def list_installed() -> List[PackageRecord]:
    """List installed Homebrew casks.

    Returns:
        A list of installed PackageRecord instances.
    """
    start = time.perf_counter()
    log.debug("cask_list_start")

    result = await run_capture(Brewdesk.brew, "list", "--cask")
    names = [name.strip() for name in result.standard_output.split("\n") if name.strip()]
    pkgs: List[PackageRecord] = []
    log.debug("cask_list_names", count=len(names))

    for i in range(0, len(names), BATCH_SIZE):
        batch = names[i : i + BATCH_SIZE]
        data = await run_json(Brewdesk.brew, "info", "--json=v2", "--cask", *batch)
        for c in data.get("casks", []):
            record = await record_from_item(c)
            if record is not None:
                pkgs.append(record)

    duration_ms = int((time.perf_counter() - start) * 1000)
    log.info(
        "cask_list_complete",
        count=len(pkgs),
        duration_ms=duration_ms
    )

    return pkgs


async def record_from_item(c: dict[str, Any]) -> Optional[PackageRecord]:
    """Build a record from one ``brew info --json=v2 --cask`` item.

    Returns None for items without a token.
    """
    token = c.get("token") or (c.get("name") or [""])[0]
    if not token:
        log.warning("cask_item_without_token", keys=sorted(c))
        return None
    version = c.get("installed") or c.get("version")
    size = await asyncio.to_thread(directory_size, Brewdesk.caskroom / token)

    return PackageRecord(
        name=token,
        kind=PackageKind.CASK,
        installed_on=timestamp_to_datetime(c.get("installed_time")),
        versions=(version,) if version else (),
        size_in_bytes=size,
    )
