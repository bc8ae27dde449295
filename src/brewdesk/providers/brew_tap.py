"""Homebrew tap provider."""

from __future__ import annotations

from typing import List

from brewdesk.core.config import Brewdesk
from brewdesk.core.errors import BrewCommandError
from brewdesk.core.logging import get_logger
from brewdesk.core.shell import run_capture

log = get_logger(__name__)


def parse_tap_list(output: str) -> List[str]:
    """Parse the output of ``brew tap`` into tap names."""
    return [line.strip() for line in output.splitlines() if line.strip()]


async def list_taps() -> List[str]:
    """List added taps.

    Raises:
        BrewCommandError: If brew exits with a non-zero code.
    """
    result = await run_capture(Brewdesk.brew, "tap")
    if result.returncode != 0:
        raise BrewCommandError(
            command=f"{Brewdesk.brew} tap",
            returncode=result.returncode,
            error=result.standard_error,
        )

    names = parse_tap_list(result.standard_output)
    log.info("tap_list_complete", count=len(names))
    return names
