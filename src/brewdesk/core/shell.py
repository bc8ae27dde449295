"""Asynchronous shell command execution with timeout and JSON parsing."""

from __future__ import annotations

import asyncio
import json
import os
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Optional, Protocol

from brewdesk.core.config import Brewdesk
from brewdesk.core.errors import (
    BrewCommandError,
    BrewLaunchError,
    BrewTimeoutError,
    retry_on_transient,
)
from brewdesk.core.logging import get_logger

log = get_logger(__name__)

ENV_OVERRIDES = {
    "LANG": "C",
    "HOMEBREW_NO_COLOR": "1",
    "HOMEBREW_NO_EMOJI": "1",
}


@dataclass(frozen=True)
class ShellOutput:
    """Everything a finished command printed."""

    standard_output: str
    standard_error: str
    returncode: int | None


class BrewRunner(Protocol):
    """Callable that runs brew with the given arguments."""

    def __call__(self, *args: str) -> Awaitable[ShellOutput]:
        ...


def command_env() -> dict[str, str]:
    """Environment for child processes, with stable, uncoloured English output."""
    return {**os.environ, **ENV_OVERRIDES}


async def run_capture(
    *cmd: str, timeout: Optional[float] = 30
) -> ShellOutput:
    """Run a command asynchronously and capture both output streams.

    The event loop keeps running while the command does.

    Args:
        *cmd: Command and its arguments to run.
        timeout: Timeout in seconds, or None to wait for the process to exit.

    Returns:
        The captured output and exit code.

    Raises:
        BrewLaunchError: If the executable cannot be started.
        BrewTimeoutError: If the command times out.
    """
    command = " ".join(cmd)
    start = time.perf_counter()
    log.debug("command_start", command=command, timeout=timeout)

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=command_env(),
        )
    except OSError as e:
        log.error("command_launch_failed", command=command, error=str(e))
        raise BrewLaunchError(command=command, error=str(e)) from e

    try:
        out, err = await asyncio.wait_for(process.communicate(), timeout)
        duration_ms = int((time.perf_counter() - start) * 1000)
        log.info(
            "command_complete",
            command=command,
            returncode=process.returncode,
            duration_ms=duration_ms
        )

    except asyncio.TimeoutError as e:
        duration_ms = int((time.perf_counter() - start) * 1000)
        log.error(
            "command_timeout",
            command=command,
            timeout=timeout,
            duration_ms=duration_ms
        )
        try:
            process.kill()
            await process.wait()
        finally:
            raise BrewTimeoutError(
                f"Command timed out after {timeout}s",
                context={
                    "command": command,
                    "timeout": timeout,
                    "duration_ms": duration_ms
                }
            ) from e

    return ShellOutput(
        standard_output=out.decode(errors="replace").strip(),
        standard_error=err.decode(errors="replace").strip(),
        returncode=process.returncode,
    )


async def run_brew(*args: str, timeout: Optional[float] = None) -> ShellOutput:
    """Run the configured brew executable.

    No timeout by default: tap operations touch the network and may take
    as long as brew needs.
    """
    return await run_capture(Brewdesk.brew, *args, timeout=timeout)


@retry_on_transient(max_retries=3, base_delay=1.0)
async def run_json(*cmd: str, timeout: Optional[float] = 30) -> Any:
    """Run a shell command and parse its JSON output.

    Automatically retries on transient errors.

    Args:
        *cmd: Command and its arguments to run.
        timeout: Timeout in seconds.

    Returns:
        Parsed JSON output.

    Raises:
        BrewCommandError: If the command fails or JSON parsing fails.
        BrewTimeoutError: If the command times out (retried automatically).
    """
    start = time.perf_counter()
    result = await run_capture(*cmd, timeout=timeout)
    duration_ms = int((time.perf_counter() - start) * 1000)
    command = " ".join(cmd)

    if result.returncode != 0:
        error = result.standard_error or result.standard_output
        log.error(
            "command_failed",
            command=command,
            error=error,
            returncode=result.returncode
        )
        raise BrewCommandError(
            f"Brew command failed with exit code {result.returncode}",
            context={
                "command": command,
                "returncode": result.returncode,
                "error": error,
                "duration_ms": duration_ms
            }
        )

    try:
        parsed = json.loads(result.standard_output)
        log.debug("json_parsed", command=command, duration_ms=duration_ms)
        return parsed

    except json.JSONDecodeError as e:
        log.error(
            "json_parse_failed",
            command=command,
            error=str(e),
            exc_info=True
        )
        raise BrewCommandError(
            "Failed to parse JSON output",
            context={
                "command": command,
                "error": str(e),
                "output_preview": result.standard_output[:200]
            }
        ) from e
