"""Shared fixtures for brewdesk tests."""

import asyncio
import os
import tempfile

# keep logs out of the real home directory; must run before brewdesk is imported
os.environ.setdefault("BREWDESK_HOME", tempfile.mkdtemp(prefix="brewdesk-tests-"))

import pytest

from brewdesk.core.shell import ShellOutput


class FakeRunner:
    """Stands in for ``run_brew``.

    Records every call, optionally waits on a gate before answering, and
    calls ``on_call`` with the arguments while "brew" is running.
    """

    def __init__(self, stderr="", stdout="", returncode=0, error=None, on_call=None):
        self.stderr = stderr
        self.stdout = stdout
        self.returncode = returncode
        self.error = error
        self.on_call = on_call
        self.calls = []
        self.gate = asyncio.Event()
        self.gate.set()
        self.started = asyncio.Event()

    def hold(self):
        """Make the next calls block until ``release`` is called."""
        self.gate.clear()
        return self

    def release(self):
        self.gate.set()

    async def __call__(self, *args):
        self.calls.append(args)
        self.started.set()
        if self.on_call is not None:
            self.on_call(*args)
        await self.gate.wait()
        if self.error is not None:
            raise self.error
        return ShellOutput(self.stdout, self.stderr, self.returncode)


@pytest.fixture
def make_runner():
    """Factory for fake brew runners."""
    return FakeRunner
