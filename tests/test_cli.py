"""
Tests for the command line interface.
"""

import functools

import pytest
from typer.testing import CliRunner

from brewdesk.cli import main as cli
from brewdesk.core.errors import EXIT_SYSTEM_ERROR, EXIT_USER_ERROR, BrewLaunchError
from brewdesk.core.models import PackageKind, PackageRecord
from brewdesk.core.taps import add_tap, remove_tap

IN_USE = "Error: Refusing to untap foo/bar because it contains the following installed formulae or casks:\nx"


class FakeRepository:
    taps = ["homebrew/core", "foo/bar"]
    packages = [PackageRecord("wget", PackageKind.FORMULA, versions=("1.24.5",))]

    async def load_taps(self, available_taps):
        available_taps.load(self.taps)

    async def get_all_installed(self, kind_filter=None):
        return [p for p in self.packages if kind_filter in (None, p.kind)]


@pytest.fixture
def invoke(monkeypatch):
    monkeypatch.setattr(cli, "Repository", FakeRepository)
    runner = CliRunner()
    return functools.partial(runner.invoke, cli.app)


@pytest.fixture
def brew(monkeypatch, make_runner):
    """Route tap operations to a fake brew."""
    def install(**kwargs):
        fake = make_runner(**kwargs)
        monkeypatch.setattr(cli, "remove_tap", functools.partial(remove_tap, runner=fake))
        monkeypatch.setattr(cli, "add_tap", functools.partial(add_tap, runner=fake))
        return fake
    return install


class TestUntapCommand:
    """Tests for `brewdesk untap`."""

    def test_success(self, invoke, brew):
        fake = brew(stderr="Untapped 1 formula")
        result = invoke(["untap", "foo/bar"])
        assert result.exit_code == 0
        assert "Untapped foo/bar" in result.output
        assert fake.calls == [("untap", "foo/bar")]

    def test_tap_in_use_prints_alert(self, invoke, brew):
        brew(stderr=IN_USE)
        result = invoke(["untap", "foo/bar"])
        assert result.exit_code == EXIT_USER_ERROR
        assert "packages from it are still installed" in result.output
        assert "Could not remove tap foo/bar" in result.output

    def test_generic_failure(self, invoke, brew):
        brew(stderr="Error: No available tap nope/nope.")
        result = invoke(["untap", "nope/nope"])
        assert result.exit_code == EXIT_USER_ERROR
        assert "still installed" not in result.output


class TestTapCommand:
    """Tests for `brewdesk tap`."""

    def test_success(self, invoke, brew):
        fake = brew(stderr="Tapped 2 formulae")
        result = invoke(["tap", "new/tap", "https://example.com/new.git"])
        assert result.exit_code == 0
        assert fake.calls == [("tap", "new/tap", "https://example.com/new.git")]

    def test_already_added(self, invoke, brew):
        fake = brew(stderr="Tapped")
        result = invoke(["tap", "foo/bar"])
        assert result.exit_code == EXIT_USER_ERROR
        assert fake.calls == []


class TestListingCommands:

    def test_taps(self, invoke):
        result = invoke(["taps"])
        assert result.exit_code == 0
        assert "homebrew/core" in result.output
        assert "foo/bar" in result.output

    def test_list(self, invoke):
        result = invoke(["list", "--kind", "formula"])
        assert result.exit_code == 0
        assert "wget" in result.output

    def test_list_launch_failure(self, monkeypatch, invoke):
        async def broken(self, kind_filter=None):
            raise BrewLaunchError(command="brew info", error="No such file")

        monkeypatch.setattr(FakeRepository, "get_all_installed", broken)
        result = invoke(["list"])
        assert result.exit_code == EXIT_SYSTEM_ERROR
