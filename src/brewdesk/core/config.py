"""Configuration module for the brewdesk environment."""

from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

_STANDARD_BREW_LOCATIONS = (
    Path("/opt/homebrew/bin/brew"),
    Path("/usr/local/bin/brew"),
    Path("/home/linuxbrew/.linuxbrew/bin/brew"),
)


@dataclass
class BrewdeskENV:
    """Configuration for the brewdesk environment."""
    brew: str
    prefix: Path
    cellar: Path
    caskroom: Path
    home: Path
    log_level: str = "INFO"

    @property
    def log_dir(self) -> Path:
        return self.home / "logs"


def find_brew_executable() -> str:
    """Locate the brew executable.

    Order: ``BREWDESK_BREW``, ``PATH``, then the standard install locations.
    Falls back to the bare name so a missing brew surfaces when it is launched.
    """
    if override := os.environ.get("BREWDESK_BREW"):
        return override

    if found := shutil.which("brew"):
        return found

    for candidate in _STANDARD_BREW_LOCATIONS:
        if candidate.exists():
            return str(candidate)

    return "brew"


def discover_prefix(brew: str) -> Path:
    """Discover the Homebrew prefix for the given brew executable."""
    if env_prefix := os.environ.get("HOMEBREW_PREFIX"):
        return Path(env_prefix)

    try:
        output = subprocess.check_output([brew, "--prefix"], text=True).strip()
        return Path(output)
    except (subprocess.CalledProcessError, OSError):
        return Path("/opt/homebrew")


def discover_env() -> BrewdeskENV:
    """Discover brewdesk environment based on system settings."""
    brew = find_brew_executable()
    prefix = discover_prefix(brew)
    home = Path(os.environ.get("BREWDESK_HOME", Path.home() / ".brewdesk"))

    return BrewdeskENV(
        brew=brew,
        prefix=prefix,
        cellar=prefix / "Cellar",
        caskroom=prefix / "Caskroom",
        home=home,
        log_level=os.environ.get("BREWDESK_LOG_LEVEL", "INFO").upper(),
    )

Brewdesk = discover_env()
