"""Find an installed Chrome, Chromium or Edge executable."""

from __future__ import annotations

import os
import shutil
import sys
from pathlib import Path


def _channels(base: str, *channels: str) -> tuple[str, ...]:
    return tuple(f"{base}-{channel}" for channel in channels)


CANDIDATE_NAMES: tuple[str, ...] = (
    *_channels("google-chrome", "stable", "beta", "dev", "unstable"),
    "chromium",
    "chromium-browser",
    *_channels("microsoft-edge", "stable", "beta", "dev"),
    "chrome",
    "chrome-browser",
    "msedge",
    "microsoft-edge",
)

_MAC_APPLICATIONS = (
    "Google Chrome",
    "Google Chrome Beta",
    "Google Chrome Dev",
    "Google Chrome Canary",
    "Chromium",
    "Microsoft Edge",
    "Microsoft Edge Beta",
    "Microsoft Edge Dev",
    "Microsoft Edge Canary",
)

MAC_APPLICATION_PATHS: tuple[Path, ...] = tuple(
    Path("/Applications") / f"{app}.app" / "Contents" / "MacOS" / app
    for app in _MAC_APPLICATIONS
)

WINDOWS_FALLBACK_PATHS: tuple[str, ...] = (
    r"C:\Program Files (x86)\Microsoft\Edge\Application\msedge.exe",
)

_REGISTRY_KEY = r"SOFTWARE\Microsoft\Windows\CurrentVersion\App Paths\chrome.exe"


def _chrome_path_from_registry() -> Path | None:
    try:
        import winreg
    except ImportError:
        return None
    try:
        with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, _REGISTRY_KEY) as key:
            value, _ = winreg.QueryValueEx(key, "")
    except OSError:
        return None
    return Path(value) if value else None


def _platform_candidates():
    """Yield install locations specific to the running platform."""
    if sys.platform == "darwin":
        yield from MAC_APPLICATION_PATHS
    elif sys.platform == "win32":
        registry_path = _chrome_path_from_registry()
        if registry_path is not None:
            yield registry_path
        yield from map(Path, WINDOWS_FALLBACK_PATHS)


def default_executable() -> Path:
    """Return the path of a Chrome-like browser executable.

    The ``CHROME`` environment variable wins if it names an existing file;
    otherwise well-known executable names are looked up on ``PATH``, then
    platform-specific install locations are tried.
    """
    env_path = os.environ.get("CHROME")
    if env_path and Path(env_path).exists():
        return Path(env_path)

    found = next(filter(None, map(shutil.which, CANDIDATE_NAMES)), None)
    if found:
        return Path(found)

    existing = next((p for p in _platform_candidates() if p.exists()), None)
    if existing is not None:
        return existing

    raise FileNotFoundError("Could not auto detect a chrome executable")