"""Locate, download and unpack Chromium snapshot builds."""

from __future__ import annotations

import dataclasses
import logging
import os
import platform as _pyplatform
import shutil
import stat
import subprocess
import sys
import urllib.request
import zipfile
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import platformdirs

log = logging.getLogger(__name__)

CUR_REV = "1095492"
APP_NAME = "headless-chrome"
DEFAULT_HOST = "https://storage.googleapis.com"

_SNAPSHOT_DIRS = {
    "linux": "Linux_x64",
    "mac": "Mac",
    "mac_arm": "Mac_Arm",
    "win": "Win_x64",
}

_EXECUTABLE_PARTS = {
    "linux": ("chrome",),
    "mac": ("Chromium.app", "Contents", "MacOS", "Chromium"),
    "mac_arm": ("Chromium.app", "Contents", "MacOS", "Chromium"),
    "win": ("chrome.exe",),
}


def current_platform() -> str:
    """Name of the snapshot platform for the running host."""
    if sys.platform.startswith("linux"):
        return "linux"
    if sys.platform == "darwin":
        if _pyplatform.machine().lower() in ("arm64", "aarch64"):
            return "mac_arm"
        return "mac"
    if sys.platform in ("win32", "cygwin"):
        return "win"
    raise ValueError(f"Unsupported platform: {sys.platform}")


def _check_platform(platform: str | None) -> str:
    platform = platform or current_platform()
    if platform not in _SNAPSHOT_DIRS:
        raise ValueError(f"Unsupported platform: {platform}")
    return platform


def archive_name(revision: str, platform: str | None = None) -> str:
    """Name of the top-level directory inside a snapshot archive."""
    platform = _check_platform(platform)
    if platform == "linux":
        return "chrome-linux"
    if platform in ("mac", "mac_arm"):
        return "chrome-mac"
    # The Windows archive name changed at r591479.
    try:
        number = int(revision)
    except (TypeError, ValueError):
        return "chrome-win32"
    return "chrome-win" if number > 591_479 else "chrome-win32"


def download_url(revision: str, platform: str | None = None) -> str:
    """URL of the snapshot archive for a revision."""
    platform = _check_platform(platform)
    return (
        f"{DEFAULT_HOST}/chromium-browser-snapshots/{_SNAPSHOT_DIRS[platform]}/"
        f"{revision}/{archive_name(revision, platform)}.zip"
    )


def latest_revision(platform: str | None = None) -> str:
    """Ask the snapshot server for the newest revision of a platform."""
    platform = _check_platform(platform)
    url = f"{DEFAULT_HOST}/chromium-browser-snapshots/{_SNAPSHOT_DIRS[platform]}/LAST_CHANGE"
    with urllib.request.urlopen(url) as response:
        return response.read().decode("utf-8").strip()


@dataclass(frozen=True)
class Revision:
    """A Chromium revision: a specific number, or the latest one."""

    number: str | None = None

    @classmethod
    def specific(cls, number: str | int) -> Revision:
        return cls(str(number))

    @classmethod
    def latest(cls) -> Revision:
        return cls(None)

    @property
    def is_latest(self) -> bool:
        return self.number is None


@dataclass(frozen=True)
class FetcherOptions:
    """Where to look for Chromium and whether it may be downloaded."""

    revision: Revision = Revision.specific(CUR_REV)
    install_dir: Path | None = None
    allow_download: bool = True
    allow_standard_dirs: bool = True

    def with_revision(self, revision: Revision) -> FetcherOptions:
        return dataclasses.replace(self, revision=revision)

    def with_install_dir(self, install_dir: str | os.PathLike | None) -> FetcherOptions:
        return dataclasses.replace(
            self, install_dir=None if install_dir is None else Path(install_dir)
        )

    def with_allow_download(self, allow_download: bool) -> FetcherOptions:
        return dataclasses.replace(self, allow_download=allow_download)

    def with_allow_standard_dirs(self, allow_standard_dirs: bool) -> FetcherOptions:
        return dataclasses.replace(self, allow_standard_dirs=allow_standard_dirs)


def _data_dir() -> Path:
    log.info("Getting project dir")
    return Path(platformdirs.user_data_dir(APP_NAME, appauthor=False))


def _walk(root: Path) -> Iterator[Path]:
    if not root.exists():
        return
    yield root
    for dirpath, dirnames, filenames in os.walk(root):
        for name in (*dirnames, *filenames):
            yield Path(dirpath) / name


def _download_size_mib(url: str) -> int:
    with urllib.request.urlopen(url) as response:
        length = response.headers.get("Content-Length")
    if length is None:
        raise RuntimeError("response doesn't include the content length")
    return int(length) // 2**20


class Fetcher:
    """Finds an installed Chromium revision, downloading it when allowed."""

    def __init__(self, options: FetcherOptions | None = None, platform: str | None = None):
        self.options = options or FetcherOptions()
        self.platform = _check_platform(platform)

    def fetch(self) -> Path:
        """Return the path of the Chromium executable, installing it if needed."""
        revision = self.options.revision
        rev = latest_revision(self.platform) if revision.is_latest else revision.number

        try:
            return self._chrome_path(rev)
        except FileNotFoundError:
            pass

        if self.options.allow_download:
            zip_path = self._download(rev)
            unzip(zip_path)
            return self._chrome_path(rev)

        raise FileNotFoundError("Could not fetch")

    def _search_dirs(self) -> list[Path]:
        dirs = []
        if self.options.install_dir is not None:
            dirs.append(self.options.install_dir)
        if self.options.allow_standard_dirs:
            dirs.append(_data_dir())
        return dirs

    def _base_path(self, revision: str) -> Path:
        for root in self._search_dirs():
            for entry in _walk(root):
                parts = entry.name.split("-")
                if len(parts) == 2 and parts[0] == self.platform and parts[1] == revision:
                    return entry
        raise FileNotFoundError("Could not find an existing revision")

    def _chrome_path(self, revision: str) -> Path:
        path = self._base_path(revision) / archive_name(revision, self.platform)
        return path.joinpath(*_EXECUTABLE_PARTS[self.platform])

    def _download(self, revision: str) -> Path:
        url = download_url(revision, self.platform)
        log.info("Chrome download url: %s", url)
        log.info("Total size of download: %s MiB", _download_size_mib(url))

        if self.options.install_dir is not None:
            directory = self.options.install_dir
        elif self.options.allow_standard_dirs:
            directory = _data_dir()
        else:
            raise RuntimeError("No allowed installation directory")

        path = directory / f"{self.platform}-{revision}.zip"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise OSError(f"Could not create directory at {path.parent}") from err

        log.info("Creating file for download: %s", path)
        with urllib.request.urlopen(url) as response, path.open("wb") as out:
            shutil.copyfileobj(response, out)
        return path


def _extract_with_command(zip_path: Path, extract_path: Path) -> None:
    result = subprocess.run(
        ["unzip", str(zip_path.resolve())],
        cwd=extract_path,
        capture_output=True,
    )
    if result.returncode != 0:
        log.error(
            "Unable to extract zip using unzip command: \n---- stdout:\n%s\n---- stderr:\n%s",
            result.stdout.decode("utf-8", "replace"),
            result.stderr.decode("utf-8", "replace"),
        )


def _extract_with_zipfile(zip_path: Path, extract_path: Path) -> None:
    with zipfile.ZipFile(zip_path) as archive:
        for index, info in enumerate(archive.infolist()):
            if info.comment:
                log.debug("File %d comment: %s", index, info.comment.decode("utf-8", "replace"))
            target = Path(archive.extract(info, extract_path))
            log.debug("File %d extracted to %s (%d bytes)", index, target, info.file_size)
            mode = info.external_attr >> 16
            if mode and os.name == "posix":
                os.chmod(target, stat.S_IMODE(mode))


def unzip(zip_path: str | os.PathLike) -> Path:
    """Extract an archive next to itself into a folder named by its stem, then delete it."""
    zip_path = Path(zip_path)
    if not zip_path.stem:
        raise ValueError("zip_path does not have a file stem")
    extract_path = zip_path.parent / zip_path.stem
    extract_path.mkdir(parents=True, exist_ok=True)

    log.info("Extracting (this can take a while): %s", extract_path)
    if sys.platform == "darwin":
        _extract_with_command(zip_path, extract_path)
    else:
        _extract_with_zipfile(zip_path, extract_path)

    log.info("Cleaning up")
    try:
        zip_path.unlink()
    except OSError:
        log.info("Failed to delete zip")
    return extract_path