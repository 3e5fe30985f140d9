import os
import stat
import sys
from pathlib import Path

import pytest

from headless_chrome.executable import CANDIDATE_NAMES, default_executable


def _make_executable(directory: Path, name: str) -> Path:
    path = directory / name
    path.write_text("#!/bin/sh\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def test_chrome_env_var_wins(tmp_path, monkeypatch):
    binary = tmp_path / "my-browser"
    binary.write_text("")
    monkeypatch.setenv("CHROME", str(binary))
    assert default_executable() == binary


def test_missing_env_path_falls_back_to_path_search(tmp_path, monkeypatch):
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    expected = _make_executable(bin_dir, "chromium")
    monkeypatch.setenv("CHROME", str(tmp_path / "does-not-exist"))
    monkeypatch.setenv("PATH", str(bin_dir))
    assert Path(default_executable()).resolve() == expected.resolve()


def test_earlier_candidate_names_are_preferred(tmp_path, monkeypatch):
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    _make_executable(bin_dir, "chrome")
    preferred = _make_executable(bin_dir, "google-chrome-stable")
    monkeypatch.delenv("CHROME", raising=False)
    monkeypatch.setenv("PATH", str(bin_dir))
    result = default_executable()
    assert result.name == preferred.name
    assert CANDIDATE_NAMES.index(result.name) < CANDIDATE_NAMES.index("chrome")


def test_raises_when_nothing_found(tmp_path, monkeypatch):
    empty = tmp_path / "empty"
    empty.mkdir()
    monkeypatch.delenv("CHROME", raising=False)
    monkeypatch.setenv("PATH", str(empty))
    monkeypatch.setattr(sys, "platform", "linux")
    with pytest.raises(FileNotFoundError, match="Could not auto detect a chrome executable"):
        default_executable()