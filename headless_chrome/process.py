"""Start a browser process and discover its DevTools WebSocket URL."""

from __future__ import annotations

import dataclasses
import logging
import os
import random
import re
import shutil
import socket
import subprocess
import sys
import tempfile
import threading
import weakref
from collections.abc import Iterable
from pathlib import Path
from urllib.parse import urlsplit

from headless_chrome.fetcher import Fetcher
from headless_chrome.launch import LaunchOptions, build_args

log = logging.getLogger(__name__)

WS_URL_TIMEOUT = 30.0
MAX_LAUNCH_ATTEMPTS = 10

_PORT_TAKEN_RE = re.compile(r"ERROR.*bind\(\)")
_LISTENING_RE = re.compile(r"listening on (.*/devtools/browser/.*)$")
_ROOT_SANDBOX = "Running as root without --no-sandbox is not supported"


class ChromeLaunchError(Exception):
    """The browser could not be started."""


class PortOpenTimeout(ChromeLaunchError):
    def __init__(self) -> None:
        super().__init__(
            "Chrome launched, but didn't give us a WebSocket URL before we timed out"
        )


class NoAvailablePorts(ChromeLaunchError):
    def __init__(self) -> None:
        super().__init__("There are no available ports between 8000 and 9000 for debugging")


class DebugPortInUse(ChromeLaunchError):
    def __init__(self) -> None:
        super().__init__("The chosen debugging port is already in use")


class RunningAsRootWithoutNoSandbox(ChromeLaunchError):
    def __init__(self) -> None:
        super().__init__("You need to set the sandbox(false) option when running as root")


def ws_url_from_lines(lines: Iterable[str]) -> str | None:
    """Scan browser output for the DevTools URL.

    Returns the URL, or None when the output ends without one. Raises when the
    output reports a known launch failure.
    """
    for raw in lines:
        line = raw.rstrip("\r\n")
        log.debug("Chrome output: %s", line)
        if _ROOT_SANDBOX in line:
            raise RunningAsRootWithoutNoSandbox()
        if _PORT_TAKEN_RE.search(line):
            raise DebugPortInUse()
        match = _LISTENING_RE.search(line)
        if match:
            return match.group(1)
    return None


def port_is_available(port: int) -> bool:
    """Whether a TCP listener can bind to ``port`` on 127.0.0.1."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind(("127.0.0.1", port))
    except OSError:
        return False
    return True


def get_available_port() -> int | None:
    """A random free port between 8000 and 8999, or None if none is free."""
    ports = list(range(8000, 9000))
    random.shuffle(ports)
    return next((port for port in ports if port_is_available(port)), None)


def _cleanup(popen: subprocess.Popen, temp_dir: str | None) -> None:
    log.info("Killing Chrome. PID: %s", popen.pid)
    try:
        popen.kill()
        popen.wait()
    except OSError:
        pass
    if popen.stderr is not None:
        try:
            popen.stderr.close()
        except OSError:
            pass
    if temp_dir is not None:
        try:
            shutil.rmtree(temp_dir)
        except OSError as err:
            log.warning("Failed to close temporary directory: %s", err)


class _Launched:
    """One started browser process with its optional temporary profile."""

    def __init__(self, popen: subprocess.Popen, temp_dir: str | None, user_data_dir: Path):
        self.popen = popen
        self.temp_dir = temp_dir
        self.user_data_dir = user_data_dir
        self.finalizer = weakref.finalize(self, _cleanup, popen, temp_dir)


def _start_process(options: LaunchOptions) -> _Launched:
    port = options.port
    if port is None:
        port = get_available_port()
        if port is None:
            raise NoAvailablePorts()

    temp_dir = None
    if options.user_data_dir is not None:
        user_data_dir = Path(options.user_data_dir)
    else:
        # A fresh profile directory makes every launch a new browser instance.
        temp_dir = tempfile.mkdtemp(prefix="headless-chrome-profile")
        user_data_dir = Path(temp_dir)
    log.debug("Chrome will have profile: %s", user_data_dir)

    if options.path is None:
        if temp_dir is not None:
            shutil.rmtree(temp_dir, ignore_errors=True)
        raise ValueError("Chrome path required")

    args = build_args(options, port, user_data_dir)
    log.info("Launching Chrome binary at %s", options.path)
    log.debug("with CLI arguments: %s", args)

    env = None
    if options.process_envs is not None:
        env = {**os.environ, **options.process_envs}

    kwargs = {}
    if sys.platform == "win32":
        kwargs["creationflags"] = getattr(subprocess, "CREATE_NO_WINDOW", 0x08000000)

    try:
        popen = subprocess.Popen(
            [os.fspath(options.path), *args],
            stderr=subprocess.PIPE,
            env=env,
            text=True,
            errors="replace",
            **kwargs,
        )
    except OSError:
        if temp_dir is not None:
            shutil.rmtree(temp_dir, ignore_errors=True)
        raise
    return _Launched(popen, temp_dir, user_data_dir)


def _ws_url_from_output(popen: subprocess.Popen, timeout: float) -> str:
    outcome: dict[str, object] = {}

    def worker() -> None:
        try:
            outcome["url"] = ws_url_from_lines(popen.stderr)
        except Exception as err:  # handed back to the launching thread
            outcome["error"] = err

    thread = threading.Thread(target=worker, daemon=True)
    thread.start()
    thread.join(timeout)
    if thread.is_alive():
        raise PortOpenTimeout()
    if "error" in outcome:
        raise outcome["error"]
    url = outcome.get("url")
    if url is None:
        raise PortOpenTimeout()
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        raise ValueError(f"Invalid WebSocket URL: {url}")
    return url


class Process:
    """A running browser whose DevTools endpoint is known.

    The process is killed, and any temporary profile removed, on ``close``,
    when leaving a ``with`` block, or when the object is garbage collected.
    """

    def __init__(self, launch_options: LaunchOptions | None = None):
        options = launch_options or LaunchOptions()
        if options.path is None:
            path = Fetcher(options.fetcher_options).fetch()
            options = dataclasses.replace(options, path=path)

        launched = _start_process(options)
        log.info("Started Chrome. PID: %s", launched.popen.pid)

        attempts = 0
        while True:
            if attempts > MAX_LAUNCH_ATTEMPTS:
                launched.finalizer()
                raise NoAvailablePorts()
            try:
                url = _ws_url_from_output(launched.popen, WS_URL_TIMEOUT)
                log.debug("Found debugging WS URL: %s", url)
                break
            except Exception as error:
                log.debug("Problem getting WebSocket URL from Chrome: %s", error)
                launched.finalizer()
                if isinstance(error, RunningAsRootWithoutNoSandbox) or options.port is not None:
                    raise
                launched = _start_process(options)
            log.debug("Trying again to find available debugging port. Attempts: %d", attempts)
            attempts += 1

        if launched.popen.stderr is not None:
            launched.popen.stderr.close()

        self._launched = launched
        self.debug_ws_url: str = url
        self.user_data_dir: Path = launched.user_data_dir

    @property
    def pid(self) -> int:
        return self._launched.popen.pid

    @property
    def running(self) -> bool:
        return self._launched.popen.poll() is None

    def close(self) -> None:
        """Kill the browser and remove its temporary profile."""
        self._launched.finalizer()

    def __enter__(self) -> Process:
        return self

    def __exit__(self, *args) -> None:
        self.close()