"""Options describing how a browser process is launched, and its command line."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from headless_chrome.fetcher import FetcherOptions


def _switch(name: str, *values: str) -> str:
    return f"--{name}={','.join(values)}" if values else f"--{name}"


def _disable(*features: str) -> tuple[str, ...]:
    return tuple(_switch(f"disable-{feature}") for feature in features)


DEFAULT_ARGS: tuple[str, ...] = (
    *_disable("background-networking"),
    _switch("enable-features", "NetworkService", "NetworkServiceInProcess"),
    *_disable(
        "background-timer-throttling",
        "backgrounding-occluded-windows",
        "breakpad",
        "client-side-phishing-detection",
        "component-extensions-with-background-pages",
        "default-apps",
        "dev-shm-usage",
        "extensions",
    ),
    # BlinkGenPropertyTrees is turned off because of a known rendering bug.
    _switch("disable-features", "TranslateUI", "BlinkGenPropertyTrees"),
    *_disable(
        "hang-monitor",
        "ipc-flooding-protection",
        "popup-blocking",
        "prompt-on-repost",
        "renderer-backgrounding",
        "sync",
    ),
    _switch("force-color-profile", "srgb"),
    _switch("metrics-recording-only"),
    _switch("no-first-run"),
    _switch("enable-automation"),
    _switch("password-store", "basic"),
    _switch("use-mock-keychain"),
)


@dataclass
class LaunchOptions:
    """How the browser is run.

    By default a browser binary is located automatically, a free debugging
    port is chosen and the browser starts headless.
    """

    headless: bool = True
    sandbox: bool = True
    devtools: bool = False
    enable_gpu: bool = False
    enable_logging: bool = False
    window_size: tuple[int, int] | None = None
    port: int | None = None
    ignore_certificate_errors: bool = True
    path: Path | None = None
    user_data_dir: Path | None = None
    extensions: list[str | os.PathLike] = field(default_factory=list)
    args: list[str] = field(default_factory=list)
    ignore_default_args: list[str] = field(default_factory=list)
    disable_default_args: bool = False
    fetcher_options: FetcherOptions = field(default_factory=FetcherOptions)
    idle_browser_timeout: float = 30.0
    process_envs: dict[str, str] | None = None
    proxy_server: str | None = None


def _mode_args(options: LaunchOptions):
    if options.devtools:
        yield "--auto-open-devtools-for-tabs"
    elif options.headless:
        yield "--headless"
    if options.ignore_certificate_errors:
        yield "--ignore-certificate-errors"
    if options.enable_logging:
        yield "--enable-logging"
    if not options.enable_gpu:
        yield "--disable-gpu"
    if options.proxy_server:
        yield _switch("proxy-server", options.proxy_server)
    if not options.sandbox:
        yield "--no-sandbox"
        yield "--disable-setuid-sandbox"


def build_args(
    options: LaunchOptions, port: int, user_data_dir: str | os.PathLike
) -> list[str]:
    """Command-line arguments for a browser started with ``options``."""
    args = [
        _switch("remote-debugging-port", str(port)),
        "--verbose",
        _switch("log-level", "0"),
        "--no-first-run",
        _switch("user-data-dir", os.fspath(user_data_dir)),
    ]

    if not options.disable_default_args:
        ignored = set(map(os.fspath, options.ignore_default_args))
        args += [arg for arg in DEFAULT_ARGS if arg not in ignored]

    args += map(os.fspath, options.args)

    if options.window_size is not None:
        args.append(_switch("window-size", *map(str, options.window_size)))

    args += _mode_args(options)
    args += (_switch("load-extension", os.fspath(ext)) for ext in options.extensions)
    return args