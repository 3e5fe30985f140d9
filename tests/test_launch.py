from pathlib import Path

from headless_chrome.fetcher import CUR_REV
from headless_chrome.launch import DEFAULT_ARGS, LaunchOptions, build_args

LEADING = [
    "--remote-debugging-port=8000",
    "--verbose",
    "--log-level=0",
    "--no-first-run",
    "--user-data-dir=/tmp/p",
]


def test_default_options_have_no_user_data_dir():
    options = LaunchOptions()
    assert options.user_data_dir is None
    assert options.headless is True
    assert options.sandbox is True
    assert options.idle_browser_timeout == 30.0
    assert options.fetcher_options.revision.number == CUR_REV


def test_default_command_line_length():
    args = build_args(LaunchOptions(), 8000, "/tmp/p")
    assert len(args) == 5 + 23 + 3
    assert args[5] == "--disable-background-networking"
    assert args[6] == "--enable-features=NetworkService,NetworkServiceInProcess"
    assert args[15] == "--disable-features=TranslateUI,BlinkGenPropertyTrees"
    assert args[27] == "--use-mock-keychain"


def test_leading_args_and_defaults():
    args = build_args(LaunchOptions(), 8123, Path("/tmp/profile"))
    assert args[:5] == [
        "--remote-debugging-port=8123",
        "--verbose",
        "--log-level=0",
        "--no-first-run",
        "--user-data-dir=/tmp/profile",
    ]
    assert args[5 : 5 + len(DEFAULT_ARGS)] == list(DEFAULT_ARGS)
    assert args[5 + len(DEFAULT_ARGS) :] == [
        "--headless",
        "--ignore-certificate-errors",
        "--disable-gpu",
    ]


def test_ignore_default_args_removes_them():
    options = LaunchOptions(ignore_default_args=["--disable-extensions", "--disable-sync"])
    args = build_args(options, 8000, "/tmp/p")
    assert "--disable-extensions" not in args
    assert "--disable-sync" not in args
    assert "--disable-breakpad" in args
    assert len(args) == 5 + 21 + 3


def test_disable_default_args():
    args = build_args(LaunchOptions(disable_default_args=True), 8000, "/tmp/p")
    assert args == LEADING + [
        "--headless",
        "--ignore-certificate-errors",
        "--disable-gpu",
    ]


def test_devtools_overrides_headless():
    args = build_args(LaunchOptions(headless=True, devtools=True), 8000, "/tmp/p")
    assert "--headless" not in args
    assert "--auto-open-devtools-for-tabs" in args


def test_not_headless():
    args = build_args(LaunchOptions(headless=False), 8000, "/tmp/p")
    assert "--headless" not in args
    assert "--auto-open-devtools-for-tabs" not in args


def test_extra_options_order():
    options = LaunchOptions(
        args=["--mute-audio"],
        window_size=(800, 600),
        enable_logging=True,
        enable_gpu=True,
        ignore_certificate_errors=False,
        proxy_server="127.0.0.1:3128",
        sandbox=False,
        extensions=["ext/one", Path("ext/two")],
        disable_default_args=True,
    )
    args = build_args(options, 8000, "/tmp/p")
    assert args[:5] == LEADING
    assert args[5:] == [
        "--mute-audio",
        "--window-size=800,600",
        "--headless",
        "--enable-logging",
        "--proxy-server=127.0.0.1:3128",
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--load-extension=ext/one",
        "--load-extension=ext/two",
    ]