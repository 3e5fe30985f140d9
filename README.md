# headless_chrome

Find, fetch and start a Chrome or Chromium browser with its DevTools
remote debugging port open, and get back the WebSocket URL to drive it.

## Installing

```
pip install .
```

Install the test extra to run the test suite:

```
pip install ".[test]"
pytest
```

## Finding an installed browser

`headless_chrome.executable.default_executable()` returns the path of an
installed browser. The `CHROME` environment variable wins if it names an
existing file. Otherwise the names in `CANDIDATE_NAMES` (Google Chrome,
Chromium and Microsoft Edge in their various channels) are looked up on
`PATH`, followed by the usual application paths on macOS and the registry
and Edge install path on Windows. If nothing is found it raises
`FileNotFoundError`.

## Fetching a Chromium snapshot

`headless_chrome.fetcher.Fetcher` looks for a Chromium snapshot that is
already installed, and downloads and unpacks one if none is found and
downloading is allowed:

```python
from headless_chrome.fetcher import Fetcher, FetcherOptions, Revision

options = (
    FetcherOptions()
    .with_revision(Revision.latest())
    .with_install_dir("/opt/chromium")
    .with_allow_download(True)
)
chrome_path = Fetcher(options).fetch()
```

`FetcherOptions` is immutable; each `with_*` method returns a new copy.
By default it asks for the pinned revision `CUR_REV`
(`Revision.specific(...)` picks another one). It searches the given install
directory first and then the per-user data directory;
`with_allow_standard_dirs(False)` leaves out the data directory. An
installation is recognised by a directory named `<platform>-<revision>`.
When nothing is found and downloading is not allowed, `fetch()` raises
`FileNotFoundError`.

The module also exposes the pieces it is built from:
`current_platform()` (`linux`, `mac`, `mac_arm` or `win`),
`archive_name(revision, platform)`, `download_url(revision, platform)`,
`latest_revision(platform)` and `unzip(zip_path)`, which extracts an archive
into a folder named after it and deletes the archive.

## Launching

`headless_chrome.launch.LaunchOptions` is a dataclass describing how the
browser is started: `headless`, `sandbox`, `devtools`, `enable_gpu`,
`enable_logging`, `window_size`, `port`, `ignore_certificate_errors`,
`path`, `user_data_dir`, `extensions`, `args`, `ignore_default_args`,
`disable_default_args`, `fetcher_options`, `idle_browser_timeout`,
`process_envs` and `proxy_server`.
`build_args(options, port, user_data_dir)` returns the command line those
options produce; `DEFAULT_ARGS` holds the switches added unless
`disable_default_args` is set or they are listed in `ignore_default_args`.

`headless_chrome.process.Process` starts the browser and waits up to 30
seconds for it to report its debugging WebSocket URL. When `path` is not
set it calls `Fetcher(options.fetcher_options).fetch()`, which may download
a snapshot; pass `path=default_executable()` to use an installed browser
instead. Without a fixed `port` it picks a free one between 8000 and 8999,
and if the browser does not report a URL it starts a fresh one with a new
port, up to ten more times. Without `user_data_dir` each launch gets a new
temporary profile directory.

Use it as a context manager so the browser is killed and its temporary
profile removed when you are done:

```python
from headless_chrome.executable import default_executable
from headless_chrome.launch import LaunchOptions
from headless_chrome.process import Process

options = LaunchOptions(path=default_executable(), window_size=(1280, 800))
with Process(options) as chrome:
    print(chrome.pid, chrome.debug_ws_url)
```

A `Process` also has `user_data_dir`, `running` and `close()`.

Failures raise subclasses of `ChromeLaunchError`: `PortOpenTimeout`,
`NoAvailablePorts`, `DebugPortInUse` and `RunningAsRootWithoutNoSandbox`.
The last one means `sandbox=False` is needed when running as root.
`ws_url_from_lines(lines)`, `get_available_port()` and
`port_is_available(port)` are available on their own.

## What it does not do

The package stops at a running browser and its DevTools WebSocket URL. It
has no DevTools protocol client: it does not open tabs, navigate, evaluate
scripts, take screenshots or print pages. Connect to `debug_ws_url` with a
WebSocket client of your choice to do that.