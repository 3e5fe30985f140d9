[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "headless_chrome"
version = "0.1.0"
description = "Locate, download and launch Chrome or Chromium with a remote debugging port"
requires-python = ">=3.10"
dependencies = [
    "platformdirs",
]
keywords = ["chrome", "chromium", "headless", "devtools", "browser", "automation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Browsers",
    "Topic :: Software Development :: Testing",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["headless_chrome"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
