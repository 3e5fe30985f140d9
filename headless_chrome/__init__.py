"""Locate, download and launch Chrome with a DevTools debugging port."""

__version__ = "0.1.0"
__all__ = ["executable", "fetcher", "launch", "process"]