"""checkaccess

Command line accessibility checker: loads pages in headless Chromium, runs
axe-core against them and reports violations on the console and as PDF.

Primary entrypoints:
 - cli.py (Typer CLI)
 - batch.py (multi-URL pipeline)
 - browser.py (Playwright + axe-core invocation)
 - terminal.py / document.py (console and PDF reports)
"""

__all__ = [
    "batch",
    "browser",
    "document",
    "terminal",
]
