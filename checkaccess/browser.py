"""Bridge for driving headless Chromium + axe-core through Playwright.

The API is intentionally small: ``run_audit`` loads one URL in a fresh
browser, runs axe-core against it and returns an ``AuditResult``. Load and
engine failures are recorded on the result instead of raised, so a batch
can keep going.
"""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright
from pydantic import ValidationError

from .config import Settings
from .errors import NavigationError, RuleEngineError
from .schema import AuditResult, Issue, normalize_url

logger = logging.getLogger(__name__)

# Only the fields we report cross the page boundary.
AXE_RUN_SCRIPT = """async () => {
    const results = await axe.run(document, { resultTypes: ['violations'] });
    return {
        violations: results.violations.map(v => ({
            id: v.id,
            impact: v.impact,
            description: v.description,
            help: v.help,
            helpUrl: v.helpUrl,
            tags: v.tags,
        })),
    };
}"""

Engine = Callable[[Any], Dict[str, Any]]


class AxeEngine:
    """Injects axe-core into a loaded page and runs it.

    ``source`` is either a local ``axe.min.js`` path or a URL to fetch it from.
    """

    def __init__(self, source: str, timeout_ms: int = 15000):
        self.source = source
        self.timeout_ms = timeout_ms

    def __call__(self, page) -> Dict[str, Any]:
        local = Path(self.source)
        try:
            if local.is_file():
                page.add_script_tag(path=str(local))
            else:
                page.add_script_tag(url=self.source)
            page.wait_for_function("typeof window.axe !== 'undefined'", timeout=self.timeout_ms)
            return page.evaluate(AXE_RUN_SCRIPT)
        except PlaywrightError as e:
            raise RuleEngineError(e.message) from e


def _navigate(page, url: str, settings: Settings) -> None:
    try:
        response = page.goto(url, wait_until=settings.wait_until, timeout=settings.timeout_ms)
    except PlaywrightError as e:
        raise NavigationError(e.message) from e
    if response is None:
        raise NavigationError("Bad response: Unknown", kind="bad_status")
    if not response.ok:
        raise NavigationError(f"Bad response: {response.status}", status_code=response.status, kind="bad_status")


def _issues_from(raw: Any):
    if not isinstance(raw, dict):
        raise RuleEngineError(f"Unexpected axe result: {type(raw).__name__}")
    violations = raw.get("violations") or []
    if not isinstance(violations, list):
        raise RuleEngineError(f"Unexpected axe violations: {type(violations).__name__}")
    try:
        return [Issue(**v) for v in violations if isinstance(v, dict)]
    except ValidationError as e:
        raise RuleEngineError(f"Unexpected axe result: {e}") from e


def _audit_page(browser, target: str, settings: Settings, engine: Engine):
    try:
        page = browser.new_page()
    except PlaywrightError as e:
        raise NavigationError(e.message) from e
    _navigate(page, target, settings)
    return _issues_from(engine(page))


def run_audit(url: str, settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> AuditResult:
    """Audit a single URL in its own browser session.

    ``url`` is validated by ``normalize_url`` up front; an unparseable URL
    raises ``UsageError`` before any browser starts. The browser is closed
    on every path out of here.
    """
    settings = settings or Settings()
    engine = engine or AxeEngine(settings.axe_source, settings.timeout_ms)
    target = normalize_url(url)
    start = time.time()
    with sync_playwright() as p:
        try:
            browser = p.chromium.launch(headless=settings.headless)
        except PlaywrightError as e:
            return AuditResult.for_url(url, error=e.message, error_kind="navigation")
        try:
            issues = _audit_page(browser, target, settings, engine)
        except NavigationError as e:
            logger.debug("Navigation to %s failed after %.2fs: %s", target, time.time() - start, e)
            return AuditResult.for_url(url, error=str(e), error_kind=e.kind, status_code=e.status_code)
        except RuleEngineError as e:
            logger.debug("axe-core failed on %s: %s", target, e)
            return AuditResult.for_url(url, error=str(e), error_kind="rule_engine")
        finally:
            browser.close()
    logger.debug("Audited %s in %.2fs: %d violations", target, time.time() - start, len(issues))
    return AuditResult.for_url(url, issues=issues)


__all__ = ["run_audit", "AxeEngine", "AXE_RUN_SCRIPT"]
