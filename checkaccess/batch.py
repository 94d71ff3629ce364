"""Sequential multi-URL audit pipeline."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import typer

from .browser import run_audit
from .config import Settings
from .document import DocumentFormatter
from .errors import UsageError
from .i18n import Translator
from .interaction import Prompter, SaveFlow
from .schema import AuditResult, BatchRun, normalize_url
from .terminal import TerminalFormatter

logger = logging.getLogger(__name__)

Auditor = Callable[[str, Settings], AuditResult]


def resolve_urls(inputs: Sequence[str]) -> List[str]:
    """Turn CLI arguments into the list of URLs to audit.

    A single argument naming an existing file is read as one URL per line;
    blank lines and ``#`` comments are skipped. Anything else is taken
    verbatim. May return an empty list; raises ``OSError`` if the list file
    cannot be read.
    """
    inputs = [i.strip() for i in inputs if i and i.strip()]
    if len(inputs) == 1 and Path(inputs[0]).is_file():
        text = Path(inputs[0]).read_text(encoding="utf-8")
        lines = (line.strip() for line in text.splitlines())
        return [line for line in lines if line and not line.startswith("#")]
    return inputs


def _validated_urls(inputs: Sequence[str], t: Translator) -> List[str]:
    try:
        urls = resolve_urls(inputs)
    except (OSError, UnicodeDecodeError) as e:
        raise UsageError(t("unreadableFile", path=inputs[0], error=e)) from e
    if not urls:
        raise UsageError(t("provideUrls"))
    for url in urls:
        try:
            normalize_url(url)
        except UsageError as e:
            raise UsageError(t("usageError", error=e)) from e
    return urls


def _report_error(result: AuditResult, t: Translator) -> None:
    if result.error_kind == "bad_status":
        message = t("badResponse", url=result.url, code=result.status_code or "Unknown")
    elif result.error_kind == "navigation":
        message = t("failToLoad", url=result.url, error=result.error)
    else:
        message = t("errorFor", url=result.url, error=result.error)
    typer.secho(message, fg=typer.colors.RED, err=True)


def run_batch(
    inputs: Sequence[str],
    ci: bool,
    translator: Translator,
    settings: Optional[Settings] = None,
    prompter: Optional[Prompter] = None,
    auditor: Optional[Auditor] = None,
    document: Optional[DocumentFormatter] = None,
) -> BatchRun:
    """Audit every resolved URL in turn and route each result to the reports.

    Raises ``UsageError`` before any audit if there is nothing valid to audit.
    Per-URL failures are reported and recorded; the loop always continues.
    """
    t = translator
    settings = settings or Settings()
    auditor = auditor or run_audit
    urls = _validated_urls(inputs, t)
    terminal = TerminalFormatter(t)
    save_flow = SaveFlow(t, document or DocumentFormatter(t, settings), prompter=prompter, ci=ci)
    batch = BatchRun()

    for url in urls:
        typer.echo(t("auditing", url=normalize_url(url)))
        result = auditor(url, settings)
        if not result.ok:
            _report_error(result, t)
            batch.record(result, failed=True)
            continue
        typer.secho(t("finishedAudit", url=result.url), fg=typer.colors.GREEN)
        typer.secho(f"\n{t('resultHeader', url=result.url)}\n", fg=typer.colors.BLUE)
        terminal.echo(result)
        batch.record(result, failed=bool(result.issues))
        if result.issues:
            save_flow.run(result)

    logger.debug("Batch finished: %d urls, failures=%s", len(urls), batch.has_failures)
    return batch
