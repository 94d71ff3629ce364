"""Deciding whether and where a PDF report gets saved."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol

import typer

from .document import DocumentFormatter
from .errors import FilesystemError
from .i18n import Translator
from .schema import AuditResult

logger = logging.getLogger(__name__)


class Prompter(Protocol):
    def confirm(self, question: str, default: bool) -> bool: ...

    def ask(self, question: str, default: str) -> str: ...


class TyperPrompter:
    """Prompts on the controlling terminal."""

    def confirm(self, question: str, default: bool) -> bool:
        return typer.confirm(question, default=default)

    def ask(self, question: str, default: str) -> str:
        return typer.prompt(question, default=default)


def normalize_pdf_filename(name: str) -> str:
    """Strip ``name`` and make sure it ends in ``.pdf`` (any case)."""
    name = name.strip()
    return name if name.lower().endswith(".pdf") else f"{name}.pdf"


class SaveFlow:
    """CI runs always save under a hostname-derived name; interactive runs ask."""

    def __init__(self, translator: Translator, document: DocumentFormatter,
                 prompter: Optional[Prompter] = None, ci: bool = False):
        self.t = translator
        self.document = document
        self.prompter = prompter or TyperPrompter()
        self.ci = ci

    def choose_filename(self, result: AuditResult) -> Optional[str]:
        """Return the report filename, or ``None`` if the operator declined."""
        if self.ci:
            return result.ci_filename
        if not self.prompter.confirm(self.t("savePdf"), True):
            return None
        raw = self.prompter.ask(self.t("outputFilename"), result.suggested_filename)
        if not raw.strip():
            raw = result.suggested_filename
        return normalize_pdf_filename(raw)

    def run(self, result: AuditResult) -> Optional[Path]:
        filename = self.choose_filename(result)
        if filename is None:
            logger.debug("PDF declined for %s", result.url)
            return None
        if not self.ci:
            typer.echo(self.t("generatingPdf"))
        try:
            path = self.document.render(result, filename)
        except FilesystemError as e:
            typer.secho(self.t("saveFailed", url=result.url, error=str(e)), fg=typer.colors.RED, err=True)
            return None
        typer.secho(self.t("pdfSaved", filename=str(path)), fg=typer.colors.GREEN)
        return path
