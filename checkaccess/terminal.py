"""Console rendering of a single audit result."""
from __future__ import annotations

from typing import List, NamedTuple, Optional

import typer

from .i18n import Translator
from .schema import AuditResult

# minor is dimmed; unknown and unrecognised impacts print white
TERMINAL_COLORS = {
    "critical": typer.colors.RED,
    "serious": typer.colors.YELLOW,
    "moderate": typer.colors.BLUE,
    "minor": typer.colors.BRIGHT_BLACK,
    "unknown": typer.colors.WHITE,
}


def impact_color(impact: str) -> str:
    return TERMINAL_COLORS.get(impact, TERMINAL_COLORS["unknown"])


class StyledLine(NamedTuple):
    text: str
    fg: Optional[str] = None
    bold: bool = False


class TerminalFormatter:
    def __init__(self, translator: Translator):
        self.t = translator

    def format(self, result: AuditResult) -> List[StyledLine]:
        """Return the lines describing ``result``'s issues and severity tally.

        A result without issues yields only the no-violations line.
        """
        t = self.t
        if not result.issues:
            return [StyledLine(t("noViolations"), typer.colors.GREEN)]
        lines: List[StyledLine] = []
        for n, issue in enumerate(result.issues, start=1):
            lines.append(StyledLine(f"[{n}] {issue.description}", typer.colors.CYAN))
            lines.append(StyledLine(f"  {t('pdfImpact')}: {issue.impact}", impact_color(issue.impact)))
            lines.append(StyledLine(f"  {t('pdfHelp')}: {issue.help}"))
            lines.append(StyledLine(f"  {t('pdfTags')}: {', '.join(issue.tags)}"))
            lines.append(StyledLine(""))
        lines.append(StyledLine(t("summary"), typer.colors.BRIGHT_BLACK))
        for impact, count in result.tally.items():
            lines.append(StyledLine(f"  {impact}: {count}", impact_color(impact)))
        return lines

    def echo(self, result: AuditResult) -> None:
        for line in self.format(result):
            typer.secho(line.text, fg=line.fg, bold=line.bold)
