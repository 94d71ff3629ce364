"""PDF reporting for a single audit result.

The report is laid out as HTML through a Jinja2 template and printed to PDF
by headless Chromium, so pagination and fonts come from the browser.
"""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from jinja2 import Template
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from .config import Settings
from .errors import FilesystemError
from .i18n import Translator
from .schema import AuditResult

logger = logging.getLogger(__name__)

PDF_COLORS = {
    "critical": "red",
    "serious": "#FFA500",
    "moderate": "blue",
    "minor": "gray",
}
DEFAULT_PDF_COLOR = "black"


def pdf_color(impact: str) -> str:
    return PDF_COLORS.get(impact, DEFAULT_PDF_COLOR)


TEMPLATE = """<!DOCTYPE html>
<html lang="{{ lang }}">
<head>
<meta charset="UTF-8" />
<title>{{ t('pdfTitle') }}</title>
<style>
body { font-family: "DejaVu Sans", Helvetica, Arial, sans-serif; font-size: 10pt; color: black; margin: 0; }
h1 { font-size: 20pt; margin: 0 0 .4rem; }
.meta { font-size: 10pt; color: gray; margin: 0; }
.spacer { height: 1.5rem; }
.no-issues { font-size: 14pt; font-weight: bold; color: green; }
.found { font-size: 14pt; font-weight: bold; color: red; margin-bottom: 1rem; }
.issue { margin-bottom: 1.2rem; page-break-inside: avoid; }
.issue .title { font-size: 12pt; font-weight: bold; margin: 0; }
.issue .impact { font-size: 11pt; font-style: italic; margin: 0; }
.issue p { margin: 0; }
footer { margin-top: 1.5rem; font-size: 9pt; font-style: italic; color: gray; text-align: center; }
</style>
</head>
<body>
<h1>{{ t('pdfTitle') }}</h1>
<p class="meta">{{ t('pdfGenerated') }}: {{ generated_at }}</p>
<p class="meta">{{ t('pdfUrl') }}: {{ result.normalized_url }}</p>
<div class="spacer"></div>
{% if not result.issues %}
<p class="no-issues">{{ t('pdfNoIssues') }}</p>
{% else %}
<p class="found">{{ t('pdfFoundIssues', count=result.issues|length) }}</p>
{% for issue in result.issues %}
<section class="issue">
  <p class="title">{{ loop.index }}. {{ issue.description }}</p>
  <p class="impact" style="color: {{ color(issue.impact) }}">{{ t('pdfImpact') }}: {{ issue.impact }}</p>
  <p>{{ t('pdfHelp') }}: {{ issue.help }}</p>
  <p>{{ t('pdfTags') }}: {{ issue.tags|join(', ') }}</p>
</section>
{% endfor %}
{% endif %}
<footer>{{ t('pdfFooterNote') }}</footer>
</body>
</html>
"""


def _print_pdf(html: str, out_pdf: Path) -> None:
    # page.pdf() is only supported by headless Chromium
    with sync_playwright() as p:
        browser = p.chromium.launch(headless=True)
        try:
            page = browser.new_page()
            page.set_content(html, wait_until="load")
            page.pdf(
                path=str(out_pdf),
                format="A4",
                print_background=True,
                margin={"top": "50px", "bottom": "50px", "left": "50px", "right": "50px"},
            )
        finally:
            browser.close()


class DocumentFormatter:
    def __init__(self, translator: Translator, settings: Optional[Settings] = None):
        self.t = translator
        self.settings = settings or Settings()

    def build_html(self, result: AuditResult, generated_at: Optional[datetime] = None) -> str:
        generated_at = generated_at or datetime.now()
        return Template(TEMPLATE, autoescape=True).render(
            lang=self.t.lang,
            t=self.t,
            color=pdf_color,
            result=result,
            generated_at=generated_at.strftime("%Y-%m-%d %H:%M:%S"),
        )

    def target_path(self, output_path: str) -> Path:
        """Resolve ``output_path`` under the reports root.

        Raises ``FilesystemError`` if the path would leave the reports root.
        """
        root = Path(self.settings.reports_dir)
        rel = Path(output_path)
        if rel.is_absolute():
            rel = rel.relative_to(rel.anchor)
        candidate = root / rel
        if root.resolve() not in candidate.resolve().parents:
            raise FilesystemError(f"{output_path}: outside {root}")
        return candidate

    def render(self, result: AuditResult, output_path: str) -> Path:
        """Write the PDF for ``result`` to ``<reports_dir>/<output_path>``.

        Raises ``FilesystemError`` if the target is outside the reports root
        or the directory or file cannot be written.
        """
        out_pdf = self.target_path(output_path)
        html = self.build_html(result)
        try:
            out_pdf.parent.mkdir(parents=True, exist_ok=True)
            _print_pdf(html, out_pdf)
        except OSError as e:
            raise FilesystemError(f"{out_pdf}: {e}") from e
        except PlaywrightError as e:
            raise FilesystemError(f"{out_pdf}: {e.message}") from e
        logger.debug("Wrote %s", out_pdf)
        return out_pdf
