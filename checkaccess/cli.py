"""Typer CLI for auditing pages and saving PDF reports."""
import logging
import sys
from typing import List, Optional

import click
import typer

from .batch import run_batch
from .config import load_settings
from .errors import ConfigurationError, UsageError
from .i18n import Translator, available_languages

app = typer.Typer(add_completion=False, pretty_exceptions_enable=False)

LANG_HELP = f"Language code (available: {', '.join(available_languages())})."
EPILOG = "Examples: checkaccess https://example.com  |  checkaccess urls.txt --ci --lang=fr"


@app.command(epilog=EPILOG)
def check(
    targets: Optional[List[str]] = typer.Argument(None, help="URLs to audit, or a file with one URL per line.", show_default=False),
    ci: bool = typer.Option(False, "--ci", help="Run in CI mode (no prompts, auto-save PDF, exit 1 on any failure)."),
    lang: Optional[str] = typer.Option(None, "--lang", help=LANG_HELP),
    config: Optional[str] = typer.Option(None, "--config", help="YAML settings file (default: ./checkaccess.yaml if present)."),
    verbose: bool = typer.Option(False, "--verbose", help="Log debug details to stderr."),
):
    """Audit web pages for accessibility violations with axe-core."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(message)s",
            datefmt="%H:%M:%S",
        )
    try:
        settings = load_settings(config, lang=lang)
        translator = Translator(settings.lang)
    except ConfigurationError as e:
        typer.secho(f"Configuration error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    try:
        batch = run_batch(targets or [], ci, translator, settings)
    except UsageError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    raise typer.Exit(batch.exit_code(ci))


def main():
    # Click reports bad flags with exit status 2; usage errors exit 1 here.
    try:
        code = app(standalone_mode=False)
    except click.UsageError as e:
        e.show()
        sys.exit(1)
    except click.Abort:
        typer.echo("Aborted!", err=True)
        sys.exit(1)
    sys.exit(code or 0)


if __name__ == "__main__":  # pragma: no cover
    main()
