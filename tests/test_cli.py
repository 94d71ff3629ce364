import sys

import pytest
from typer.testing import CliRunner

from checkaccess import cli, document
from checkaccess.cli import app
from checkaccess.schema import AuditResult, Issue

# We'll monkeypatch the browser-facing pieces to avoid launching Chromium


def fake_run_audit(url, settings):
    if url.startswith("bad"):
        issues = [
            Issue(description="Images must have alternate text", help="Add alt", impact="critical", tags=["wcag2a"]),
            Issue(description="Heading levels should increase by one", help="Fix order", impact="moderate", tags=["best-practice"]),
        ]
        return AuditResult.for_url(url, issues=issues)
    if url.startswith("down"):
        return AuditResult.for_url(url, error="Timeout 15000ms exceeded.", error_kind="navigation")
    return AuditResult.for_url(url)


def fake_print_pdf(html, out_pdf):
    out_pdf.write_bytes(b"%PDF-1.7\n" + html.encode("utf-8"))


@pytest.fixture
def workdir(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("LANG", "TIMEOUT_MS", "WAIT_UNTIL", "REPORTS_DIR", "AXE_SOURCE", "HEADLESS"):
        monkeypatch.delenv(f"CHECKACCESS_{name}", raising=False)
    monkeypatch.setattr("checkaccess.batch.run_audit", fake_run_audit)
    monkeypatch.setattr(document, "_print_pdf", fake_print_pdf)
    return tmp_path


def test_help_lists_languages(workdir):
    result = CliRunner().invoke(app, ["--help"])
    assert result.exit_code == 0
    for code in ("de", "en", "es", "fr"):
        assert code in result.output
    assert "--ci" in result.output


def test_no_urls_is_usage_error(workdir):
    result = CliRunner().invoke(app, [])
    assert result.exit_code == 1
    assert "Please provide at least one URL" in result.output


def test_end_to_end_ci(workdir):
    result = CliRunner().invoke(app, ["good.example", "bad.example", "--ci"])
    assert result.exit_code == 1, result.output
    assert "No accessibility violations found!" in result.output
    assert "[2] Heading levels should increase by one" in result.output
    assert "critical: 1" in result.output
    assert "moderate: 1" in result.output
    pdf = workdir / "reports" / "bad.example-report.pdf"
    assert pdf.exists()
    assert b"Found 2 issues:" in pdf.read_bytes()
    assert not (workdir / "reports" / "good.example-report.pdf").exists()


def test_same_batch_without_ci_exits_zero(workdir):
    # decline the save prompt
    result = CliRunner().invoke(app, ["bad.example"], input="n\n")
    assert result.exit_code == 0, result.output
    assert "Would you like to save the report as a PDF?" in result.output
    assert not (workdir / "reports").exists()


def test_interactive_save_with_custom_name(workdir):
    result = CliRunner().invoke(app, ["bad.example"], input="y\naudits/home\n")
    assert result.exit_code == 0, result.output
    assert (workdir / "reports" / "audits" / "home.pdf").exists()


def test_url_file_and_failures_continue(workdir):
    urls = workdir / "urls.txt"
    urls.write_text("good.example\ndown.example\nbad.example\n", encoding="utf-8")
    result = CliRunner().invoke(app, [str(urls), "--ci"])
    assert result.exit_code == 1
    assert "Failed to load down.example: Timeout 15000ms exceeded." in result.output
    assert (workdir / "reports" / "bad.example-report.pdf").exists()


def test_clean_batch_in_ci_exits_zero(workdir):
    result = CliRunner().invoke(app, ["good.example", "fine.example", "--ci"])
    assert result.exit_code == 0, result.output


def test_language_flag(workdir):
    result = CliRunner().invoke(app, ["good.example", "--lang=fr", "--ci"])
    assert "Aucune violation d'accessibilité trouvée !" in result.output


def test_language_from_config_file(workdir):
    (workdir / "checkaccess.yaml").write_text("lang: es\nreports_dir: out\n", encoding="utf-8")
    result = CliRunner().invoke(app, ["bad.example", "--ci"])
    assert "Resumen por gravedad:" in result.output
    assert (workdir / "out" / "bad.example-report.pdf").exists()


def test_missing_config_file_is_fatal(workdir):
    result = CliRunner().invoke(app, ["good.example", "--config", "nope.yaml"])
    assert result.exit_code == 1
    assert "Configuration error" in result.output


def test_missing_translations_are_fatal(workdir, monkeypatch, tmp_path):
    from checkaccess import i18n

    def broken_translator(lang):
        return i18n.Translator(lang, locales_dir=tmp_path / "no-locales")

    monkeypatch.setattr(cli, "Translator", broken_translator)
    result = CliRunner().invoke(app, ["good.example"])
    assert result.exit_code == 1
    assert "Default translation table missing" in result.output


def test_main_maps_bad_flags_to_exit_1(workdir, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["checkaccess", "--no-such-flag", "good.example"])
    with pytest.raises(SystemExit) as exc:
        cli.main()
    assert exc.value.code == 1


def test_main_exit_code_follows_batch(workdir, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["checkaccess", "bad.example", "--ci"])
    with pytest.raises(SystemExit) as exc:
        cli.main()
    assert exc.value.code == 1
    monkeypatch.setattr(sys, "argv", ["checkaccess", "good.example", "--ci"])
    with pytest.raises(SystemExit) as exc:
        cli.main()
    assert exc.value.code == 0
