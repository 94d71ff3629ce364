from checkaccess.i18n import Translator
from checkaccess.schema import AuditResult, Issue
from checkaccess.terminal import TerminalFormatter, impact_color


def _result(*impacts):
    issues = [
        Issue(description=f"desc {n}", help=f"help {n}", impact=imp, tags=["wcag2a", "wcag412"])
        for n, imp in enumerate(impacts, start=1)
    ]
    return AuditResult.for_url("example.com", issues=issues)


def test_no_issues_emits_only_the_no_violations_line():
    lines = TerminalFormatter(Translator("en")).format(_result())
    assert [l.text for l in lines] == ["No accessibility violations found!"]


def test_issue_block_and_tally():
    lines = TerminalFormatter(Translator("en")).format(_result("critical", "moderate", "critical"))
    texts = [l.text for l in lines]
    assert texts[:5] == [
        "[1] desc 1",
        "  Impact: critical",
        "  Help: help 1",
        "  Tags: wcag2a, wcag412",
        "",
    ]
    assert texts[5] == "[2] desc 2"
    summary = texts.index("Summary by severity:")
    assert texts[summary + 1:] == ["  critical: 2", "  moderate: 1"]


def test_impact_lines_are_colored_by_severity():
    lines = TerminalFormatter(Translator("en")).format(_result("critical", "serious", "moderate", "minor"))
    impact_lines = [l for l in lines if "Impact:" in l.text]
    assert [l.fg for l in impact_lines] == ["red", "yellow", "blue", "bright_black"]


def test_unrecognised_impact_colored_like_unknown():
    lines = TerminalFormatter(Translator("en")).format(_result("apocalyptic", "unknown"))
    impact_lines = [l for l in lines if "Impact:" in l.text]
    assert impact_lines[0].text == "  Impact: unknown"
    assert impact_lines[0].fg == impact_lines[1].fg == impact_color("unknown") == "white"
    tally_lines = lines[lines.index(next(l for l in lines if l.text == "Summary by severity:")) + 1:]
    assert [(l.text, l.fg) for l in tally_lines] == [("  unknown: 2", "white")]
    assert impact_color("something-else") == "white"


def test_localized_labels():
    lines = TerminalFormatter(Translator("es")).format(_result("minor"))
    assert lines[1].text == "  Impacto: minor"
    assert "Resumen por gravedad:" in [l.text for l in lines]


def test_echo(capsys):
    TerminalFormatter(Translator("en")).echo(_result("serious"))
    out = capsys.readouterr().out
    assert "[1] desc 1" in out
    assert "serious: 1" in out
