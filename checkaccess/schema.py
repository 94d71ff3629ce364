from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional, Dict
from datetime import datetime, timezone
from collections import Counter
from urllib.parse import urlsplit
import re

from .errors import UsageError

IMPACTS = ("critical", "serious", "moderate", "minor")
UNKNOWN_IMPACT = "unknown"

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


def normalize_url(raw: str) -> str:
    """Return ``raw`` as an absolute URL, defaulting the scheme to http.

    Raises ``UsageError`` when the input cannot be parsed or has no host.
    """
    text = (raw or "").strip()
    if not text:
        raise UsageError("empty URL")
    if not _SCHEME_RE.match(text):
        text = f"http://{text}"
    try:
        parts = urlsplit(text)
        hostname = parts.hostname
    except ValueError as e:
        raise UsageError(f"{raw}: {e}") from e
    if not hostname:
        raise UsageError(f"{raw}: missing hostname")
    if not parts.path:
        text = parts._replace(path="/").geturl()
    return text


def strip_www(hostname: str) -> str:
    return hostname[4:] if hostname.startswith("www.") else hostname


def suggested_filename(normalized_url: str, now: Optional[datetime] = None) -> str:
    """Interactive default, e.g. ``example-report-2024-05-01T10-22-03.pdf``."""
    now = now or datetime.now(timezone.utc)
    label = strip_www(urlsplit(normalized_url).hostname or "").split(".")[0] or "report"
    return f"{label}-report-{now.strftime('%Y-%m-%dT%H-%M-%S')}.pdf"


def severity_tally(issues) -> Dict[str, int]:
    """Count issues per impact label, in first-seen order."""
    return dict(Counter(i.impact for i in issues))


class Issue(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    description: str = ""
    help: str = ""
    impact: str = UNKNOWN_IMPACT
    tags: List[str] = []
    id: Optional[str] = None
    help_url: Optional[str] = Field(default=None, alias="helpUrl")

    @field_validator("impact", mode="before")
    @classmethod
    def _coerce_impact(cls, v):
        # axe reports null for rules without an impact
        v = (v or "").strip().lower() if isinstance(v, str) else ""
        return v if v in IMPACTS else UNKNOWN_IMPACT


class AuditResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    normalized_url: str
    suggested_filename: str
    issues: List[Issue] = []
    error: Optional[str] = None
    error_kind: Optional[str] = None  # navigation|bad_status|rule_engine
    status_code: Optional[int] = None

    @classmethod
    def for_url(cls, url: str, now: Optional[datetime] = None, **fields) -> "AuditResult":
        normalized = normalize_url(url)
        if fields.get("error"):
            fields["issues"] = []
        return cls(
            url=url,
            normalized_url=normalized,
            suggested_filename=suggested_filename(normalized, now),
            **fields,
        )

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def hostname(self) -> str:
        return urlsplit(self.normalized_url).hostname or ""

    @property
    def ci_filename(self) -> str:
        return f"{strip_www(self.hostname)}-report.pdf"

    @property
    def tally(self) -> Dict[str, int]:
        return severity_tally(self.issues)


class BatchRun(BaseModel):
    """Aggregate of every result produced by one invocation."""
    results: List[AuditResult] = Field(default_factory=list)
    has_failures: bool = False

    def record(self, result: AuditResult, failed: bool) -> None:
        self.results.append(result)
        if failed:
            self.has_failures = True

    def exit_code(self, ci: bool) -> int:
        return 1 if (ci and self.has_failures) else 0
