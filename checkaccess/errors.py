"""Exception taxonomy.

Only ``UsageError`` and ``ConfigurationError`` abort a run. The per-URL
errors are recorded on the URL's result (navigation, rule engine) or
reported for that URL (filesystem) and the batch moves on.
"""


class CheckAccessError(Exception):
    """Base class for every error raised by checkaccess."""


class UsageError(CheckAccessError):
    """No URLs to audit, an unparseable URL, or bad command line input."""


class ConfigurationError(CheckAccessError):
    """Translation tables or the settings file are missing or unreadable."""


class NavigationError(CheckAccessError):
    """The page did not load, timed out, or answered with a non-2xx status.

    ``kind`` is ``"navigation"`` or ``"bad_status"``.
    """

    def __init__(self, message: str, status_code=None, kind: str = "navigation"):
        super().__init__(message)
        self.status_code = status_code
        self.kind = kind


class RuleEngineError(CheckAccessError):
    """axe-core could not be injected or evaluated in the page."""


class FilesystemError(CheckAccessError):
    """The report directory or the PDF file could not be written."""


__all__ = [
    "CheckAccessError",
    "UsageError",
    "ConfigurationError",
    "NavigationError",
    "RuleEngineError",
    "FilesystemError",
]
