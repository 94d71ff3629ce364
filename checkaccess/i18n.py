"""Translation tables for every operator-facing string.

Tables are flat JSON objects in ``locales/<code>.json``; placeholders use
``str.format`` names (``"Auditing {url}..."``). A ``Translator`` is built
once at startup and handed to whatever prints or renders text.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

import orjson

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

LOCALES_DIR = Path(__file__).resolve().parent / "locales"
DEFAULT_LANG = "en"


class _KeepMissing(dict):
    def __missing__(self, key):
        return "{" + key + "}"


def available_languages(locales_dir: Path = LOCALES_DIR) -> List[str]:
    if not locales_dir.is_dir():
        return []
    return sorted(p.stem for p in locales_dir.glob("*.json"))


def _load_table(path: Path) -> Dict[str, str]:
    try:
        data = orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read translation table {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Translation table {path} must be a JSON object")
    return {str(k): str(v) for k, v in data.items()}


class Translator:
    """Key lookup with fallback to the default language, then to the key."""

    def __init__(self, lang: Optional[str] = None, locales_dir: Path = LOCALES_DIR, default: str = DEFAULT_LANG):
        self.default = default
        default_path = locales_dir / f"{default}.json"
        if not default_path.exists():
            raise ConfigurationError(f"Default translation table missing: {default_path}")
        self._fallback = _load_table(default_path)
        self.lang = lang or default
        if self.lang == default:
            self._table = self._fallback
            return
        path = locales_dir / f"{self.lang}.json"
        if path.exists():
            self._table = _load_table(path)
        else:
            logger.warning("No translation table for %r, using %r", self.lang, default)
            self.lang = default
            self._table = self._fallback

    def __call__(self, key: str, **kwargs) -> str:
        return self.t(key, **kwargs)

    def t(self, key: str, **kwargs) -> str:
        template = self._table.get(key)
        if template is None:
            template = self._fallback.get(key)
            if template is None:
                logger.debug("Missing translation key %r", key)
                return key
        if not kwargs:
            return template
        try:
            return template.format_map(_KeepMissing(kwargs))
        except (ValueError, IndexError):
            return template


__all__ = ["Translator", "available_languages", "LOCALES_DIR", "DEFAULT_LANG"]
