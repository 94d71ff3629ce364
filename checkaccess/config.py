"""Runtime settings.

Layered, later wins: model defaults, YAML file, environment (``.env`` is
loaded first), then whatever the CLI passes explicitly.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Dict, Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("checkaccess.yaml")
AXE_CDN_URL = "https://cdnjs.cloudflare.com/ajax/libs/axe-core/4.9.1/axe.min.js"

ENV_PREFIX = "CHECKACCESS_"
ENV_FIELDS = ("lang", "timeout_ms", "wait_until", "reports_dir", "axe_source", "headless")


class Settings(BaseModel):
    lang: str = "en"
    timeout_ms: int = 15000
    wait_until: str = "networkidle"
    reports_dir: Path = Path("reports")
    axe_source: str = AXE_CDN_URL
    headless: bool = True


def _env_overrides() -> Dict[str, Any]:
    out = {}
    for name in ENV_FIELDS:
        value = os.environ.get(ENV_PREFIX + name.upper())
        if value:
            out[name] = value
    return out


def load_settings(config_file: Optional[str] = None, **overrides) -> Settings:
    """Build ``Settings`` from the config file, environment and ``overrides``.

    An explicitly named ``config_file`` must exist; the default
    ``checkaccess.yaml`` is optional. ``None`` overrides are ignored.
    """
    load_dotenv()
    data: Dict[str, Any] = {}
    path = Path(config_file) if config_file else DEFAULT_CONFIG_FILE
    if config_file and not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")
    if path.exists():
        try:
            loaded = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
        if not isinstance(loaded, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")
        logger.debug("Loaded settings from %s", path)
        data.update(loaded)
    data.update(_env_overrides())
    data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e


__all__ = ["Settings", "load_settings", "AXE_CDN_URL"]
