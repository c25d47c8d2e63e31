"""Configuration settings for Undha."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV = "UNDHA_CONFIG"
ENV_PREFIX = "UNDHA_"
DEFAULT_CONFIG_PATH = Path("~/.undha/config.yaml").expanduser()

# Resolution constants
EXACT_CONFIDENCE = 1.0
PARTIAL_MATCH_CAP = 0.8  # partial matches never reach exact-match confidence
HYBRID_THRESHOLD = 0.8  # table result must exceed this to skip escalation
EXTERNAL_CONFIDENCE = 0.95


class ConfigError(Exception):
    """Raised when a configuration file or override is invalid."""

    pass


@dataclass
class Settings:
    """Application settings."""

    # Lexicon
    lexicon_path: Path | None = None

    # Resolution defaults
    default_register: str = "plain"
    default_strategy: str = "hybrid"
    hybrid_threshold: float = HYBRID_THRESHOLD
    external_confidence: float = EXTERNAL_CONFIDENCE
    external_timeout: float | None = 30.0

    # External responder
    responder: str = "none"
    endpoint_url: str = "http://127.0.0.1:11434/v1/chat/completions"
    model: str = "default"
    temperature: float = 0.3
    max_tokens: int = 1000

    # API server
    host: str = "127.0.0.1"
    port: int = 47300

    data_dir: Path = field(default_factory=lambda: Path.home() / ".undha")

    @classmethod
    def load(cls, path: Path | str | None = None) -> "Settings":
        """Load settings from YAML, then apply UNDHA_* environment overrides.

        Args:
            path: Config file. If None, uses:
                  1. UNDHA_CONFIG env var
                  2. ~/.undha/config.yaml (skipped if missing)

        Returns:
            Settings instance

        Raises:
            ConfigError: If the file is not a YAML mapping or a value
                cannot be coerced
        """
        explicit = path is not None or CONFIG_ENV in os.environ
        if path is None:
            path = os.environ.get(CONFIG_ENV) or DEFAULT_CONFIG_PATH
        path = Path(path).expanduser()

        data: dict = {}
        if path.exists():
            with open(path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f)
            if raw is None:
                raw = {}
            if not isinstance(raw, dict):
                raise ConfigError(f"Config must be a YAML mapping: {path}")
            data.update(raw)
            logger.debug(f"Loaded config from {path}")
        elif explicit:
            raise ConfigError(f"Config not found: {path}")

        for f_ in fields(cls):
            env_key = ENV_PREFIX + f_.name.upper()
            if env_key in os.environ:
                data[f_.name] = os.environ[env_key]

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Create from a mapping, coercing string values."""
        known = {f_.name: f_ for f_ in fields(cls)}
        unknown = set(data) - set(known)
        if unknown:
            logger.warning(f"Ignoring unknown settings: {', '.join(sorted(unknown))}")

        kwargs = {}
        for name, value in data.items():
            if name not in known:
                continue
            try:
                kwargs[name] = _coerce(name, value)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid value for {name}: {value!r} ({e})")
        return cls(**kwargs)


_PATH_FIELDS = {"lexicon_path", "data_dir"}
_FLOAT_FIELDS = {"hybrid_threshold", "external_confidence", "temperature"}
_INT_FIELDS = {"max_tokens", "port"}


def _coerce(name: str, value):
    if name in _PATH_FIELDS:
        return None if value in (None, "") else Path(value).expanduser()
    if name == "external_timeout":
        if value is None or str(value).lower() in ("", "none", "off"):
            return None
        return float(value)
    if name in _FLOAT_FIELDS:
        return float(value)
    if name in _INT_FIELDS:
        return int(value)
    return str(value)
