"""recurcal.config_loader

Lightweight config loader for recurcal.

- Reads YAML (PyYAML); JSON files are accepted as a YAML subset.
- Exposes a typed dataclass `Config` and a `load_config()` helper that accepts
  an optional path override.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError
from .ics_exporter import DEFAULT_PRODID
from .recurrence_engine import MAX_OCCURRENCES

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "recurcal.yaml"


@dataclass
class Config:
    """Typed configuration for recurcal.

    Fields:
        max_occurrences: occurrence cap per expansion (1..1000)
        ics_prodid: PRODID written on exported calendars
        calendar_name: optional X-WR-CALNAME for exported calendars
        log_level: logging level name
    """

    max_occurrences: int = MAX_OCCURRENCES
    ics_prodid: str = DEFAULT_PRODID
    calendar_name: str | None = None
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Config:
        """Create Config from a plain mapping, applying defaults and validation.

        Numeric-like values are coerced to int and max_occurrences is clamped to
        1..1000, logging warnings when coercions occur.
        """
        if data is None:
            data = {}

        raw_max = data.get("max_occurrences", MAX_OCCURRENCES)
        try:
            max_occurrences = int(raw_max)
        except (TypeError, ValueError):
            logger.warning(
                "Config max_occurrences=%r is not an int; using default %d", raw_max, MAX_OCCURRENCES
            )
            max_occurrences = MAX_OCCURRENCES
        if max_occurrences < 1:
            logger.warning("max_occurrences %d below minimum; coercing to 1", max_occurrences)
            max_occurrences = 1
        elif max_occurrences > MAX_OCCURRENCES:
            logger.warning(
                "max_occurrences %d above maximum; coercing to %d", max_occurrences, MAX_OCCURRENCES
            )
            max_occurrences = MAX_OCCURRENCES

        ics_prodid = data.get("ics_prodid") or DEFAULT_PRODID

        calendar_name = data.get("calendar_name")
        if calendar_name is not None:
            calendar_name = str(calendar_name)

        log_level = data.get("log_level", "INFO")
        log_level = str(log_level).upper() if log_level is not None else "INFO"

        return cls(
            max_occurrences=max_occurrences,
            ics_prodid=str(ics_prodid),
            calendar_name=calendar_name,
            log_level=log_level,
        )


def _load_yaml_or_json(path: Path) -> Any:
    """Load a mapping from a YAML or JSON file.

    JSON documents are valid YAML, so safe_load reads both formats.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Unable to read config {path}: {exc}") from exc
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Unable to parse config {path}: {exc}") from exc
    # safe_load returns None for empty files
    return {} if loaded is None else loaded


def load_config(path: str | Path | None = None) -> Config:
    """Load configuration from a YAML/JSON file and return a Config instance.

    Args:
        path: Optional path to the config file. Defaults to ./recurcal.yaml.

    Returns:
        Config dataclass instance with values from file (or defaults).

    Raises:
        ConfigError: If the file cannot be read or parsed, or its top level is not a mapping
    """
    p = Path(path) if path else Path.cwd() / DEFAULT_CONFIG_FILENAME
    logger.debug("Attempting to load config from %s", p)
    if not p.exists():
        logger.info("Config file %s not found; using defaults", p)
        return Config()

    raw = _load_yaml_or_json(p)
    if not isinstance(raw, dict):
        logger.warning("Config file %s parsed but top-level is not a mapping: %r", p, raw)
        raise ConfigError("Config file must contain a mapping at top level")
    cfg = Config.from_dict(raw)
    logger.info("Loaded configuration from %s", p)
    logger.debug("Configuration values: %s", cfg)
    return cfg
