"""
Configuration Manager for Field Memo.

Central place for tunable constants. Every empirical value is declared here
and can be overridden from config/runtime.yaml.

Usage:
    from fieldmemo.config_manager import config
    limit = config.HISTORY_LIMIT
"""
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import List, Optional

import yaml

from fieldmemo.exceptions import ConfigError
from fieldmemo.logger import get_logger
from fieldmemo.paths import CONFIG_DIR

RUNTIME_CONFIG_PATH = CONFIG_DIR / "runtime.yaml"

logger = get_logger("config")


@dataclass
class SystemConfig:
    """
    Runtime constants.

    Values are empirical and can be adjusted per user.
    """

    # === History ===

    # Undo depth. Older snapshots are dropped.
    HISTORY_LIMIT: int = 50

    # === Storage ===

    # Fixed key the serialized calendar lives under (file name stem on disk)
    STORAGE_KEY: str = "field-memo-data"

    # === Time block defaults ===

    # Start time suggested for the first block of a day
    DEFAULT_START_TIME: str = "09:00"

    # Past this end time the next suggestion wraps back to DEFAULT_START_TIME
    LATEST_AUTO_START: str = "23:00"

    # Length of a newly added block when no end time is given
    DEFAULT_DURATION_MINUTES: int = 60

    DEFAULT_CATEGORY: str = "focus"

    # Quick duration choices offered by editors, in minutes
    DURATION_PRESETS: List[int] = field(default_factory=lambda: [15, 30, 45, 60, 90, 120])

    def validate(self, source: Optional[str] = None) -> None:
        if not isinstance(self.HISTORY_LIMIT, int) or self.HISTORY_LIMIT < 1:
            raise ConfigError(f"HISTORY_LIMIT must be a positive integer, got {self.HISTORY_LIMIT!r}", source)
        if not isinstance(self.DEFAULT_DURATION_MINUTES, int) or self.DEFAULT_DURATION_MINUTES < 1:
            raise ConfigError(
                f"DEFAULT_DURATION_MINUTES must be a positive integer, got {self.DEFAULT_DURATION_MINUTES!r}",
                source,
            )
        if not self.STORAGE_KEY or "/" in self.STORAGE_KEY:
            raise ConfigError(f"STORAGE_KEY must be a plain name, got {self.STORAGE_KEY!r}", source)


def _load_runtime_config(path: Path) -> dict:
    """Load runtime overrides, if any."""
    if not path.exists():
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (yaml.YAMLError, OSError) as e:
        logger.warning("Ignoring unreadable runtime config %s: %s", path, e)
        return {}

    if not isinstance(data, dict):
        logger.warning("Ignoring runtime config %s: expected a mapping", path)
        return {}
    return data


def get_config(path: Optional[Path] = None) -> SystemConfig:
    """
    Build the config instance.

    Priority: runtime.yaml > defaults
    """
    path = path if path is not None else RUNTIME_CONFIG_PATH
    base = SystemConfig()
    known = {f.name for f in fields(base)}

    for key, value in _load_runtime_config(path).items():
        if key in known:
            setattr(base, key, value)
        else:
            logger.debug("Unknown config key %s in %s", key, path)

    base.validate(str(path))
    return base


config = get_config()
