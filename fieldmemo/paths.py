"""
Where Field Memo keeps its files: the calendar JSON, runtime config and logs.

FIELD_MEMO_DATA_DIR and FIELD_MEMO_LOG_DIR move data and logs out of the
project tree; config always lives in <project_root>/config.
"""
import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent


def dir_from_env(var: str, default: Path) -> Path:
    """The directory named by an env var (~ expanded), or default when unset/blank."""
    raw = os.getenv(var, "").strip()
    if raw:
        return Path(raw).expanduser()
    return default


DATA_DIR = dir_from_env("FIELD_MEMO_DATA_DIR", PROJECT_ROOT / "data")
LOGS_DIR = dir_from_env("FIELD_MEMO_LOG_DIR", PROJECT_ROOT / "logs")
CONFIG_DIR = PROJECT_ROOT / "config"


def storage_file(key: str) -> Path:
    """Calendar blob saved under a storage key: <data dir>/<key>.json."""
    return DATA_DIR / f"{key}.json"
