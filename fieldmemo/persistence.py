"""
Durable store for the calendar: one JSON blob under a fixed storage key.

load() never fails: a missing or unreadable blob is an empty calendar.
save() is best-effort: failures are logged and reported as False, the
in-memory calendar stays authoritative for the session.
"""
import json
from pathlib import Path
from typing import Optional, Protocol

from fieldmemo.config_manager import config
from fieldmemo.exceptions import StorageError
from fieldmemo.logger import get_logger, log_corruption
from fieldmemo.models import CalendarData
from fieldmemo import paths
from fieldmemo.serialization import calendar_to_dict, dict_to_calendar

logger = get_logger("persistence")


class DurableStore(Protocol):
    def load(self) -> CalendarData: ...

    def save(self, data: CalendarData) -> bool: ...


class LocalStore:
    """JSON file at <data dir>/<storage key>.json."""

    def __init__(self, path: Optional[Path] = None, key: Optional[str] = None):
        key = key or config.STORAGE_KEY
        self._path = path if path is not None else paths.storage_file(key)
        if self._path.is_dir():
            raise StorageError(f"Calendar storage path is a directory: {self._path}", str(self._path))

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> CalendarData:
        if not self._path.exists():
            return {}

        try:
            with open(self._path, "rb") as f:
                data = f.read()
        except OSError as e:
            logger.warning("Could not read %s: %s", self._path, e)
            return {}

        try:
            raw = data.decode("utf-8")
        except UnicodeDecodeError as e:
            log_corruption(str(self._path), data.decode("utf-8", errors="replace"), str(e))
            return {}

        if not raw.strip():
            return {}

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            log_corruption(str(self._path), raw, str(e))
            return {}

        if not isinstance(payload, dict):
            log_corruption(str(self._path), raw, f"expected an object, got {type(payload).__name__}")
            return {}

        return dict_to_calendar(payload)

    def save(self, data: CalendarData) -> bool:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(calendar_to_dict(data), f, ensure_ascii=False)
        except (OSError, TypeError, ValueError) as e:
            # Storage full or unavailable
            logger.warning("Could not save calendar to %s: %s", self._path, e)
            return False
        return True


class MemoryStore:
    """Keeps the serialized blob in memory; for hosts without a filesystem."""

    def __init__(self, blob: Optional[str] = None):
        self.blob = blob

    def load(self) -> CalendarData:
        if not self.blob:
            return {}
        try:
            payload = json.loads(self.blob)
        except json.JSONDecodeError as e:
            log_corruption("memory", self.blob, str(e))
            return {}
        return dict_to_calendar(payload)

    def save(self, data: CalendarData) -> bool:
        try:
            self.blob = json.dumps(calendar_to_dict(data), ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.warning("Could not serialize calendar: %s", e)
            return False
        return True
