"""
Field Memo exception hierarchy.

- FieldMemoError: base class for every known error
- ConfigError: runtime configuration is invalid
- StorageError: the durable store cannot be used at all
- ValidationError: a requested edit carries invalid times, dates or rules
- BlockNotFoundError: an edit targets a time block that does not exist
"""
from typing import Optional


class FieldMemoError(Exception):
    """Base class for known Field Memo errors.

    Catching this handles every expected failure mode.
    """

    def __init__(self, message: str, hint: Optional[str] = None):
        """
        Args:
            message: what went wrong
            hint: what the user can do about it
        """
        super().__init__(message)
        self.message = message
        self.hint = hint

    def get_user_message(self) -> str:
        """Return a message suitable for the command line."""
        if self.hint:
            return f"{self.message}\nHint: {self.hint}"
        return self.message


class ConfigError(FieldMemoError):
    """Runtime configuration error."""

    def __init__(self, message: str, config_path: Optional[str] = None):
        hint = f"Check the config file: {config_path}" if config_path else "Check the config file format"
        super().__init__(message, hint)
        self.config_path = config_path


class StorageError(FieldMemoError):
    """The durable store location is unusable (e.g. the path is a directory)."""

    def __init__(self, message: str, path: Optional[str] = None):
        hint = f"Check permissions for {path}" if path else None
        super().__init__(message, hint)
        self.path = path


class ValidationError(FieldMemoError):
    """Invalid input for a calendar edit.

    Raised before any mutation is recorded, so history stays untouched.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        hint = None
        if field in ("start_time", "end_time"):
            hint = "Times use 24-hour HH:MM, e.g. 09:30"
        elif field in ("date", "end_date"):
            hint = "Dates use YYYY-MM-DD or today/tomorrow/yesterday"
        super().__init__(message, hint)
        self.field = field


class BlockNotFoundError(FieldMemoError):
    """No time block with the given id is stored on that day."""

    def __init__(self, block_id: str, day: Optional[str] = None):
        message = f"Time block {block_id!r} not found"
        if day:
            message = f"{message} on {day}"
        super().__init__(message, hint="Recurring blocks are edited on the day they start")
        self.block_id = block_id
        self.day = day
