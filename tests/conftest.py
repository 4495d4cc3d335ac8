import os
import sys
import tempfile
from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Keep tests away from the real data and log directories.
os.environ.setdefault("FIELD_MEMO_DATA_DIR", tempfile.mkdtemp(prefix="field_memo_tests_"))
os.environ.setdefault("FIELD_MEMO_LOG_DIR", tempfile.mkdtemp(prefix="field_memo_logs_"))


@pytest.fixture
def service(tmp_path):
    from fieldmemo.calendar_service import CalendarService
    from fieldmemo.history import HistoryManager
    from fieldmemo.persistence import LocalStore

    return CalendarService(HistoryManager(LocalStore(path=tmp_path / "calendar.json")))
