import threading

from fieldmemo.history import HistoryManager
from fieldmemo.models import DayData
from fieldmemo.persistence import MemoryStore


class RecordingStore:
    def __init__(self, initial=None, fail=False):
        self.initial = initial or {}
        self.fail = fail
        self.saved = []

    def load(self):
        return self.initial

    def save(self, data):
        self.saved.append(data)
        return not self.fail


def _store(note: str):
    return {"2024-0": {"1": DayData(note=note)}}


def test_mutate_then_undo_restores_previous_store():
    s0, s1 = _store("before"), _store("after")
    history = HistoryManager(RecordingStore(initial=s0))

    history.mutate(s1)
    assert history.current == s1
    assert history.can_undo()

    assert history.undo() is True
    assert history.current == s0
    assert history.can_redo()

    assert history.redo() is True
    assert history.current == s1
    assert not history.can_redo()


def test_undo_and_redo_on_empty_stacks_are_noops():
    s0 = _store("only")
    history = HistoryManager(RecordingStore(initial=s0))

    assert history.undo() is False
    assert history.redo() is False
    assert history.current == s0
    assert not history.can_undo()
    assert not history.can_redo()


def test_new_mutation_clears_redo():
    history = HistoryManager(RecordingStore())
    history.mutate(_store("a"))
    history.mutate(_store("b"))
    history.undo()
    assert history.can_redo()

    history.mutate(_store("c"))
    assert not history.can_redo()
    assert history.redo() is False
    assert history.current == _store("c")


def test_history_depth_is_bounded():
    history = HistoryManager(RecordingStore(initial={}))
    for i in range(60):
        history.mutate(_store(f"v{i}"))

    assert history.undo_depth == 50
    while history.undo():
        pass
    # v0..v8 and the empty initial store are gone; the oldest reachable is v9
    assert history.current == _store("v9")


def test_limit_can_be_configured():
    history = HistoryManager(RecordingStore(), limit=2)
    for i in range(5):
        history.mutate(_store(f"v{i}"))
    assert history.undo_depth == 2


def test_every_operation_persists_current():
    store = RecordingStore()
    history = HistoryManager(store)

    history.mutate(_store("a"))
    history.undo()
    history.redo()
    history.undo()
    history.undo()  # no-op, nothing saved

    assert store.saved == [_store("a"), {}, _store("a"), {}]


def test_persist_failure_keeps_in_memory_state():
    history = HistoryManager(RecordingStore(fail=True))

    history.mutate(_store("kept"))
    assert history.current == _store("kept")
    assert history.undo() is True
    assert history.current == {}


def test_snapshots_are_isolated_from_callers():
    s1 = _store("original")
    history = HistoryManager(RecordingStore())
    history.mutate(s1)

    s1["2024-0"]["1"].note = "changed outside"
    history.current["2024-0"]["1"].note = "changed copy"

    assert history.current == _store("original")


def test_update_applies_transform_to_current():
    history = HistoryManager(MemoryStore())
    history.mutate(_store("a"))

    def append_x(current):
        current["2024-0"]["1"].note += "x"
        return current

    result = history.update(append_x)
    assert result == _store("ax")
    history.undo()
    assert history.current == _store("a")


def test_concurrent_updates_are_linearized():
    history = HistoryManager(MemoryStore(), limit=1000)
    history.mutate({"2024-0": {"1": DayData(dots=[])}})

    def add_one(current):
        current["2024-0"]["1"].dots.append(1)
        return current

    threads = [threading.Thread(target=lambda: [history.update(add_one) for _ in range(20)]) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(history.current["2024-0"]["1"].dots) == 100
    assert history.undo_depth == 101
