"""Concurrent submissions against shared counters, on both backends."""

import threading
from concurrent.futures import ThreadPoolExecutor


def _run_together(fns):
    """Start all callables at the same moment and wait for every result."""
    barrier = threading.Barrier(len(fns))

    def wrapped(fn):
        barrier.wait()
        return fn()

    with ThreadPoolExecutor(max_workers=len(fns)) as pool:
        futures = [pool.submit(wrapped, fn) for fn in fns]
        return [f.result(timeout=60) for f in futures]


class TestConcurrentSubmissions:
    def test_two_sessions_same_scenario(self, store, room):
        _run_together([
            lambda: store.record_answer("A", room.id, "Q1", "yes"),
            lambda: store.record_answer("B", room.id, "Q1", "yes"),
        ])

        assert store.get_aggregates(room.id)["Q1"] == {"yes": 2, "no": 0}

    def test_many_sessions_no_lost_updates(self, store, room):
        sessions = [f"s{i}" for i in range(16)]
        _run_together([
            (lambda sid=sid, i=i: store.record_answer(sid, room.id, "Q1", "yes" if i % 2 else "no"))
            for i, sid in enumerate(sessions)
        ])

        assert store.get_aggregates(room.id)["Q1"] == {"yes": 8, "no": 8}
        assert store.count_participants(room.id) == 16

    def test_concurrent_switches_and_undos(self, store, room):
        sessions = [f"s{i}" for i in range(8)]
        for sid in sessions:
            store.record_answer(sid, room.id, "Q1", "yes")

        def flip(sid):
            return lambda: store.record_answer(sid, room.id, "Q1", "no")

        def undo(sid):
            return lambda: store.retract_answer(sid, room.id, "Q1")

        _run_together([flip(sid) for sid in sessions[:4]] + [undo(sid) for sid in sessions[4:]])

        assert store.get_aggregates(room.id)["Q1"] == {"yes": 0, "no": 4}
        assert store.count_participants(room.id) == 4

    def test_same_session_rapid_repeat_taps(self, store, room):
        _run_together([
            lambda: store.record_answer("A", room.id, "Q1", "yes") for _ in range(6)
        ])

        assert store.get_aggregates(room.id)["Q1"] == {"yes": 1, "no": 0}
        assert store.get_session_answers("A", room.id) == [{"scenario_id": "Q1", "answer": "yes"}]
