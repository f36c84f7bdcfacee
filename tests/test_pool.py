"""Tests for the session pool and the periodic GC task."""

import threading

from session_store import Session, SessionPool
from session_store.scheduler import PeriodicTask


def test_acquire_builds_when_empty():
    pool = SessionPool()
    assert isinstance(pool.acquire(), Session)
    assert len(pool) == 0


def test_release_resets_session(codec, driver):
    pool = SessionPool()
    session = pool.acquire().bind("session", codec, driver)
    session.start()
    session.put("user_id", 42)

    pool.release(session)

    assert len(pool) == 1
    assert session.all() == {}
    assert session.driver is None
    assert pool.acquire() is session


def test_double_release_is_ignored():
    pool = SessionPool()
    session = pool.acquire()
    pool.release(session)
    pool.release(session)
    assert len(pool) == 1


def test_max_size():
    pool = SessionPool(max_size=2)
    for _ in range(5):
        pool.release(Session())
    assert len(pool) == 2


def test_concurrent_acquire_release():
    pool = SessionPool(max_size=1000)
    seen = []
    lock = threading.Lock()

    def worker():
        for _ in range(200):
            s = pool.acquire()
            with lock:
                seen.append(s)
            pool.release(s)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(seen) == 1600
    assert len(pool) <= 8


def test_periodic_task_runs_until_stopped():
    calls = []
    ran_twice = threading.Event()

    def tick():
        calls.append(1)
        if len(calls) >= 2:
            ran_twice.set()

    task = PeriodicTask(tick, interval=0.01, name="test-task")
    task.start()
    assert ran_twice.wait(2)
    task.stop()
    assert not task.running
    count = len(calls)
    ran_twice.clear()
    assert not ran_twice.wait(0.05)
    assert len(calls) == count


def test_periodic_task_survives_failures(caplog):
    calls = []
    done = threading.Event()

    def tick():
        calls.append(1)
        if len(calls) < 3:
            raise OSError("disk unavailable")
        done.set()

    task = PeriodicTask(tick, interval=0.01, name="flaky-gc")
    task.start()
    try:
        assert done.wait(2)
    finally:
        task.stop()
    assert "flaky-gc failed" in caplog.text
