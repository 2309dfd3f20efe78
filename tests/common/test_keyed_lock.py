import threading
import time

from src.practicum_attendance.practicum_attendance.common.locks import KeyedLock


def test_same_key_is_serialized():
    locks = KeyedLock()
    inside = 0
    peak = 0
    guard = threading.Lock()

    def worker():
        nonlocal inside, peak
        with locks.hold(("s-1", "pr-1", "2026-03-02")):
            with guard:
                inside += 1
                peak = max(peak, inside)
            time.sleep(0.01)
            with guard:
                inside -= 1

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert peak == 1
    assert locks.active_keys() == 0


def test_different_keys_do_not_block_each_other():
    locks = KeyedLock()
    with locks.hold("a"):
        acquired = threading.Event()

        def other():
            with locks.hold("b"):
                acquired.set()

        t = threading.Thread(target=other)
        t.start()
        assert acquired.wait(1.0)
        t.join()
        assert locks.active_keys() == 1
    assert locks.active_keys() == 0


def test_instances_do_not_share_state():
    first, second = KeyedLock(), KeyedLock()
    with first.hold("k"):
        with second.hold("k"):
            assert first.active_keys() == 1 and second.active_keys() == 1
