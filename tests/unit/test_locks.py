"""Unit tests for KeyedLock."""

import threading

import pytest

from placement_portal.utils.locks import KeyedLock


@pytest.mark.unit
def test_lock_is_dropped_after_release():
    locks = KeyedLock()

    for slot_id in range(50):
        with locks.hold(("slot", slot_id)):
            assert len(locks) == 1

    assert len(locks) == 0


@pytest.mark.unit
def test_lock_survives_while_others_wait():
    locks = KeyedLock()
    inside = threading.Event()
    release = threading.Event()
    order = []

    def first():
        with locks.hold("drive-1"):
            inside.set()
            release.wait(timeout=5)
            order.append("first")

    def second():
        inside.wait(timeout=5)
        with locks.hold("drive-1"):
            order.append("second")

    threads = [threading.Thread(target=first), threading.Thread(target=second)]
    for t in threads:
        t.start()
    inside.wait(timeout=5)
    release.set()
    for t in threads:
        t.join()

    assert order == ["first", "second"]
    assert len(locks) == 0


@pytest.mark.unit
def test_lock_released_when_body_raises():
    locks = KeyedLock()

    with pytest.raises(RuntimeError):
        with locks.hold("user-email"):
            raise RuntimeError("boom")

    assert len(locks) == 0
    with locks.hold("user-email"):
        pass
