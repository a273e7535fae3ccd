import threading

import pytest

from leave_attendance.common.locks import KeyedLock
from leave_attendance.core.exceptions import StorageError


def test_same_key_is_reentrant():
    locks = KeyedLock(timeout=0.1)
    with locks.hold(1):
        with locks.hold(1):
            pass


def test_other_thread_times_out_on_held_key():
    locks = KeyedLock(timeout=0.05)
    errors = []

    def contender():
        try:
            with locks.hold(7):
                pass
        except StorageError as e:
            errors.append(e)

    with locks.hold(7):
        t = threading.Thread(target=contender)
        t.start()
        t.join()

    assert len(errors) == 1


def test_different_keys_do_not_block():
    locks = KeyedLock(timeout=0.05)
    acquired = []

    def other():
        with locks.hold(2):
            acquired.append(2)

    with locks.hold(1):
        t = threading.Thread(target=other)
        t.start()
        t.join()

    assert acquired == [2]


def test_lock_released_after_error():
    locks = KeyedLock(timeout=0.05)
    with pytest.raises(RuntimeError):
        with locks.hold(3):
            raise RuntimeError("boom")

    done = []

    def again():
        with locks.hold(3):
            done.append(True)

    t = threading.Thread(target=again)
    t.start()
    t.join()
    assert done == [True]


def test_idle_keys_are_dropped():
    locks = KeyedLock(timeout=0.05)
    for employee_id in range(1, 501):
        with locks.hold(employee_id):
            assert len(locks) == 1
    assert len(locks) == 0


def test_key_kept_while_nested_and_dropped_after_timeout():
    locks = KeyedLock(timeout=0.05)
    errors = []

    def contender():
        try:
            with locks.hold(9):
                pass
        except StorageError as e:
            errors.append(e)

    with locks.hold(9):
        with locks.hold(9):
            pass
        assert len(locks) == 1
        t = threading.Thread(target=contender)
        t.start()
        t.join()
        assert len(locks) == 1

    assert len(errors) == 1
    assert len(locks) == 0
