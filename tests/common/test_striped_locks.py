import pytest

from src.face_attendance.face_attendance.common.locks import StripedLocks


def test_same_key_gets_same_lock():
    locks = StripedLocks(8)

    assert locks.for_key(3) is locks.for_key(3)
    assert locks.for_key(3) is locks.for_key(11)
    assert locks.for_key(3) is not locks.for_key(4)


def test_pool_size_is_fixed():
    locks = StripedLocks(4)

    held = {id(locks.for_key(k)) for k in range(10_000)}

    assert len(locks) == 4
    assert len(held) == 4


def test_rejects_empty_pool():
    with pytest.raises(ValueError):
        StripedLocks(0)
