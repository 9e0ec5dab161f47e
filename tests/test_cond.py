import queue

import pytest

from contour.cond import Cond


def test_register_before_notify_should_not_broadcast():
    c = Cond()
    ch = queue.Queue(maxsize=1)
    c.register(ch, 0)
    assert ch.empty()


def test_register_after_notify_should_broadcast():
    c = Cond()
    ch = queue.Queue(maxsize=1)
    c.notify()
    c.register(ch, 0)
    assert ch.get_nowait() == 1


def test_register_after_notify_with_correct_sequence_should_not_broadcast():
    c = Cond()
    ch = queue.Queue(maxsize=1)
    c.notify()
    c.register(ch, 0)
    seq = ch.get_nowait()
    c.register(ch, seq)
    assert ch.empty()


def test_notify_wakes_registered_waiters_once():
    c = Cond()
    a, b = queue.Queue(maxsize=1), queue.Queue(maxsize=1)
    c.register(a, 0)
    c.register(b, 0)
    c.notify()
    assert a.get_nowait() == 1
    assert b.get_nowait() == 1
    c.notify()
    assert a.empty() and b.empty()
    assert c.last == 2


def test_full_queue_raises():
    c = Cond()
    ch = queue.Queue(maxsize=1)
    ch.put_nowait(0)
    c.notify()
    with pytest.raises(queue.Full):
        c.register(ch, 0)