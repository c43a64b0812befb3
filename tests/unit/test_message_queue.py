"""Tests for the bounded message queue."""

import pytest

from adcortex.message_queue import MessageQueue
from adcortex.types import Message, Role


def make_messages(count: int) -> list[Message]:
    return [Message(role=Role.USER, content=f"message {i}", timestamp=float(i)) for i in range(count)]


class TestMessageQueue:
    """Test MessageQueue behaviour."""

    def test_enqueue_preserves_order(self):
        queue = MessageQueue(max_size=5)
        messages = make_messages(3)
        for message in messages:
            queue.enqueue(message)
        assert queue.snapshot() == tuple(messages)

    @pytest.mark.parametrize("max_size,count", [(1, 5), (3, 10), (5, 6), (10, 10)])
    def test_never_exceeds_bound(self, max_size, count):
        """Length stays within the bound and keeps the most recent messages."""
        queue = MessageQueue(max_size=max_size)
        messages = make_messages(count)
        for message in messages:
            queue.enqueue(message)
            assert len(queue) <= max_size
        assert queue.snapshot() == tuple(messages[-max_size:])

    def test_enqueue_reports_drop(self):
        queue = MessageQueue(max_size=2)
        a, b, c = make_messages(3)
        assert queue.enqueue(a) is False
        assert queue.enqueue(b) is False
        assert queue.enqueue(c) is True
        assert queue.snapshot() == (b, c)
        assert queue.evicted == 1

    def test_snapshot_is_a_copy(self):
        queue = MessageQueue(max_size=5)
        a, b = make_messages(2)
        queue.enqueue(a)
        snapshot = queue.snapshot()
        queue.enqueue(b)
        assert snapshot == (a,)
        assert len(queue) == 2

    def test_commit_removes_head(self):
        """Messages queued after the snapshot survive the commit."""
        queue = MessageQueue(max_size=5)
        a, b, c = make_messages(3)
        queue.enqueue(a)
        queue.enqueue(b)
        submitted = queue.snapshot()
        queue.enqueue(c)
        queue.commit(len(submitted))
        assert queue.snapshot() == (c,)

    def test_commit_more_than_length(self):
        queue = MessageQueue(max_size=5)
        for message in make_messages(2):
            queue.enqueue(message)
        queue.commit(10)
        assert len(queue) == 0

    def test_is_full(self):
        queue = MessageQueue(max_size=2)
        assert not queue.is_full()
        for message in make_messages(2):
            queue.enqueue(message)
        assert queue.is_full()

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            MessageQueue(max_size=0)
