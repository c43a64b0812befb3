"""
Bounded FIFO queue of chat messages awaiting submission.
"""

from collections import deque

from .types import Message


class MessageQueue:
    """
    Drop-oldest queue of pending messages.

    Length never exceeds ``max_size``: when full, the oldest message is
    evicted before the new one is appended.
    """

    def __init__(self, max_size: int = 100):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._messages: deque[Message] = deque()
        self._evicted = 0

    def __len__(self) -> int:
        return len(self._messages)

    @property
    def evicted(self) -> int:
        """Total number of messages dropped for capacity since creation."""
        return self._evicted

    def enqueue(self, message: Message) -> bool:
        """
        Append a message to the tail.

        Returns True if the oldest message had to be evicted to make room.
        """
        dropped = False
        if len(self._messages) >= self.max_size:
            self._messages.popleft()
            self._evicted += 1
            dropped = True
        self._messages.append(message)
        return dropped

    def snapshot(self) -> tuple[Message, ...]:
        """Return an immutable copy of the current contents."""
        return tuple(self._messages)

    def commit(self, count: int) -> None:
        """Remove the first ``count`` messages after a successful submission."""
        for _ in range(min(count, len(self._messages))):
            self._messages.popleft()

    def is_full(self) -> bool:
        return len(self._messages) >= self.max_size
