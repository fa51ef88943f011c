"""Process-wide ordering of transitions."""

import itertools
import threading


class SequenceCounter:
    """Monotonic counter handing out transition sequence numbers.

    Values are never reused for the lifetime of the counter, even if
    transitions are created from more than one thread.
    """

    def __init__(self, start: int = 0):
        self._counter = itertools.count(start)
        self._lock = threading.Lock()
        self._last = start - 1

    def next(self) -> int:
        with self._lock:
            self._last = next(self._counter)
            return self._last

    @property
    def current(self) -> int:
        """The most recently issued value (``start - 1`` before the first)."""
        return self._last


TRANSITION_SEQUENCE = SequenceCounter()
