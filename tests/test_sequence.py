"""Tests for the sequence counter and abort signal."""

import threading

import pytest

from routetransition.abort import AbortRequested, AbortSignal
from routetransition.sequence import TRANSITION_SEQUENCE, SequenceCounter


class TestSequenceCounter:
    """Test monotonic sequence numbers."""

    def test_starts_at_start(self):
        counter = SequenceCounter(start=5)
        assert counter.current == 4
        assert counter.next() == 5
        assert counter.next() == 6
        assert counter.current == 6

    def test_global_counter_increases(self):
        first = TRANSITION_SEQUENCE.next()
        assert TRANSITION_SEQUENCE.next() > first

    def test_never_reused_across_threads(self):
        counter = SequenceCounter()
        seen = []
        lock = threading.Lock()

        def worker():
            values = [counter.next() for _ in range(500)]
            with lock:
                seen.extend(values)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(seen) == list(range(2000))


class TestAbortSignal:
    """Test the cancellation token."""

    def test_check_passes_until_aborted(self):
        signal = AbortSignal()
        signal.check()
        assert signal.aborted is False

    def test_check_raises_after_abort(self):
        signal = AbortSignal()
        signal.abort()
        signal.abort()
        assert signal.aborted is True
        with pytest.raises(AbortRequested):
            signal.check()
