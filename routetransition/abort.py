"""Cooperative cancellation token handed to state resolution."""


class AbortRequested(Exception):
    """Raised by :meth:`AbortSignal.check` once the signal has fired."""

    pass


class AbortSignal:
    """A flag plus a check the resolution routine calls at each step.

    The owner fires the signal; the resolving code decides where to call
    :meth:`check`. Firing is one-way.
    """

    def __init__(self):
        self._aborted = False

    @property
    def aborted(self) -> bool:
        return self._aborted

    def abort(self) -> None:
        self._aborted = True

    def check(self) -> None:
        if self._aborted:
            raise AbortRequested()
