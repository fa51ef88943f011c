"""
Custom exceptions for the transition router.
"""
from typing import Any, Optional


class RouterError(Exception):
    """Base exception for router errors."""

    pass


class UnhandledEventError(RouterError):
    """Raised when no active handler handles a triggered event."""

    def __init__(self, event_name: str, message: Optional[str] = None):
        self.event_name = event_name
        self.message = message or f"Nothing handled the event '{event_name}'."
        super().__init__(self.message)


class UnrecognizedHandlerError(RouterError):
    """Raised when a route name has no mapped handler chain."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"There is no route named {name}")


class ResolutionFailure(RouterError):
    """Raised by a state's resolve routine when it stops before completing.

    ``was_aborted`` separates a cooperative abort from a hook error. For hook
    errors, ``error`` is the original exception and ``handler_with_error`` the
    handler whose hook raised it.
    """

    def __init__(
        self,
        was_aborted: bool,
        error: Optional[BaseException] = None,
        handler_with_error: Any = None,
        state: Any = None,
    ):
        self.was_aborted = was_aborted
        self.error = error
        self.handler_with_error = handler_with_error
        self.state = state
        super().__init__("resolution aborted" if was_aborted else f"resolution failed: {error!r}")
