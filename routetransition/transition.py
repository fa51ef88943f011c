"""
Transitions: cancellable, retryable attempts to move a router between states.
"""

import asyncio
import inspect
import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional, TYPE_CHECKING

from .abort import AbortSignal
from .exceptions import ResolutionFailure, RouterError
from .sequence import TRANSITION_SEQUENCE
from .utils import log, trigger

if TYPE_CHECKING:
    from .intent import NamedTransitionIntent
    from .router import Router
    from .state import TransitionState

logger = logging.getLogger(__name__)


class TransitionAborted(RouterError):
    """Rejection reason of a transition that was cancelled cooperatively."""

    name = "TransitionAborted"

    def __init__(self, message: Optional[str] = None):
        self.message = message or "TransitionAborted"
        super().__init__(self.message)


class TransitionStatus(str, Enum):
    """Lifecycle of a single transition object."""
    PENDING = "pending"
    RESOLVING = "resolving"
    ABORTED = "aborted"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


def log_abort(transition: "Transition") -> TransitionAborted:
    """Log that ``transition`` noticed its abort and build the rejection reason."""
    log(transition.router, transition.sequence, "detected abort.")
    return TransitionAborted()


class Transition:
    """An awaitable attempt to transition to another route.

    A transition can be aborted, either explicitly via :meth:`abort` or by
    starting another transition while this one is still underway. An aborted
    transition can be :meth:`retry`'d later.

    Awaiting the transition (or its :attr:`promise`) yields the resolved
    :class:`~routetransition.state.TransitionState`, or raises either
    :class:`TransitionAborted` or the exact error a handler hook raised.

    Attributes:
        promise: The completion contract. Hand this out instead of the
            transition when the receiver must not be able to abort it.
        data: Caller-owned bag; shared with transitions created by
            :meth:`retry`, since they reuse the same intent.
    """

    is_transition = True

    def __init__(
        self,
        router: "Router",
        intent: Optional["NamedTransitionIntent"],
        state: Optional["TransitionState"] = None,
        error: Optional[BaseException] = None,
    ):
        self.router = router
        self.intent = intent
        self.state = state or router.state
        self.data: Dict[str, Any] = intent.data if intent is not None else {}
        self.resolved_models: Dict[str, Any] = {}
        self.params: Dict[str, Any] = {}
        self.query_params: Dict[str, Any] = {}
        self.target_name: Optional[str] = None
        self.pivot_handler: Any = None
        self.resolve_index = 0
        self.sequence: Optional[int] = None
        self.url_method: Optional[str] = _default_url_method(router)
        self.is_active = True
        self._signal = AbortSignal()
        self._started = False

        loop = asyncio.get_running_loop()

        if error is not None:
            self.promise: "asyncio.Future[TransitionState]" = loop.create_future()
            self.promise.set_exception(error)
            self.is_active = False
            return

        if state is not None:
            self.params = state.params
            self.query_params = state.query_params

            if state.handler_infos:
                self.target_name = state.handler_infos[-1].name

            for handler_info in state.handler_infos:
                if not handler_info.is_resolved:
                    break
                self.pivot_handler = handler_info.handler

            self.sequence = TRANSITION_SEQUENCE.next()
            self.promise = loop.create_task(self._resolve(state))
        else:
            self.promise = loop.create_future()
            self.promise.set_result(self.state)
            self.is_active = False

    async def _resolve(self, state: "TransitionState") -> "TransitionState":
        self._started = True
        yield_control = _yield_control if _yields_between_steps(self.router) else None
        try:
            resolved = await state.resolve(yield_control, self._signal.check, self)
        except ResolutionFailure as failure:
            if failure.was_aborted or self.is_aborted:
                raise log_abort(self) from None
            error = self._handle_error(failure)
        else:
            error = None

        # Raised outside the except block so the handler's error keeps its own
        # __cause__ and __context__
        if error is not None:
            raise error

        if self.is_aborted:
            raise log_abort(self)
        self.is_active = False
        return resolved

    def _handle_error(self, failure: ResolutionFailure) -> BaseException:
        try:
            self.trigger(True, "error", failure.error, self, failure.handler_with_error)
        except Exception as listener_error:
            logger.debug(f"{self.target_name}: error listener raised {listener_error!r}")
        finally:
            self.abort()
        return failure.error

    @property
    def is_aborted(self) -> bool:
        return self._signal.aborted

    @property
    def status(self) -> TransitionStatus:
        if self.promise.done():
            if self.promise.cancelled() or self.promise.exception() is not None:
                return TransitionStatus.REJECTED
            return TransitionStatus.FULFILLED
        if self.is_aborted:
            return TransitionStatus.ABORTED
        return TransitionStatus.RESOLVING if self._started else TransitionStatus.PENDING

    @property
    def handler_infos(self):
        return self.state.handler_infos if self.state is not None else []

    def __await__(self):
        return self.promise.__await__()

    def then(
        self,
        success: Optional[Callable[[Any], Any]] = None,
        failure: Optional[Callable[[BaseException], Any]] = None,
    ) -> "asyncio.Future[Any]":
        """Chain callbacks onto the completion contract.

        Either callback may return an awaitable. Returns a new task that
        settles with the callback's result, or with this transition's
        outcome when the matching callback is omitted.
        """
        return asyncio.ensure_future(_chain(self.promise, success, failure))

    def abort(self) -> "Transition":
        """Abort the transition.

        A transition is also aborted implicitly when the router starts
        another transition while this one is still underway. Aborting twice
        is a no-op.
        """
        if self.is_aborted:
            return self
        log(self.router, self.sequence, f"{self.target_name}: transition was aborted")
        self._signal.abort()
        self.is_active = False
        if self.router.active_transition is self:
            self.router.active_transition = None
        return self

    def retry(self) -> "Transition":
        """Abort this transition if still active and start it again.

        Returns:
            The new transition representing the next attempt.
        """
        self.abort()
        return self.router.transition_by_intent(self.intent, False)

    def method(self, method: Optional[str]) -> "Transition":
        """Set how the location is updated when this transition completes.

        ``"update"`` records a new location, ``"replace"`` overwrites the
        current one and a falsy value leaves the location alone (used when
        the location changed before the transition started).
        """
        self.url_method = method
        return self

    def trigger(self, *args: Any) -> None:
        """Fire an event on the handlers this transition has reached so far.

        Usable on route hierarchies that haven't been fully entered yet. A
        leading boolean is ``ignore_failure``: when false (the default), an
        event nobody handles raises
        :class:`~routetransition.exceptions.UnhandledEventError`.
        """
        if args and isinstance(args[0], bool):
            ignore_failure, args = args[0], args[1:]
        else:
            ignore_failure = False
        reached = self.handler_infos[:self.resolve_index + 1]
        trigger(self.router, reached, ignore_failure, list(args))

    send = trigger

    def follow_redirects(self) -> "asyncio.Future[TransitionState]":
        """Await the final outcome of this transition and any redirects.

        A redirect aborts this transition and installs another one as the
        router's active transition. The returned task follows that chain and
        settles like the last transition in it.
        """
        return asyncio.ensure_future(self._follow_redirects())

    async def _follow_redirects(self) -> "TransitionState":
        router = self.router
        try:
            return await self.promise
        except Exception:
            active = router.active_transition
            if active is not None and active is not self:
                return await active.follow_redirects()
            raise

    def log(self, message: str) -> None:
        log(self.router, self.sequence, message)

    def __str__(self):
        return f"Transition (sequence {self.sequence})"

    def __repr__(self):
        return f"<Transition sequence={self.sequence} target={self.target_name!r} status={self.status.value}>"


async def _chain(promise, success, failure):
    try:
        value = await promise
    except Exception as exc:
        if failure is None:
            raise
        return await _settle(failure(exc))
    if success is None:
        return value
    return await _settle(success(value))


async def _settle(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result


async def _yield_control() -> None:
    await asyncio.sleep(0)


def _yields_between_steps(router: "Router") -> bool:
    config = getattr(router, "config", None)
    return True if config is None else config.yield_between_steps


def _default_url_method(router: "Router") -> Optional[str]:
    config = getattr(router, "config", None)
    return "update" if config is None else config.default_url_method


__all__ = ["Transition", "TransitionAborted", "TransitionStatus", "log_abort"]
