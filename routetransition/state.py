"""
Transition states: an ordered handler-info chain plus its params.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .abort import AbortRequested
from .exceptions import ResolutionFailure
from .handler_info import HandlerInfo
from .utils import resolve_hook

logger = logging.getLogger(__name__)


class TransitionState:
    """The target (or current) route chain of a router.

    ``handler_infos`` is ordered root to leaf. ``params`` maps each handler
    name to the params it was entered with.
    """

    def __init__(
        self,
        handler_infos: Optional[List[HandlerInfo]] = None,
        params: Optional[Dict[str, Dict[str, Any]]] = None,
        query_params: Optional[Dict[str, Any]] = None,
    ):
        self.handler_infos: List[HandlerInfo] = list(handler_infos or [])
        self.params: Dict[str, Dict[str, Any]] = dict(params or {})
        self.query_params: Dict[str, Any] = dict(query_params or {})

    @property
    def leaf(self) -> Optional[HandlerInfo]:
        return self.handler_infos[-1] if self.handler_infos else None

    async def resolve(
        self,
        yield_control: Optional[Callable[[], Awaitable[None]]],
        should_continue: Callable[[], None],
        payload: Any = None,
    ) -> "TransitionState":
        """Resolve every handler info in chain order.

        Args:
            yield_control: Awaited before each handler info, when given, so
                other tasks can run between resolution steps.
            should_continue: Abort check; raises
                :class:`~routetransition.abort.AbortRequested` to stop.
            payload: The in-flight transition. Its ``resolve_index`` tracks
                progress and its ``resolved_models`` collects models.

        Returns:
            This state, with every handler info replaced by its resolved form.

        Raises:
            ResolutionFailure: on abort (``was_aborted=True``) or when a
                handler hook raises (``was_aborted=False``).
        """
        for handler_info in self.handler_infos:
            self.params[handler_info.name] = handler_info.params or {}

        if payload is None:
            payload = _ResolutionPayload()
        payload.resolve_index = 0
        was_aborted = False

        def inner_should_continue() -> None:
            nonlocal was_aborted
            try:
                should_continue()
            except AbortRequested:
                was_aborted = True
                raise

        try:
            while payload.resolve_index < len(self.handler_infos):
                if yield_control is not None:
                    await yield_control()
                index = payload.resolve_index
                handler_info = self.handler_infos[index]
                was_already_resolved = handler_info.is_resolved
                resolved = await handler_info.resolve(inner_should_continue, payload)

                inner_should_continue()
                self.handler_infos[index] = resolved
                payload.resolve_index = index + 1

                if not was_already_resolved:
                    await resolve_hook(resolved.handler, "redirect", resolved.context, payload)
                    inner_should_continue()
        except Exception as error:
            raise self._failure(error, payload, was_aborted) from error

        return self

    def _failure(self, error: Exception, payload: Any, was_aborted: bool) -> ResolutionFailure:
        if was_aborted or isinstance(error, AbortRequested):
            return ResolutionFailure(was_aborted=True, state=self)

        handler_with_error = None
        if self.handler_infos:
            error_index = min(payload.resolve_index, len(self.handler_infos) - 1)
            handler_with_error = self.handler_infos[error_index].handler
            logger.debug(f"Resolving {self.handler_infos[error_index].name} failed: {error!r}")
        return ResolutionFailure(
            was_aborted=False,
            error=error,
            handler_with_error=handler_with_error,
            state=self,
        )

    def __repr__(self):
        names = ", ".join(info.name for info in self.handler_infos)
        return f"TransitionState([{names}])"


class _ResolutionPayload:
    """Stand-in payload for resolving a state outside a transition."""

    def __init__(self):
        self.resolve_index = 0
        self.resolved_models: Dict[str, Any] = {}
        self.params: Dict[str, Any] = {}
        self.query_params: Dict[str, Any] = {}
