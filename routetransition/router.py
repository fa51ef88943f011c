"""Router module owning the current state and the single active transition."""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .config import RouterConfig
from .exceptions import UnrecognizedHandlerError
from .handler_info import HandlerInfo
from .intent import NamedTransitionIntent
from .state import TransitionState
from .transition import Transition
from .utils import call_hook, log, trigger

logger = logging.getLogger(__name__)


class Router:
    """Hierarchical router.

    Routes are registered as chains of handler names, root first::

        router = Router()
        router.map("post", ["application", "posts", "post"])
        router.register("post", PostHandler())

        transition = router.transition_to("post", params={"post": {"id": "1"}})
        state = await transition

    At most one transition is active at a time: starting a new one aborts
    the one in flight.
    """

    def __init__(self, config: Optional[RouterConfig] = None):
        self.config = config or RouterConfig()
        self.config.validate()
        self.logger = logger
        self.state = TransitionState()
        self.active_transition: Optional[Transition] = None
        self._routes: Dict[str, List[str]] = {}
        self._handlers: Dict[str, Any] = {}

    def map(self, name: str, chain: List[str]) -> None:
        """Register the handler chain (root to leaf) for route ``name``."""
        if not chain or chain[-1] != name:
            raise ValueError(f"Route chain for '{name}' must end with '{name}', got {chain!r}")
        self._routes[name] = list(chain)

    def register(self, name: str, handler: Any) -> None:
        """Register the handler object used for route ``name``."""
        self._handlers[name] = handler

    def recognize(self, name: str) -> List[str]:
        try:
            return self._routes[name]
        except KeyError:
            raise UnrecognizedHandlerError(name) from None

    def get_handler(self, name: str) -> Any:
        return self._handlers.get(name)

    def transition_to(
        self,
        name: str,
        params: Optional[Dict[str, Dict[str, Any]]] = None,
        query_params: Optional[Dict[str, Any]] = None,
        contexts: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Transition:
        """Start a transition to route ``name``."""
        try:
            intent = NamedTransitionIntent(
                name=name,
                params=params or {},
                query_params=query_params or {},
                contexts=contexts or {},
                data=data or {},
            )
        except ValidationError as e:
            return Transition(self, None, None, e)
        return self.transition_by_intent(intent, True)

    def replace_with(self, name: str, **kwargs: Any) -> Transition:
        """Like :meth:`transition_to`, but replaces the current location."""
        return self.transition_to(name, **kwargs).method("replace")

    def transition_by_intent(self, intent: NamedTransitionIntent, is_intentional: bool = True) -> Transition:
        """Start a transition for ``intent``.

        Args:
            intent: The requested destination.
            is_intentional: False when the router is repeating an earlier
                attempt (e.g. a retry) rather than serving a new request.

        Returns:
            The new active transition, the already active one when it
            targets the same chain, or an already-settled transition.
            Failures while building the target state come back as a
            rejected transition rather than being raised.
        """
        try:
            return self._get_transition_by_intent(intent, is_intentional)
        except Exception as e:
            logger.debug(f"Could not build target state for '{intent.name}': {e!r}")
            return Transition(self, intent, None, e)

    def _get_transition_by_intent(self, intent: NamedTransitionIntent, is_intentional: bool) -> Transition:
        was_transitioning = self.active_transition is not None
        old_state = self.active_transition.state if was_transitioning else self.state
        new_state = intent.apply_to_state(old_state, self)

        if _handler_infos_equal(new_state.handler_infos, old_state.handler_infos) \
                and new_state.query_params == old_state.query_params:
            return self.active_transition or Transition(self, intent)

        new_transition = Transition(self, intent, new_state)
        attempt = "Attempting" if is_intentional else "Retrying"
        log(self, new_transition.sequence, f"{attempt} transition to {new_transition.target_name}")

        if self.active_transition is not None:
            self.active_transition.abort()
        self.active_transition = new_transition

        new_transition.promise.add_done_callback(
            lambda task: self._finalize_transition(new_transition, task)
        )

        if not was_transitioning:
            trigger(self, self.state.handler_infos, True, ["will_transition", new_transition])

        return new_transition

    def _finalize_transition(self, transition: Transition, task) -> None:
        if task.cancelled() or task.exception() is not None:
            if self.active_transition is transition:
                self.active_transition = None
            return

        new_state = task.result()
        log(self, transition.sequence, "Resolved all models on destination route; finalizing transition.")
        try:
            self._setup_contexts(new_state, transition)
        except Exception:
            logger.error(f"Error while entering {transition.target_name}", exc_info=True)
        if self.active_transition is transition:
            self.active_transition = None
        if transition.url_method:
            log(self, transition.sequence, f"URL method {transition.url_method!r} for {transition.target_name}")
        log(self, transition.sequence, "TRANSITION COMPLETE.")

    def _setup_contexts(self, new_state: TransitionState, transition: Optional[Transition] = None) -> None:
        old_infos = self.state.handler_infos
        exited, updated, entered = _partition_handlers(old_infos, new_state.handler_infos)

        for info in exited:
            call_hook(info.handler, "exit")

        self.state = new_state

        for info in updated:
            call_hook(info.handler, "setup", info.context, transition)
        for info in entered:
            call_hook(info.handler, "enter", transition)
            call_hook(info.handler, "setup", info.context, transition)

    def trigger(self, name: str, *args: Any) -> None:
        """Fire an event on the router's current handlers."""
        trigger(self, self.state.handler_infos, False, [name, *args])

    def reset(self) -> None:
        """Abort any transition in flight and exit every current handler."""
        if self.active_transition is not None:
            self.active_transition.abort()
        for info in reversed(self.state.handler_infos):
            call_hook(info.handler, "exit")
        self.state = TransitionState()


def _handler_infos_equal(a: List[HandlerInfo], b: List[HandlerInfo]) -> bool:
    if len(a) != len(b):
        return False
    return all(x is y for x, y in zip(a, b))


def _partition_handlers(old_infos: List[HandlerInfo], new_infos: List[HandlerInfo]):
    """Split handler infos into exited, context-updated and entered groups."""
    exited: List[HandlerInfo] = []
    updated: List[HandlerInfo] = []
    entered: List[HandlerInfo] = []
    changed = False

    for index, new_info in enumerate(new_infos):
        old_info = old_infos[index] if index < len(old_infos) else None
        if old_info is None or old_info.handler is not new_info.handler or old_info.name != new_info.name:
            changed = True
            if old_info is not None:
                exited.insert(0, old_info)
            entered.append(new_info)
        elif changed or old_info.context is not new_info.context:
            changed = True
            updated.append(new_info)

    exited.extend(old_infos[len(new_infos):])
    return exited, updated, entered
