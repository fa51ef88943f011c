"""
Shared helpers: transition logging, event dispatch and hook invocation.
"""

import inspect
import logging
from typing import Any, Optional, Sequence, TYPE_CHECKING

from .exceptions import UnhandledEventError

if TYPE_CHECKING:
    from .handler_info import HandlerInfo
    from .router import Router

logger = logging.getLogger(__name__)


def log(router: "Router", sequence: Optional[int], message: str) -> None:
    """Write a per-transition diagnostic line through the router's logger."""
    config = getattr(router, "config", None)
    if config is not None and not config.log_transitions:
        return
    level = config.log_level if config is not None else logging.DEBUG
    router_logger = getattr(router, "logger", logger)
    router_logger.log(level, f"Transition #{sequence}: {message}")


def trigger(
    router: "Router",
    handler_infos: Optional[Sequence["HandlerInfo"]],
    ignore_failure: bool,
    args: Sequence[Any],
) -> None:
    """Fan an event out to the given handler infos.

    ``args`` holds the event name followed by its arguments. The event
    bubbles from the deepest handler info towards the root. A handler that
    defines the event handles it; returning ``True`` lets it keep bubbling,
    any other return value stops it.

    Raises:
        UnhandledEventError: if nothing handled the event and
            ``ignore_failure`` is false.
    """
    trigger_event = getattr(router, "trigger_event", None)
    if trigger_event is not None:
        trigger_event(handler_infos, ignore_failure, args)
        return

    name, event_args = args[0], list(args[1:])

    if not handler_infos:
        if ignore_failure:
            return
        raise UnhandledEventError(
            name, f"Could not trigger event '{name}'. There are no active handlers"
        )

    event_was_handled = False
    for handler_info in reversed(handler_infos):
        events = getattr(handler_info.handler, "events", None) or {}
        callback = events.get(name)
        if callback is None:
            continue
        if callback(*event_args) is True:
            event_was_handled = True
        else:
            return

    if not event_was_handled and not ignore_failure:
        logger.debug(f"Unhandled event '{name}'")
        raise UnhandledEventError(name)


def call_hook(obj: Any, hook_name: str, *args: Any) -> Any:
    """Call ``obj.<hook_name>(*args)`` if the hook exists, else return None."""
    if obj is None:
        return None
    hook = getattr(obj, hook_name, None)
    if hook is None or not callable(hook):
        return None
    return hook(*args)


async def resolve_hook(obj: Any, hook_name: str, *args: Any) -> Any:
    """Like :func:`call_hook` but awaits the hook's result when it is awaitable.

    A hook that redirects by returning the new transition yields None; the
    transition is not awaited.
    """
    result = call_hook(obj, hook_name, *args)
    if getattr(result, "is_transition", False):
        return None
    if inspect.isawaitable(result):
        result = await result
    return result
