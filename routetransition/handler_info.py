"""
Handler infos: one node of a resolved or resolving route chain.

A handler info pairs a route handler (any object exposing optional hook
methods) with the params and context it was entered with. Unresolved
variants know how to run the handler's model hooks; the result is always a
:class:`ResolvedHandlerInfo`.

Hooks looked up on the handler:

- ``before_model(transition)``
- ``model(params, transition)``
- ``after_model(model, transition)``

Each hook may return a plain value or an awaitable.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .utils import resolve_hook


class ResolutionStatus(str, Enum):
    """Where a handler info is in its resolution."""
    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    RESOLVED = "resolved"


def params_match(a: Optional[Dict[str, Any]], b: Optional[Dict[str, Any]]) -> bool:
    """Check whether two param dicts agree on every key either of them has."""
    if not a and not b:
        return True
    if not a or not b:
        return False
    keys = set(a) | set(b)
    return all(a.get(key) == b.get(key) for key in keys)


class HandlerInfo:
    """Base class for all handler infos."""

    status = ResolutionStatus.UNRESOLVED

    def __init__(
        self,
        name: str,
        handler: Any = None,
        params: Optional[Dict[str, Any]] = None,
        context: Any = None,
    ):
        self.name = name
        self.handler = handler
        self.params = params if params is not None else {}
        self.context = context

    @property
    def is_resolved(self) -> bool:
        return self.status == ResolutionStatus.RESOLVED

    def log(self, payload: Any, message: str) -> None:
        log = getattr(payload, "log", None)
        if log is not None:
            log(f"{self.name}: {message}")

    async def resolve(self, should_continue: Callable[[], None], payload: Any) -> "ResolvedHandlerInfo":
        """Run this handler's model hooks, checking for abort between them.

        Args:
            should_continue: Called before every hook; raises to stop resolution.
            payload: The in-flight transition (receives resolved models and params).

        Returns:
            The resolved counterpart of this handler info.
        """
        self.status = ResolutionStatus.RESOLVING
        try:
            should_continue()
            await self.run_before_model_hook(payload)
            should_continue()
            model = await self.get_model(payload)
            should_continue()
            model = await self.run_after_model_hook(payload, model)
            should_continue()
        except BaseException:
            self.status = ResolutionStatus.UNRESOLVED
            raise
        return self.become_resolved(payload, model)

    async def run_before_model_hook(self, payload: Any) -> Any:
        trigger = getattr(payload, "trigger", None)
        if trigger is not None:
            trigger(True, "will_resolve_model", payload, self.handler)
        return await self.run_shared_model_hook(payload, "before_model", [])

    async def run_after_model_hook(self, payload: Any, resolved_model: Any) -> Any:
        self.stash_resolved_model(payload, resolved_model)
        await self.run_shared_model_hook(payload, "after_model", [resolved_model])
        # after_model may swap the model by writing to resolved_models
        return payload.resolved_models[self.name] if payload is not None else resolved_model

    async def run_shared_model_hook(self, payload: Any, hook_name: str, args: List[Any]) -> Any:
        self.log(payload, f"calling {hook_name} hook")
        return await resolve_hook(self.handler, hook_name, *args, payload)

    async def get_model(self, payload: Any) -> Any:
        raise NotImplementedError

    def stash_resolved_model(self, payload: Any, resolved_model: Any) -> None:
        if payload is None:
            return
        payload.resolved_models[self.name] = resolved_model

    def become_resolved(self, payload: Any, resolved_context: Any) -> "ResolvedHandlerInfo":
        params = self.params
        if payload is not None:
            self.stash_resolved_model(payload, resolved_context)
            payload.params[self.name] = params
        return ResolvedHandlerInfo(
            name=self.name,
            handler=self.handler,
            params=params,
            context=resolved_context,
        )

    def should_supersede(self, other: Optional["HandlerInfo"]) -> bool:
        """Whether this info must replace ``other`` in a new chain."""
        if other is None:
            return True
        return other.name != self.name or not params_match(self.params, other.params)

    def __repr__(self):
        return f"{self.__class__.__name__}(name={self.name!r}, params={self.params!r})"


class ResolvedHandlerInfo(HandlerInfo):
    """A handler info whose model hooks have already run."""

    status = ResolutionStatus.RESOLVED

    async def resolve(self, should_continue: Callable[[], None], payload: Any) -> "ResolvedHandlerInfo":
        if payload is not None:
            payload.resolved_models[self.name] = self.context
        return self


class UnresolvedHandlerInfoByParam(HandlerInfo):
    """Resolves its model by calling the handler's ``model`` hook with params."""

    async def get_model(self, payload: Any) -> Any:
        full_params = dict(self.params)
        query_params = getattr(payload, "query_params", None)
        if query_params:
            full_params["query_params"] = query_params
        return await self.run_shared_model_hook(payload, "model", [full_params])


class UnresolvedHandlerInfoByObject(HandlerInfo):
    """Holds a caller-provided context; the ``model`` hook is skipped."""

    async def get_model(self, payload: Any) -> Any:
        self.log(payload, "resolving provided model")
        return self.context

    def should_supersede(self, other: Optional[HandlerInfo]) -> bool:
        if other is None:
            return True
        return other.name != self.name or other.context is not self.context
