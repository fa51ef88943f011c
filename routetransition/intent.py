"""
Transition intents: what a caller asked the router to transition to.
"""

from typing import Any, Dict, List, Optional, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from .handler_info import (
    HandlerInfo,
    UnresolvedHandlerInfoByObject,
    UnresolvedHandlerInfoByParam,
)
from .state import TransitionState

if TYPE_CHECKING:
    from .router import Router


class NamedTransitionIntent(BaseModel):
    """Intent to transition to a named route.

    The intent itself is immutable; ``data`` is the one mutable bag on it,
    shared by every transition built from the intent (including retries).
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., min_length=1, description="Name of the leaf route to transition to")

    contexts: Dict[str, Any] = Field(
        default_factory=dict,
        description="Already-available models keyed by route name; their model hooks are skipped"
    )

    params: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict,
        description="Params keyed by route name"
    )

    query_params: Dict[str, Any] = Field(default_factory=dict)

    data: Dict[str, Any] = Field(
        default_factory=dict,
        description="Caller-owned data carried by every transition built from this intent"
    )

    def apply_to_state(self, old_state: TransitionState, router: "Router") -> TransitionState:
        """Build the target state for this intent.

        Resolved handler infos from ``old_state`` are reused from the root
        down until the first route whose name, params or context differ;
        everything below that point is resolved again.
        """
        names = router.recognize(self.name)
        handler_infos: List[HandlerInfo] = []
        diverged = False

        for index, name in enumerate(names):
            handler = router.get_handler(name)
            if name in self.contexts:
                new_info: HandlerInfo = UnresolvedHandlerInfoByObject(
                    name=name,
                    handler=handler,
                    params=dict(self.params.get(name, {})),
                    context=self.contexts[name],
                )
            else:
                new_info = UnresolvedHandlerInfoByParam(
                    name=name,
                    handler=handler,
                    params=dict(self.params.get(name, {})),
                )

            old_info = _info_at(old_state, index)
            if not diverged and old_info is not None and old_info.is_resolved \
                    and not new_info.should_supersede(old_info):
                handler_infos.append(old_info)
            else:
                diverged = True
                handler_infos.append(new_info)

        return TransitionState(
            handler_infos=handler_infos,
            params={info.name: info.params for info in handler_infos},
            query_params=self.query_params,
        )


def _info_at(state: Optional[TransitionState], index: int) -> Optional[HandlerInfo]:
    if state is None or index >= len(state.handler_infos):
        return None
    return state.handler_infos[index]
