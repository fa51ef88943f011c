"""
Cancellable, retryable transitions for a hierarchical router.

A :class:`Transition` wraps one attempt to move a :class:`Router` from its
current state to a target chain of route handlers. It resolves the chain
asynchronously, can be aborted cooperatively, retried, followed through
redirects, and used to fire events on the handlers reached so far.
"""

from .abort import AbortSignal
from .config import RouterConfig
from .exceptions import (
    ResolutionFailure,
    RouterError,
    UnhandledEventError,
    UnrecognizedHandlerError,
)
from .handler_info import (
    HandlerInfo,
    ResolutionStatus,
    ResolvedHandlerInfo,
    UnresolvedHandlerInfoByObject,
    UnresolvedHandlerInfoByParam,
)
from .intent import NamedTransitionIntent
from .router import Router
from .sequence import TRANSITION_SEQUENCE, SequenceCounter
from .state import TransitionState
from .transition import Transition, TransitionAborted, TransitionStatus

__version__ = "0.1.0"
__author__ = "Router Transition Contributors"
__license__ = "MIT"

__all__ = [
    "Router",
    "RouterConfig",
    "Transition",
    "TransitionAborted",
    "TransitionStatus",
    "TransitionState",
    "NamedTransitionIntent",
    "HandlerInfo",
    "ResolvedHandlerInfo",
    "UnresolvedHandlerInfoByParam",
    "UnresolvedHandlerInfoByObject",
    "ResolutionStatus",
    "AbortSignal",
    "SequenceCounter",
    "TRANSITION_SEQUENCE",
    "RouterError",
    "ResolutionFailure",
    "UnhandledEventError",
    "UnrecognizedHandlerError",
]
