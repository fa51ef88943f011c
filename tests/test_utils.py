"""Tests for the log and trigger helpers."""

import logging
from unittest.mock import Mock

import pytest

from routetransition import Router, RouterConfig, UnhandledEventError
from routetransition.handler_info import ResolvedHandlerInfo
from routetransition.utils import call_hook, log, resolve_hook, trigger


class Handler:
    def __init__(self, **events):
        self.events = events


def infos(*handlers):
    return [ResolvedHandlerInfo(name=f"route{i}", handler=h) for i, h in enumerate(handlers)]


class TestTrigger:
    """Test event dispatch."""

    def test_bubbles_leaf_to_root(self):
        order = []
        root = Handler(ping=lambda: order.append("root") or True)
        leaf = Handler(ping=lambda: order.append("leaf") or True)

        trigger(Router(), infos(root, leaf), False, ["ping"])

        assert order == ["leaf", "root"]

    def test_passes_arguments(self):
        callback = Mock(return_value=None)

        trigger(Router(), infos(Handler(save=callback)), False, ["save", 1, "two"])

        callback.assert_called_once_with(1, "two")

    def test_non_true_return_stops_bubbling(self):
        root = Mock(return_value=True)
        trigger(Router(), infos(Handler(ping=root), Handler(ping=lambda: None)), False, ["ping"])
        root.assert_not_called()

    def test_handlers_without_event_are_skipped(self):
        root = Mock(return_value=None)
        trigger(Router(), infos(Handler(ping=root), Handler(), object()), False, ["ping"])
        root.assert_called_once_with()

    def test_unhandled_raises(self):
        with pytest.raises(UnhandledEventError, match="Nothing handled the event 'ping'"):
            trigger(Router(), infos(Handler()), False, ["ping"])

    def test_unhandled_ignored(self):
        trigger(Router(), infos(Handler()), True, ["ping"])
        trigger(Router(), [], True, ["ping"])

    def test_no_handlers_raises(self):
        with pytest.raises(UnhandledEventError, match="no active handlers"):
            trigger(Router(), [], False, ["ping"])

    def test_router_trigger_event_takes_over(self):
        router = Router()
        router.trigger_event = Mock()
        handler_infos = infos(Handler())

        trigger(router, handler_infos, False, ["ping", 1])

        router.trigger_event.assert_called_once_with(handler_infos, False, ["ping", 1])


class TestLog:
    """Test transition log lines."""

    def test_log_format(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="routetransition.router"):
            log(Router(), 12, "hello")
        assert caplog.messages == ["Transition #12: hello"]

    def test_log_level_from_config(self, caplog):
        router = Router(config=RouterConfig(log_level=logging.INFO))
        with caplog.at_level(logging.INFO, logger="routetransition.router"):
            log(router, 1, "hello")
        assert caplog.records[0].levelno == logging.INFO

    def test_log_disabled(self, caplog):
        router = Router(config=RouterConfig(log_transitions=False))
        with caplog.at_level(logging.DEBUG):
            log(router, 1, "hello")
        assert caplog.messages == []


class TestHooks:
    """Test optional hook invocation."""

    def test_missing_hook(self):
        assert call_hook(object(), "enter") is None
        assert call_hook(None, "enter") is None

    def test_calls_hook(self):
        handler = Mock()
        handler.setup.return_value = "done"
        assert call_hook(handler, "setup", 1, 2) == "done"
        handler.setup.assert_called_once_with(1, 2)

    @pytest.mark.anyio
    async def test_resolve_hook_awaits(self):
        class Handler:
            async def model(self, params):
                return params["id"]

        assert await resolve_hook(Handler(), "model", {"id": 3}) == 3

    @pytest.mark.anyio
    async def test_resolve_hook_ignores_returned_transition(self):
        redirect = Mock(is_transition=True)

        class Handler:
            def redirect(self, context, payload):
                return redirect

        assert await resolve_hook(Handler(), "redirect", None, {}) is None
