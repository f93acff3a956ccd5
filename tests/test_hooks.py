"""Tests for the interceptor chain and debug logging setup."""

from __future__ import annotations

import io
import logging

from rich.console import Console

from creeble.hooks import HookContext, InterceptorChain
from creeble.log import LOGGER_NAME, configure_logging, log_response


class TestInterceptorChain:
    def test_runs_in_registration_order(self) -> None:
        chain = InterceptorChain()
        order: list[int] = []
        chain.add_request(lambda ctx: order.append(1))
        chain.add_request(lambda ctx: order.append(2))
        chain.run_request(HookContext())
        assert order == [1, 2]

    def test_replacement_context_passed_along(self) -> None:
        chain = InterceptorChain()
        replacement = HookContext(method="GET", url="https://other.example.com")
        seen: list[str] = []
        chain.add_response(lambda ctx: replacement)
        chain.add_response(lambda ctx: seen.append(ctx.url))
        result = chain.run_response(HookContext(url="https://creeble.io"))
        assert result is replacement
        assert seen == ["https://other.example.com"]

    def test_stages_are_independent(self) -> None:
        chain = InterceptorChain()
        calls: list[str] = []
        chain.add_error(lambda ctx: calls.append("error"))
        chain.run_request(HookContext())
        chain.run_response(HookContext())
        assert calls == []
        chain.run_error(HookContext())
        assert calls == ["error"]

    def test_remove_from_every_stage(self) -> None:
        chain = InterceptorChain()

        def hook(ctx: HookContext) -> None:
            return None

        chain.add_request(hook)
        chain.add_response(hook)
        chain.add_error(lambda ctx: None)
        assert len(chain) == 3
        chain.remove(hook)
        assert len(chain) == 1
        chain.clear()
        assert len(chain) == 0


class TestConfigureLogging:
    def test_debug_installs_single_handler(self) -> None:
        console = Console(file=io.StringIO())
        logger = configure_logging(True, console)
        configure_logging(True, console)
        installed = [h for h in logger.handlers if getattr(h, "_creeble_debug", False)]
        assert len(installed) == 1
        assert logger.name == LOGGER_NAME
        assert logger.level == logging.DEBUG

    def test_disable_removes_handler(self) -> None:
        logger = configure_logging(True, Console(file=io.StringIO()))
        configure_logging(False)
        assert not any(getattr(h, "_creeble_debug", False) for h in logger.handlers)
        assert logger.level == logging.NOTSET

    def test_records_rendered_to_console(self) -> None:
        buffer = io.StringIO()
        configure_logging(True, Console(file=buffer, width=200))
        log_response(HookContext(url="https://creeble.io/api/v1/blog", status_code=200, response_body={"data": [1, 2]}))
        assert "(2 items)" in buffer.getvalue()
