"""Portfolio generation orchestration service."""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Protocol

from etf_portfolio_server.lib.formatters import format_portfolio
from etf_portfolio_server.portfolio.analytics import build_allocation_breakdown
from etf_portfolio_server.portfolio.errors import MalformedResponse, PortfolioResponseError
from etf_portfolio_server.portfolio.models import Portfolio, PortfolioOptions
from etf_portfolio_server.portfolio.processor import PortfolioResponseProcessor
from etf_portfolio_server.prompts.portfolio_prompts import PORTFOLIO_RESPONSE_SCHEMA, build_generation_prompt
from etf_portfolio_server.providers.http import ProviderError
from etf_portfolio_server.runtime.limits import GenerationGuard, RequestInProgress
from etf_portfolio_server.runtime.monitoring import ServerMetrics, log_portfolio_event
from etf_portfolio_server.runtime.response import (
    GENERIC_FAILURE_MESSAGE,
    INVALID_FORMAT_MESSAGE,
    error_payload,
    success_payload,
)

LOGGER = logging.getLogger(__name__)
CURRENT_PORTFOLIO_URI = "portfolio://current"


class ModelClient(Protocol):
    def generate_content(self, prompt: str, response_schema: dict[str, Any] | None = None) -> str: ...


def _portfolio_payload(portfolio: Portfolio, options: PortfolioOptions) -> dict[str, Any]:
    return {
        "options": options.to_dict(),
        "portfolio": [entry.to_dict() for entry in portfolio],
        "breakdown": build_allocation_breakdown(portfolio, options.investment_amount, options.market),
        "summary": format_portfolio(portfolio, options.investment_amount, options.market, include_disclaimer=False),
    }


class PortfolioService:
    def __init__(
        self,
        client: ModelClient | None,
        processor: PortfolioResponseProcessor | None = None,
        metrics: ServerMetrics | None = None,
        resource_updated_callback: Callable[[str], None] | None = None,
    ) -> None:
        self.client = client
        self.processor = processor or PortfolioResponseProcessor()
        self.metrics = metrics or ServerMetrics()
        self._guard = GenerationGuard()
        self._snapshot_lock = threading.Lock()
        self._snapshot: dict[str, Any] | None = None
        self._resource_updated_callback = resource_updated_callback

    @property
    def busy(self) -> bool:
        return self._guard.busy

    def _store_snapshot(self, source: str, payload: dict[str, Any]) -> None:
        snapshot = {"uri": CURRENT_PORTFOLIO_URI, "source": source, "payload": payload}
        with self._snapshot_lock:
            self._snapshot = snapshot
        if self._resource_updated_callback is not None:
            self._resource_updated_callback(CURRENT_PORTFOLIO_URI)

    def get_current_snapshot(self) -> dict[str, Any] | None:
        with self._snapshot_lock:
            return self._snapshot

    def reset(self) -> None:
        """Drop the current portfolio; a response still in flight will not replace it."""
        self._guard.reset()
        with self._snapshot_lock:
            self._snapshot = None

    def _record(
        self,
        operation: str,
        started: float,
        success: bool,
        etf_count: int | None = None,
        code: str | None = None,
        warning: str | None = None,
    ) -> None:
        latency_ms = (time.perf_counter() - started) * 1000.0
        self.metrics.record(latency_ms=latency_ms, success=success, code=code)
        log_portfolio_event(operation, latency_ms, success, etf_count=etf_count, code=code, warning=warning)

    def generate(self, options: PortfolioOptions) -> dict[str, Any]:
        """Ask the model for a portfolio and return a validated, normalized payload."""
        started = time.perf_counter()
        if self.client is None:
            self._record("generate", started, False, code="NOT_CONFIGURED")
            return error_payload("NOT_CONFIGURED", "Model API key is not configured.")
        try:
            generation = self._guard.acquire()
        except RequestInProgress as error:
            self._record("generate", started, False, code="IN_PROGRESS")
            return error_payload("IN_PROGRESS", str(error), retriable=True)

        try:
            prompt = build_generation_prompt(options)
            raw_text = self.client.generate_content(prompt, PORTFOLIO_RESPONSE_SCHEMA)
            portfolio = self.processor.process(raw_text)
        except PortfolioResponseError as error:
            if not isinstance(error, MalformedResponse):
                LOGGER.warning("Rejected model portfolio: %s", error.message)
            self._record("generate", started, False, code=error.code)
            return error_payload(error.code, INVALID_FORMAT_MESSAGE, details=error.to_dict())
        except ProviderError as error:
            LOGGER.error("Model request failed: [%s] %s", error.code, error.message)
            self._record("generate", started, False, code=error.code)
            return error_payload(
                error.code,
                GENERIC_FAILURE_MESSAGE,
                details={"provider": error.provider, "status": error.status},
                retriable=error.retriable,
            )
        finally:
            self._guard.release()

        payload = success_payload(_portfolio_payload(portfolio, options))
        warning = None
        if self._guard.is_current(generation):
            self._store_snapshot("generate", payload)
        else:
            warning = "stale_response"
            payload["stale"] = True
        self._record("generate", started, True, etf_count=len(portfolio), warning=warning)
        return payload

    def process_response(self, raw_text: str, options: PortfolioOptions | None = None) -> dict[str, Any]:
        """Validate and normalize a payload that was produced elsewhere."""
        started = time.perf_counter()
        try:
            portfolio = self.processor.process(raw_text)
        except PortfolioResponseError as error:
            self._record("process_response", started, False, code=error.code)
            return error_payload(error.code, error.message, details=error.to_dict())
        self._record("process_response", started, True, etf_count=len(portfolio))
        if options is None:
            return success_payload({"portfolio": [entry.to_dict() for entry in portfolio]})
        return success_payload(_portfolio_payload(portfolio, options))
