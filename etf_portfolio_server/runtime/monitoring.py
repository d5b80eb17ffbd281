"""Structured logging and health metrics aggregation."""

from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any

LOGGER = logging.getLogger("etf_portfolio_server.events")


@dataclass
class HealthSnapshot:
    uptime_seconds: float
    total_requests: int
    error_rate: float
    avg_latency_ms: float
    failures_by_code: dict[str, int]


class ServerMetrics:
    def __init__(self, started_at: float | None = None) -> None:
        self.started_at = started_at or time.time()
        self._lock = threading.Lock()
        self.total_requests = 0
        self.error_requests = 0
        self.total_latency_ms = 0.0
        self.failures_by_code: dict[str, int] = {}

    def record(self, latency_ms: float, success: bool, code: str | None = None) -> None:
        with self._lock:
            self.total_requests += 1
            if not success:
                self.error_requests += 1
                key = code or "UNKNOWN"
                self.failures_by_code[key] = self.failures_by_code.get(key, 0) + 1
            self.total_latency_ms += max(0.0, latency_ms)

    def snapshot(self) -> HealthSnapshot:
        with self._lock:
            requests = self.total_requests
            avg_latency = (self.total_latency_ms / requests) if requests else 0.0
            error_rate = (self.error_requests / requests) if requests else 0.0
            failures = dict(self.failures_by_code)
        return HealthSnapshot(
            uptime_seconds=max(0.0, time.time() - self.started_at),
            total_requests=requests,
            error_rate=error_rate,
            avg_latency_ms=avg_latency,
            failures_by_code=failures,
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def log_portfolio_event(
    operation: str,
    latency_ms: float,
    success: bool,
    etf_count: int | None = None,
    code: str | None = None,
    warning: str | None = None,
) -> None:
    payload: dict[str, Any] = {
        "operation": operation,
        "latency_ms": round(latency_ms, 3),
        "success": success,
        "timestamp": int(time.time()),
    }
    if etf_count is not None:
        payload["etf_count"] = etf_count
    if code:
        payload["code"] = code
    if warning:
        payload["warning"] = warning
    LOGGER.info(json.dumps(payload, ensure_ascii=True))
