import json
import logging

from etf_portfolio_server.runtime.monitoring import ServerMetrics, log_portfolio_event


def test_metrics_snapshot() -> None:
    metrics = ServerMetrics()
    metrics.record(latency_ms=10.0, success=True)
    metrics.record(latency_ms=30.0, success=False, code="SCHEMA_VIOLATION")
    snapshot = metrics.snapshot()
    assert snapshot.total_requests == 2
    assert snapshot.error_rate == 0.5
    assert snapshot.avg_latency_ms == 20.0
    assert snapshot.failures_by_code == {"SCHEMA_VIOLATION": 1}


def test_log_portfolio_event_emits_json(caplog) -> None:
    with caplog.at_level(logging.INFO, logger="etf_portfolio_server.events"):
        log_portfolio_event("generate", 12.34567, False, code="MALFORMED_RESPONSE")
    event = json.loads(caplog.records[-1].getMessage())
    assert event["operation"] == "generate"
    assert event["latency_ms"] == 12.346
    assert event["success"] is False
    assert event["code"] == "MALFORMED_RESPONSE"
    assert "etf_count" not in event
