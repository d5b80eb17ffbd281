"""Response shaping helpers for MCP tools."""

from __future__ import annotations

import json
import time
from typing import Any

from etf_portfolio_server.lib.formatters import FINANCIAL_DISCLAIMER

GENERIC_FAILURE_MESSAGE = "Portfolio generation failed. Please try again shortly."
INVALID_FORMAT_MESSAGE = "The AI returned an invalid portfolio format."


def success_payload(data: dict[str, Any]) -> dict[str, Any]:
    payload: dict[str, Any] = {"ok": True}
    payload.update(data)
    payload["disclaimer"] = FINANCIAL_DISCLAIMER
    payload["timestamp"] = int(time.time())
    return payload


def error_payload(code: str, message: str, details: dict[str, Any] | None = None, retriable: bool = False) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message, "retriable": retriable}
    if details:
        error["details"] = details
    return {"ok": False, "error": error, "timestamp": int(time.time())}


def to_json(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False)
