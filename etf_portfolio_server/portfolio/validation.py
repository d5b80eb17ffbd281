"""Parsing and shape validation for model-generated portfolio payloads."""

from __future__ import annotations

import json
import math
from typing import Any

from etf_portfolio_server.portfolio.errors import MalformedResponse, SchemaViolation
from etf_portfolio_server.portfolio.models import DividendFrequency, EtfEntry

STRING_FIELDS = ("etfName", "tickerSymbol", "reasoning")
NUMBER_FIELDS = ("allocationPercentage", "expectedDividendYield")
REQUIRED_FIELDS = (
    "etfName",
    "tickerSymbol",
    "allocationPercentage",
    "reasoning",
    "expectedDividendYield",
    "dividendFrequency",
)


def parse_payload(raw_text: str) -> list[Any]:
    """Decode the trimmed payload into an ordered list of candidate entries."""
    if not isinstance(raw_text, str):
        raise MalformedResponse(str(raw_text), "Payload must be text.")
    try:
        parsed = json.loads(raw_text.strip())
    except json.JSONDecodeError as error:
        raise MalformedResponse(raw_text, f"Payload is not valid JSON: {error.msg}.") from error
    except (ValueError, RecursionError) as error:
        raise MalformedResponse(raw_text, f"Payload could not be decoded: {error}") from error
    if not isinstance(parsed, list):
        raise MalformedResponse(raw_text, "Payload must be a JSON array of ETF entries.")
    return parsed


def _is_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def validate_entry(candidate: object, index: int = 0) -> EtfEntry:
    if not isinstance(candidate, dict):
        raise SchemaViolation("entry", f"Entry {index} must be a JSON object.", index)

    for name in REQUIRED_FIELDS:
        if name not in candidate or candidate[name] is None:
            raise SchemaViolation(name, f"Entry {index} is missing required field: {name}", index)
    for name in STRING_FIELDS:
        if not isinstance(candidate[name], str):
            raise SchemaViolation(name, f"Entry {index} field {name} must be a string.", index)
    for name in NUMBER_FIELDS:
        if not _is_number(candidate[name]):
            raise SchemaViolation(name, f"Entry {index} field {name} must be a finite number.", index)

    try:
        frequency = DividendFrequency.parse(candidate["dividendFrequency"])
    except ValueError as error:
        raise SchemaViolation("dividendFrequency", f"Entry {index}: {error}", index) from error

    return EtfEntry(
        name=candidate["etfName"],
        ticker_symbol=candidate["tickerSymbol"],
        allocation_percentage=float(candidate["allocationPercentage"]),
        reasoning=candidate["reasoning"],
        expected_dividend_yield=float(candidate["expectedDividendYield"]),
        dividend_frequency=frequency,
    )


def validate_entries(candidates: list[Any]) -> list[EtfEntry]:
    """Validate every candidate in order; the first violation wins."""
    return [validate_entry(candidate, index) for index, candidate in enumerate(candidates)]
