"""Turns an untrusted model response into a validated, normalized portfolio."""

from __future__ import annotations

import logging

from etf_portfolio_server.portfolio.errors import MalformedResponse
from etf_portfolio_server.portfolio.models import Portfolio
from etf_portfolio_server.portfolio.normalization import normalize_allocations
from etf_portfolio_server.portfolio.validation import parse_payload, validate_entries

LOGGER = logging.getLogger(__name__)


class PortfolioResponseProcessor:
    """Stateless parse -> validate -> normalize pipeline.

    ``process`` raises a ``PortfolioResponseError`` subclass on failure:
    ``MalformedResponse`` for text that is not a JSON array,
    ``SchemaViolation`` for a missing or mistyped field or an unknown cadence,
    ``InvalidAllocation`` when allocations total zero or less.
    """

    def process(self, raw_text: str) -> Portfolio:
        try:
            candidates = parse_payload(raw_text)
        except MalformedResponse as error:
            LOGGER.warning("Failed to parse model response: %s | raw=%r", error.message, error.raw_text)
            raise
        entries = validate_entries(candidates)
        return tuple(normalize_allocations(entries))
