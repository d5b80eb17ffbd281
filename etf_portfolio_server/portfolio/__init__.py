"""Dividend ETF portfolio domain package."""

from etf_portfolio_server.portfolio.errors import (
    InvalidAllocation,
    MalformedResponse,
    PortfolioResponseError,
    SchemaViolation,
)
from etf_portfolio_server.portfolio.models import (
    DividendFrequency,
    EtfEntry,
    InvestmentStyle,
    Market,
    PortfolioOptions,
)
from etf_portfolio_server.portfolio.processor import PortfolioResponseProcessor

__all__ = [
    "DividendFrequency",
    "EtfEntry",
    "InvalidAllocation",
    "InvestmentStyle",
    "MalformedResponse",
    "Market",
    "PortfolioOptions",
    "PortfolioResponseError",
    "PortfolioResponseProcessor",
    "SchemaViolation",
]
