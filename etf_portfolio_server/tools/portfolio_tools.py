"""Portfolio-domain MCP tools."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP

from etf_portfolio_server.portfolio.models import (
    ALL_DIVIDEND_FREQUENCIES,
    MAX_ETFS,
    MIN_ETFS,
    InvestmentStyle,
    Market,
    PortfolioOptions,
)
from etf_portfolio_server.runtime.response import error_payload, success_payload, to_json

if TYPE_CHECKING:
    from etf_portfolio_server.tools.registry import ToolServices


def options_reference() -> dict[str, Any]:
    return {
        "markets": [
            {
                "value": market.value,
                "name": market.name.lower(),
                "currency": market.currency,
                "default_amount": market.default_amount,
            }
            for market in Market
        ],
        "investment_styles": [{"value": style.value, "name": style.name.lower()} for style in InvestmentStyle],
        "dividend_frequencies": [{"value": item.value, "name": item.name.lower()} for item in ALL_DIVIDEND_FREQUENCIES],
        "number_of_etfs": {"min": MIN_ETFS, "max": MAX_ETFS, "default": 4},
    }


def register_portfolio_tools(mcp: FastMCP, services: ToolServices) -> None:
    @mcp.tool(description="Generate a dividend ETF portfolio from investment preferences using the hosted model.")
    def generate_etf_portfolio(
        investment_amount: float | None = None,
        market: str = Market.DOMESTIC.value,
        investment_style: str = InvestmentStyle.BALANCED.value,
        number_of_etfs: int = 4,
        dividend_frequencies: list[str] | None = None,
    ) -> str:
        try:
            options = PortfolioOptions.from_arguments(
                investment_amount=investment_amount,
                market=market,
                investment_style=investment_style,
                number_of_etfs=number_of_etfs,
                dividend_frequencies=dividend_frequencies,
            )
        except ValueError as error:
            return to_json(error_payload("INVALID_OPTIONS", str(error)))
        return to_json(services.portfolio.generate(options))

    @mcp.tool(description="Validate a raw model JSON payload and normalize its allocations to 100%.")
    def normalize_portfolio_response(
        raw_text: str,
        investment_amount: float | None = None,
        market: str = Market.DOMESTIC.value,
    ) -> str:
        options = None
        if investment_amount is not None:
            try:
                options = PortfolioOptions.from_arguments(investment_amount=investment_amount, market=market)
            except ValueError as error:
                return to_json(error_payload("INVALID_OPTIONS", str(error)))
        return to_json(services.portfolio.process_response(raw_text, options))

    @mcp.tool(description="Discard the current portfolio snapshot.")
    def reset_portfolio() -> str:
        services.portfolio.reset()
        return to_json(success_payload({"message": "Portfolio reset."}))

    @mcp.tool(description="List accepted markets, investment styles, dividend frequencies and ETF count bounds.")
    def portfolio_options_reference() -> str:
        return to_json(success_payload(options_reference()))
