"""Portfolio generation prompt and response schema."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from mcp.server.fastmcp import FastMCP

from etf_portfolio_server.lib.formatters import format_investment_amount
from etf_portfolio_server.portfolio.models import (
    ALL_DIVIDEND_FREQUENCIES,
    InvestmentStyle,
    Market,
    PortfolioOptions,
)
from etf_portfolio_server.portfolio.validation import REQUIRED_FIELDS


@dataclass(frozen=True)
class MarketDetails:
    name: str
    ticker_example: str
    instruction: str


STYLE_DESCRIPTIONS = {
    InvestmentStyle.STABLE: (
        "Focus on well-established companies with consistent dividends and potential for "
        "moderate capital appreciation. Lower risk."
    ),
    InvestmentStyle.HIGH_DIVIDEND: (
        "Prioritize ETFs with the highest possible dividend yields, even if it means higher "
        "volatility. Higher risk."
    ),
    InvestmentStyle.BALANCED: "A mix of stable growth and high-yield ETFs for a balanced risk-reward profile.",
}

PORTFOLIO_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "etfName": {"type": "STRING", "description": "The full name of the dividend ETF."},
            "tickerSymbol": {"type": "STRING", "description": "The stock market ticker symbol for the ETF."},
            "allocationPercentage": {
                "type": "NUMBER",
                "description": "The percentage of the total portfolio allocated to this ETF (e.g., 25.5).",
            },
            "reasoning": {
                "type": "STRING",
                "description": "A brief explanation in Korean for selecting this ETF based on the user's investment style.",
            },
            "expectedDividendYield": {
                "type": "NUMBER",
                "description": "The estimated annual dividend yield as a percentage (e.g., 4.5).",
            },
            "dividendFrequency": {
                "type": "STRING",
                "description": 'The dividend payment frequency in Korean (e.g., "월배당", "분기배당", "연배당").',
            },
        },
        "required": list(REQUIRED_FIELDS),
    },
}


def market_details(market: Market, number_of_etfs: int) -> MarketDetails:
    if market is Market.FOREIGN:
        return MarketDetails(
            name="US",
            ticker_example="a stock market ticker symbol like 'VOO' or 'SCHD'",
            instruction=(
                f"Select {number_of_etfs} real, publicly-traded dividend-focused ETFs listed on US stock "
                "exchanges (e.g., NYSE, NASDAQ)."
            ),
        )
    if market is Market.COMBINED:
        return MarketDetails(
            name="South Korean and US",
            ticker_example=(
                "the correct format for its respective market (e.g., a 6-digit code for KRX, "
                "a symbol like 'VOO' for US)"
            ),
            instruction=(
                f"Select {number_of_etfs} real, publicly-traded dividend-focused ETFs from a mix of the "
                "South Korean stock exchange (KRX) and US stock exchanges (e.g., NYSE, NASDAQ). "
                "The final portfolio should ideally contain ETFs from BOTH markets."
            ),
        )
    return MarketDetails(
        name="South Korean",
        ticker_example="a 6-digit stock market ticker symbol",
        instruction=(
            f"Select {number_of_etfs} real, publicly-traded dividend-focused ETFs listed on the "
            "South Korean stock exchange (KRX)."
        ),
    )


def build_generation_prompt(options: PortfolioOptions) -> str:
    details = market_details(options.market, options.number_of_etfs)
    frequencies = ", ".join(item.value for item in options.sorted_frequencies())
    allowed = ", ".join(f'"{item.value}"' for item in ALL_DIVIDEND_FREQUENCIES)
    lines = [
        "You are a financial advisor. Your task is to create a dividend stock ETF portfolio for a user "
        "based on their preferences.",
        "",
        "User Preferences:",
        f"- Target Market: {details.name} stock market(s)",
        f"- Total Investment Amount: {format_investment_amount(options.investment_amount, options.market)}",
        f"- Investment Style: {options.investment_style.value} ({STYLE_DESCRIPTIONS[options.investment_style]})",
        f"- Number of ETFs: {options.number_of_etfs}",
        f"- Preferred Dividend Frequencies: {frequencies or 'Any'}",
        "",
        "Instructions:",
        f"1. {details.instruction}",
        "2. The selection must align with the user's chosen investment style.",
        "3. Allocate the total investment amount across the selected ETFs. "
        "The sum of all allocation percentages MUST be exactly 100.",
        "4. Provide a brief, clear reasoning in Korean for each ETF selection.",
        "5. Provide an estimated annual dividend yield for each ETF.",
        f"6. For the ticker symbol, provide {details.ticker_example}.",
    ]
    if frequencies:
        lines.append(
            f"7. IMPORTANT: The selected ETFs MUST have a dividend frequency that is one of the following: {frequencies}."
        )
    lines.extend(
        [
            "8. Provide the dividend payment frequency for each ETF in Korean. "
            f"Use one of the following values: {allowed}.",
            "",
            "Return ONLY a JSON array that matches the provided schema. Do not include any other text, "
            "explanations, or markdown formatting outside of the JSON array.",
        ]
    )
    return "\n".join(lines)


def register_portfolio_prompts(mcp: FastMCP) -> None:
    @mcp.prompt(
        name="dividend_etf_portfolio",
        title="Dividend ETF Portfolio Prompt",
        description="Render the model prompt used to generate a dividend ETF portfolio.",
    )
    def dividend_etf_portfolio(
        investment_amount: str,
        market: str = Market.DOMESTIC.value,
        investment_style: str = InvestmentStyle.BALANCED.value,
        number_of_etfs: str = "4",
        dividend_frequencies: str = "",
    ) -> str:
        options = PortfolioOptions.from_arguments(
            investment_amount=investment_amount,
            market=market,
            investment_style=investment_style,
            number_of_etfs=number_of_etfs,
            dividend_frequencies=dividend_frequencies,
        )
        return build_generation_prompt(options)
