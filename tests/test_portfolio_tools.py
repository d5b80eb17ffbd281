import asyncio
import json
from types import SimpleNamespace

from mcp.server.fastmcp import FastMCP

from etf_portfolio_server.portfolio.models import Market
from etf_portfolio_server.tools.portfolio_tools import options_reference, register_portfolio_tools


class _MockPortfolioService:
    def __init__(self) -> None:
        self.generated = []
        self.processed = []
        self.reset_calls = 0

    def generate(self, options):
        self.generated.append(options)
        return {"ok": True, "options": options.to_dict()}

    def process_response(self, raw_text: str, options=None):
        self.processed.append((raw_text, options))
        return {"ok": True, "raw_text": raw_text}

    def reset(self) -> None:
        self.reset_calls += 1


def _call(mcp: FastMCP, name: str, arguments: dict) -> dict:
    result = asyncio.run(mcp.call_tool(name, arguments))
    content = result[0] if isinstance(result, tuple) else result
    return json.loads(content[0].text)


def _server() -> tuple[FastMCP, _MockPortfolioService]:
    mcp = FastMCP(name="test-portfolio-tools")
    service = _MockPortfolioService()
    register_portfolio_tools(mcp, SimpleNamespace(portfolio=service))
    return mcp, service


def test_register_portfolio_tools() -> None:
    mcp, _ = _server()
    names = {tool.name for tool in asyncio.run(mcp.list_tools())}
    assert names == {
        "generate_etf_portfolio",
        "normalize_portfolio_response",
        "reset_portfolio",
        "portfolio_options_reference",
    }


def test_generate_tool_builds_options() -> None:
    mcp, service = _server()
    payload = _call(
        mcp,
        "generate_etf_portfolio",
        {"investment_amount": 15000, "market": "foreign", "number_of_etfs": 3, "dividend_frequencies": ["monthly"]},
    )
    assert payload["ok"] is True
    options = service.generated[0]
    assert options.market is Market.FOREIGN
    assert options.number_of_etfs == 3
    assert payload["options"]["dividend_frequencies"] == ["월배당"]


def test_generate_tool_rejects_invalid_options() -> None:
    mcp, service = _server()
    payload = _call(mcp, "generate_etf_portfolio", {"investment_amount": 1000, "number_of_etfs": 12})
    assert payload["ok"] is False
    assert payload["error"]["code"] == "INVALID_OPTIONS"
    assert service.generated == []


def test_normalize_tool_passes_options_only_with_amount() -> None:
    mcp, service = _server()
    _call(mcp, "normalize_portfolio_response", {"raw_text": "[]"})
    _call(mcp, "normalize_portfolio_response", {"raw_text": "[]", "investment_amount": 1000, "market": "미국"})
    assert service.processed[0] == ("[]", None)
    assert service.processed[1][1].market is Market.FOREIGN


def test_reset_tool() -> None:
    mcp, service = _server()
    payload = _call(mcp, "reset_portfolio", {})
    assert payload["ok"] is True
    assert service.reset_calls == 1


def test_options_reference_lists_enumerations() -> None:
    reference = options_reference()
    assert [item["name"] for item in reference["dividend_frequencies"]] == [
        "monthly",
        "quarterly",
        "semi_annual",
        "annual",
        "irregular",
    ]
    assert reference["number_of_etfs"] == {"min": 2, "max": 8, "default": 4}
    assert {item["currency"] for item in reference["markets"]} == {"KRW", "USD"}
