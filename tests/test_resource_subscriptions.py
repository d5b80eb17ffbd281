import asyncio
import json

from mcp.server.fastmcp import FastMCP

from etf_portfolio_server.portfolio.models import Market, PortfolioOptions
from etf_portfolio_server.portfolio.portfolio_service import CURRENT_PORTFOLIO_URI, PortfolioService
from etf_portfolio_server.protocol.subscriptions import ResourceSubscriptions

PAYLOAD = json.dumps(
    [
        {
            "etfName": "Vanguard High Dividend Yield ETF",
            "tickerSymbol": "VYM",
            "allocationPercentage": 60,
            "reasoning": "고배당 분산",
            "expectedDividendYield": 2.9,
            "dividendFrequency": "분기배당",
        },
        {
            "etfName": "Global X SuperDividend ETF",
            "tickerSymbol": "SDIV",
            "allocationPercentage": 40,
            "reasoning": "월배당",
            "expectedDividendYield": 9.8,
            "dividendFrequency": "월배당",
        },
    ],
    ensure_ascii=False,
)


class _FakeSession:
    def __init__(self) -> None:
        self.updated_uris: list[str] = []

    async def send_resource_updated(self, uri: str) -> None:
        self.updated_uris.append(uri)


class _FakeClient:
    def generate_content(self, prompt: str, response_schema: dict | None = None) -> str:
        return PAYLOAD


def test_capabilities_advertise_resource_subscriptions() -> None:
    mcp = FastMCP(name="test-subscribe-capability")
    ResourceSubscriptions(mcp)

    options = mcp._mcp_server.create_initialization_options()
    assert options.capabilities.resources is not None
    assert options.capabilities.resources.subscribe is True


def test_resource_updated_notification_to_subscribers() -> None:
    mcp = FastMCP(name="test-resource-updated")
    subscriptions = ResourceSubscriptions(mcp)
    session = _FakeSession()
    subscriptions._subscribers[CURRENT_PORTFOLIO_URI].add(session)  # intentional white-box setup

    asyncio.run(subscriptions.notify_resource_updated(CURRENT_PORTFOLIO_URI))
    asyncio.run(subscriptions.notify_resource_updated("portfolio://other"))
    assert session.updated_uris == [CURRENT_PORTFOLIO_URI]


def test_sync_notification_outside_event_loop_is_a_no_op() -> None:
    subscriptions = ResourceSubscriptions(FastMCP(name="test-no-loop"))
    session = _FakeSession()
    subscriptions._subscribers[CURRENT_PORTFOLIO_URI].add(session)

    subscriptions.notify_resource_updated_sync(CURRENT_PORTFOLIO_URI)
    assert session.updated_uris == []


def test_generated_portfolio_notifies_subscribed_sessions() -> None:
    subscriptions = ResourceSubscriptions(FastMCP(name="test-generate-notify"))
    session = _FakeSession()
    subscriptions._subscribers[CURRENT_PORTFOLIO_URI].add(session)
    service = PortfolioService(_FakeClient(), resource_updated_callback=subscriptions.notify_resource_updated_sync)
    options = PortfolioOptions(investment_amount=10_000, number_of_etfs=2, market=Market.FOREIGN)

    async def _generate() -> dict:
        payload = service.generate(options)
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        return payload

    payload = asyncio.run(_generate())
    assert payload["ok"] is True
    assert session.updated_uris == [CURRENT_PORTFOLIO_URI]
