"""Domain tool registry entrypoint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from mcp.server.fastmcp import FastMCP

from etf_portfolio_server.config.settings import Settings
from etf_portfolio_server.portfolio.portfolio_service import PortfolioService
from etf_portfolio_server.providers.gemini_client import GeminiClient
from etf_portfolio_server.runtime.monitoring import ServerMetrics
from etf_portfolio_server.tools.portfolio_tools import register_portfolio_tools


@dataclass
class ToolServices:
    portfolio: PortfolioService


def build_gemini_client(settings: Settings) -> GeminiClient | None:
    if not settings.gemini_api_key:
        return None
    return GeminiClient(
        settings.gemini_api_key,
        model=settings.gemini_model,
        temperature=settings.gemini_temperature,
        timeout_seconds=settings.request_timeout_seconds,
        max_retries=settings.request_max_retries,
    )


def build_tool_services(
    settings: Settings,
    metrics: ServerMetrics | None = None,
    resource_updated_callback: Callable[[str], None] | None = None,
) -> ToolServices:
    return ToolServices(
        portfolio=PortfolioService(
            build_gemini_client(settings),
            metrics=metrics,
            resource_updated_callback=resource_updated_callback,
        )
    )


def register_all_tools(mcp: FastMCP, services: ToolServices) -> None:
    register_portfolio_tools(mcp, services)
