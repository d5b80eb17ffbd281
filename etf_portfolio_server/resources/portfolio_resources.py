"""Portfolio resource definitions."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP

from etf_portfolio_server.portfolio.portfolio_service import CURRENT_PORTFOLIO_URI

if TYPE_CHECKING:
    from etf_portfolio_server.tools.registry import ToolServices


def register_portfolio_resources(mcp: FastMCP, services: "ToolServices") -> None:
    @mcp.resource(
        CURRENT_PORTFOLIO_URI,
        name="current-portfolio",
        title="Current Portfolio",
        description="Latest successfully generated dividend ETF portfolio with its allocation breakdown.",
        mime_type="application/json",
    )
    def current_portfolio_resource() -> str:
        snapshot = services.portfolio.get_current_snapshot()
        if not snapshot:
            raise ValueError("Portfolio resource not found. Generate a portfolio first.")
        return json.dumps(snapshot, ensure_ascii=False)
