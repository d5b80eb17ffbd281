"""Application entrypoint for the dividend ETF portfolio MCP server."""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import asdict

from mcp.server.fastmcp import FastMCP
from starlette.responses import JSONResponse, Response

from etf_portfolio_server.config.settings import get_settings
from etf_portfolio_server.prompts.portfolio_prompts import register_portfolio_prompts
from etf_portfolio_server.protocol.subscriptions import ResourceSubscriptions
from etf_portfolio_server.resources.portfolio_resources import register_portfolio_resources
from etf_portfolio_server.runtime.monitoring import ServerMetrics, configure_logging
from etf_portfolio_server.tools.registry import build_tool_services, register_all_tools

LOGGER = logging.getLogger(__name__)


def resolve_transport_mode(configured_mode: str) -> str:
    if os.getenv("RENDER") and configured_mode == "stdio":
        return "http"
    if configured_mode in {"stdio", "http"}:
        return configured_mode
    if os.getenv("RENDER") or os.getenv("PORT"):
        return "http"
    return "stdio"


def resolve_http_transport(configured_transport: str) -> str:
    if configured_transport in {"sse", "streamable"}:
        return configured_transport
    return "sse"


async def run() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    server_metrics = ServerMetrics()
    mcp = FastMCP(
        name=settings.app_name,
        host=settings.host,
        port=settings.port,
        streamable_http_path=settings.mcp_path,
    )
    subscriptions = ResourceSubscriptions(mcp)
    services = build_tool_services(
        settings,
        metrics=server_metrics,
        resource_updated_callback=subscriptions.notify_resource_updated_sync,
    )
    register_all_tools(mcp, services)
    register_portfolio_prompts(mcp)
    register_portfolio_resources(mcp, services)
    resolved_mode = resolve_transport_mode(settings.transport_mode)
    resolved_http_transport = resolve_http_transport(settings.http_transport)

    @mcp.custom_route(settings.health_path, methods=["GET"])
    async def health_check(_: object) -> Response:
        return JSONResponse(
            {
                "status": "ok",
                "service": settings.app_name,
                "version": settings.app_version,
                "mode": resolved_mode,
                "model": settings.gemini_model,
                "model_configured": services.portfolio.client is not None,
                "generation_in_progress": services.portfolio.busy,
                "metrics": asdict(server_metrics.snapshot()),
            }
        )

    if services.portfolio.client is None:
        LOGGER.warning("No model API key configured. Set GEMINI_API_KEY to enable portfolio generation.")
    if resolved_mode == "stdio":
        await mcp.run_stdio_async()
    elif resolved_http_transport == "streamable":
        await mcp.run_streamable_http_async()
    else:
        await mcp.run_sse_async()


def main() -> None:
    asyncio.run(run())


if __name__ == "__main__":
    main()
