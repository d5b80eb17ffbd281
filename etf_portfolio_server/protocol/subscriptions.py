"""Resource subscription tracking and update notifications."""

from __future__ import annotations

import asyncio
from collections import defaultdict
from threading import Lock
from types import MethodType
from typing import Any

import mcp.types as mcp_types
from mcp.server.fastmcp import FastMCP
from mcp.server.lowlevel.server import NotificationOptions, request_ctx


class ResourceSubscriptions:
    """Tracks which sessions watch a resource URI and tells them when it changes."""

    def __init__(self, mcp: FastMCP) -> None:
        self.mcp = mcp
        self._subscribers: dict[str, set[Any]] = defaultdict(set)
        self._subscribers_lock = Lock()
        self._advertise_subscribe_capability()
        self._register_subscribe_handlers()

    def _advertise_subscribe_capability(self) -> None:
        server = self.mcp._mcp_server
        original_create = server.create_initialization_options

        def patched_create_initialization_options(server_self, notification_options=None, experimental_capabilities=None):
            options = original_create(
                notification_options or NotificationOptions(resources_changed=True),
                experimental_capabilities or {},
            )
            options.capabilities.resources = mcp_types.ResourcesCapability(subscribe=True, listChanged=True)
            return options

        server.create_initialization_options = MethodType(patched_create_initialization_options, server)

    def _register_subscribe_handlers(self) -> None:
        server = self.mcp._mcp_server

        @server.subscribe_resource()
        async def subscribe_resource(uri) -> None:
            context = request_ctx.get(None)
            if context is None:
                return
            with self._subscribers_lock:
                self._subscribers[str(uri)].add(context.session)

        @server.unsubscribe_resource()
        async def unsubscribe_resource(uri) -> None:
            uri_str = str(uri)
            context = request_ctx.get(None)
            if context is None:
                return
            with self._subscribers_lock:
                sessions = self._subscribers.get(uri_str)
                if not sessions:
                    return
                sessions.discard(context.session)
                if not sessions:
                    self._subscribers.pop(uri_str, None)

    async def notify_resource_updated(self, uri: str) -> None:
        with self._subscribers_lock:
            sessions = list(self._subscribers.get(uri, set()))
        for session in sessions:
            await session.send_resource_updated(uri)

    def notify_resource_updated_sync(self, uri: str) -> None:
        """Schedule a notification on the running loop; a no-op outside one."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        loop.create_task(self.notify_resource_updated(uri))
