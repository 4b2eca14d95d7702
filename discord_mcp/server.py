"""
Discord MCP Server.

Exposes a Discord bot account as MCP tools over stdio, using the Discord
REST API directly. Each tool call opens its own HTTP session; there is no
gateway connection and no state between calls.

RUN:
    DISCORD_TOKEN=... discord-mcp
"""

import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from loguru import logger
from mcp.server.fastmcp import FastMCP

from discord_mcp.config import (
    ConfigurationError,
    DiscordSettings,
    configure_logging,
    load_settings,
)
from discord_mcp.descriptions import (
    LIST_CHANNELS_DESCRIPTION,
    LIST_SERVERS_DESCRIPTION,
    READ_MESSAGES_DESCRIPTION,
    SEARCH_MESSAGES_DESCRIPTION,
    SEND_MESSAGE_DESCRIPTION,
)
from discord_mcp.discord_client import DiscordClient
from discord_mcp.tools import DiscordTools


def create_server(settings: DiscordSettings) -> FastMCP:
    mcp = FastMCP("Discord Tools")

    @asynccontextmanager
    async def open_tools() -> AsyncIterator[DiscordTools]:
        async with DiscordClient(settings) as client:
            yield DiscordTools(client)

    @mcp.tool(description=SEND_MESSAGE_DESCRIPTION)
    async def discord_send_message(
        channel: str, message: str, server: Optional[str] = None
    ) -> str:
        async with open_tools() as tools:
            return await tools.send_message(channel, message, server)

    @mcp.tool(description=READ_MESSAGES_DESCRIPTION)
    async def discord_read_messages(
        channel: str, limit: int = 50, server: Optional[str] = None
    ) -> str:
        async with open_tools() as tools:
            return await tools.read_messages(channel, limit, server)

    @mcp.tool(description=SEARCH_MESSAGES_DESCRIPTION)
    async def discord_search_messages(
        channel: str, query: str, limit: int = 50, server: Optional[str] = None
    ) -> str:
        async with open_tools() as tools:
            return await tools.search_messages(channel, query, limit, server)

    @mcp.tool(description=LIST_CHANNELS_DESCRIPTION)
    async def discord_list_channels(server: Optional[str] = None) -> str:
        async with open_tools() as tools:
            return await tools.list_channels(server)

    @mcp.tool(description=LIST_SERVERS_DESCRIPTION)
    async def discord_list_servers() -> str:
        async with open_tools() as tools:
            return await tools.list_servers()

    return mcp


def main() -> None:
    try:
        settings = load_settings()
    except ConfigurationError as e:
        configure_logging()
        logger.critical(f"{e}")
        sys.exit(1)

    configure_logging(settings.log_level)
    logger.info("Starting Discord MCP server on stdio (connects on demand)")
    create_server(settings).run()


if __name__ == "__main__":
    main()
