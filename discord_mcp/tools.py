from typing import Optional

from loguru import logger
from pydantic import ValidationError

from discord_mcp import formatting
from discord_mcp.channel_lookup import (
    ChannelLookupError,
    ResolvedChannel,
    find_channel,
    find_guild,
)
from discord_mcp.discord_client import DiscordApiError, DiscordClient
from discord_mcp.models import (
    ListChannelsParams,
    ReadMessagesParams,
    SearchMessagesParams,
    SendMessageParams,
)

# Anything a tool can fail with short of a programming error
TOOL_ERRORS = (DiscordApiError, ChannelLookupError, ValidationError)


class DiscordTools:
    """The Discord tool operations over one client session.

    Every method returns text: JSON for listings, a status line otherwise.
    """

    def __init__(self, client: DiscordClient):
        self.client = client
        self.logger = logger

    async def _resolve(self, channel: str, server: Optional[str]) -> ResolvedChannel:
        guild = await find_guild(self.client, server) if server else None
        return await find_channel(self.client, channel, guild)

    async def send_message(
        self, channel: str, message: str, server: Optional[str] = None
    ) -> str:
        try:
            params = SendMessageParams(channel=channel, message=message, server=server)
            where = await self._resolve(params.channel, params.server)
            sent = await self.client.send_message(where.channel.id, params.message)
        except TOOL_ERRORS as e:
            self.logger.error(f"Error in discord_send_message: {e}")
            return formatting.format_error(e)

        return formatting.format_success(
            f"Message sent to {where.label} in {where.guild.name}\nMessage ID: {sent.id}"
        )

    async def read_messages(
        self, channel: str, limit: int = 50, server: Optional[str] = None
    ) -> str:
        try:
            params = ReadMessagesParams(channel=channel, limit=limit, server=server)
            where = await self._resolve(params.channel, params.server)
            messages = await self.client.get_messages(where.channel.id, params.limit)
        except TOOL_ERRORS as e:
            self.logger.error(f"Error in discord_read_messages: {e}")
            return formatting.format_error(e)

        # Discord returns newest first
        return formatting.format_messages(reversed(messages), where)

    async def search_messages(
        self,
        channel: str,
        query: str,
        limit: int = 50,
        server: Optional[str] = None,
    ) -> str:
        try:
            params = SearchMessagesParams(
                channel=channel, query=query, limit=limit, server=server
            )
            where = await self._resolve(params.channel, params.server)
            messages = await self.client.get_messages(where.channel.id, params.limit)
        except TOOL_ERRORS as e:
            self.logger.error(f"Error in discord_search_messages: {e}")
            return formatting.format_error(e)

        needle = params.query.lower()
        hits = [m for m in reversed(messages) if needle in m.content.lower()]
        if not hits:
            return formatting.format_info(
                f'No messages found containing "{params.query}" in {where.label}'
            )
        return formatting.format_messages(hits, where)

    async def list_channels(self, server: Optional[str] = None) -> str:
        try:
            params = ListChannelsParams(server=server)
            if params.server:
                guilds = [await find_guild(self.client, params.server)]
            else:
                guilds = await self.client.list_guilds()

            listing = []
            for guild in guilds:
                channels = [
                    {"name": c.name, "id": c.id}
                    for c in await self.client.get_guild_channels(guild.id)
                    if c.is_text
                ]
                if channels or params.server:
                    listing.append(
                        {"server": guild.name, "serverId": guild.id, "channels": channels}
                    )
        except TOOL_ERRORS as e:
            self.logger.error(f"Error in discord_list_channels: {e}")
            return formatting.format_error(e)

        return formatting.to_json(listing)

    async def list_servers(self) -> str:
        try:
            servers = []
            for partial in await self.client.list_guilds():
                guild = await self.client.get_guild(partial.id)
                channels = await self.client.get_guild_channels(guild.id)
                servers.append(
                    {
                        "name": guild.name,
                        "id": guild.id,
                        "memberCount": guild.approximate_member_count,
                        "channelCount": len(channels),
                        "owner": guild.owner_id,
                    }
                )
        except TOOL_ERRORS as e:
            self.logger.error(f"Error in discord_list_servers: {e}")
            return formatting.format_error(e)

        return formatting.to_json(servers)
