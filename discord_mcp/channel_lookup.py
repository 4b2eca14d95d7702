"""Resolve user-supplied channel and server identifiers.

Identifiers are either snowflake IDs (all digits) or names. An ID is tried
first; when Discord does not know it, or it points at something other than a
text channel, the identifier is matched as a name instead. Name matching is
case-insensitive and ignores a leading ``#`` on channel names.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel

from discord_mcp.discord_client import (
    UNKNOWN_CHANNEL,
    UNKNOWN_GUILD,
    DiscordApiError,
    DiscordClient,
)
from discord_mcp.models import Channel, Guild


class ChannelLookupError(Exception):
    """No unique channel or server matches the identifier."""


class ResolvedChannel(BaseModel):
    channel: Channel
    guild: Guild

    @property
    def label(self) -> str:
        return f"#{self.channel.name}"


async def _text_channels(client: DiscordClient, guild: Guild) -> List[Channel]:
    return [c for c in await client.get_guild_channels(guild.id) if c.is_text]


async def find_channel(
    client: DiscordClient, identifier: str, guild: Optional[Guild] = None
) -> ResolvedChannel:
    if identifier.isdigit():
        try:
            channel = await client.get_channel(identifier)
        except DiscordApiError as e:
            if e.code != UNKNOWN_CHANNEL:
                raise
        else:
            if channel.is_text:
                if guild is not None and channel.guild_id != guild.id:
                    raise ChannelLookupError(
                        f"Channel {identifier} does not belong to the specified server"
                    )
                owner = guild or await client.get_guild(channel.guild_id)
                return ResolvedChannel(channel=channel, guild=owner)

    search_name = identifier[1:] if identifier.startswith("#") else identifier
    search_name = search_name.lower()

    guilds = [guild] if guild is not None else await client.list_guilds()
    matches: List[Tuple[Channel, Guild]] = []
    available: List[Channel] = []
    for candidate in guilds:
        channels = await _text_channels(client, candidate)
        available.extend(channels)
        matches.extend(
            (c, candidate) for c in channels if (c.name or "").lower() == search_name
        )

    if not matches:
        if guild is not None:
            names = ", ".join(f"#{c.name}" for c in available)
            raise ChannelLookupError(
                f"Channel '{identifier}' not found in server '{guild.name}'. "
                f"Available channels: {names}"
            )
        raise ChannelLookupError(
            f"Channel '{identifier}' not found. "
            "Use channel ID or exact channel name (with or without #)"
        )

    if len(matches) > 1:
        listing = ", ".join(f"#{c.name} ({g.name}, ID: {c.id})" for c, g in matches)
        raise ChannelLookupError(
            f"Multiple channels named '{identifier}' found: {listing}. "
            "Please specify server ID or use channel ID."
        )

    channel, owner = matches[0]
    return ResolvedChannel(channel=channel, guild=owner)


async def find_guild(client: DiscordClient, identifier: str) -> Guild:
    if identifier.isdigit():
        try:
            return await client.get_guild(identifier)
        except DiscordApiError as e:
            if e.code != UNKNOWN_GUILD:
                raise

    search_name = identifier.lower()
    guilds = await client.list_guilds()
    matches = [g for g in guilds if g.name.lower() == search_name]

    if not matches:
        names = ", ".join(g.name for g in guilds)
        raise ChannelLookupError(
            f"Server '{identifier}' not found. Available servers: {names}"
        )
    if len(matches) > 1:
        listing = ", ".join(f"{g.name} (ID: {g.id})" for g in matches)
        raise ChannelLookupError(
            f"Multiple servers named '{identifier}' found: {listing}. Please use server ID."
        )
    return matches[0]
