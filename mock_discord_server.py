from typing import Dict, List, Optional

from aiohttp import web
from loguru import logger

API_PREFIX = "/api/v10"

ALICE = {"id": "700", "username": "alice", "discriminator": "0"}
BOB = {"id": "701", "username": "bob", "discriminator": "1234"}


class DiscordMockServer:
    """In-process stand-in for the Discord REST API.

    Seeded with three servers: "Alpha Studio" and "Beta Lab" both have a
    #general text channel, and "Empty Place" has only a voice channel.
    Messages are stored oldest first and served newest first, as Discord does.
    """

    def __init__(self, token: str = "test-token"):
        self.token = token
        self.guilds: Dict[str, dict] = {
            "111": {"id": "111", "name": "Alpha Studio", "owner_id": "900", "members": 12},
            "222": {"id": "222", "name": "Beta Lab", "owner_id": "901", "members": 5},
            "333": {"id": "333", "name": "Empty Place", "owner_id": "902", "members": 1},
        }
        self.channels: Dict[str, dict] = {}
        for channel in (
            {"id": "1001", "type": 0, "name": "general", "guild_id": "111"},
            {"id": "1002", "type": 0, "name": "music", "guild_id": "111"},
            {"id": "1003", "type": 2, "name": "lounge", "guild_id": "111"},
            {"id": "2001", "type": 0, "name": "general", "guild_id": "222"},
            {"id": "2002", "type": 0, "name": "releases", "guild_id": "222"},
            {"id": "3001", "type": 2, "name": "hangout", "guild_id": "333"},
        ):
            self.channels[channel["id"]] = channel
        self.messages: Dict[str, List[dict]] = {
            "1002": [
                self._message("5001", "1002", ALICE, "New track is up"),
                self._message("5002", "1002", BOB, "Loving the synth on this one"),
                self._message("5003", "1002", ALICE, "Thanks! More SYNTH coming soon"),
            ]
        }
        self.next_message_id = 6000
        self.runner: Optional[web.AppRunner] = None

        self.app = web.Application()
        routes = [
            web.get(f"{API_PREFIX}/users/@me/guilds", self.handle_list_guilds),
            web.get(f"{API_PREFIX}/guilds/{{guild_id}}", self.handle_get_guild),
            web.get(f"{API_PREFIX}/guilds/{{guild_id}}/channels", self.handle_guild_channels),
            web.get(f"{API_PREFIX}/channels/{{channel_id}}", self.handle_get_channel),
            web.get(f"{API_PREFIX}/channels/{{channel_id}}/messages", self.handle_get_messages),
            web.post(f"{API_PREFIX}/channels/{{channel_id}}/messages", self.handle_send_message),
        ]
        self.app.add_routes(routes)
        self.logger = logger

    @staticmethod
    def _message(message_id: str, channel_id: str, author: dict, content: str) -> dict:
        return {
            "id": message_id,
            "channel_id": channel_id,
            "author": author,
            "content": content,
            "timestamp": f"2024-05-01T12:00:{int(message_id) % 60:02d}.000000+00:00",
        }

    @staticmethod
    def _error(status: int, message: str, code: int = 0) -> web.Response:
        return web.json_response({"message": message, "code": code}, status=status)

    def _authorized(self, request: web.Request) -> bool:
        return request.headers.get("Authorization") == f"Bot {self.token}"

    async def handle_list_guilds(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return self._error(401, "401: Unauthorized")
        return web.json_response(
            [{"id": g["id"], "name": g["name"]} for g in self.guilds.values()]
        )

    async def handle_get_guild(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return self._error(401, "401: Unauthorized")
        guild = self.guilds.get(request.match_info["guild_id"])
        if guild is None:
            return self._error(404, "Unknown Guild", 10004)
        body = {"id": guild["id"], "name": guild["name"], "owner_id": guild["owner_id"]}
        if request.query.get("with_counts") == "true":
            body["approximate_member_count"] = guild["members"]
        return web.json_response(body)

    async def handle_guild_channels(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return self._error(401, "401: Unauthorized")
        guild_id = request.match_info["guild_id"]
        if guild_id not in self.guilds:
            return self._error(404, "Unknown Guild", 10004)
        return web.json_response(
            [c for c in self.channels.values() if c["guild_id"] == guild_id]
        )

    async def handle_get_channel(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return self._error(401, "401: Unauthorized")
        channel = self.channels.get(request.match_info["channel_id"])
        if channel is None:
            return self._error(404, "Unknown Channel", 10003)
        return web.json_response(channel)

    async def handle_get_messages(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return self._error(401, "401: Unauthorized")
        channel_id = request.match_info["channel_id"]
        if channel_id not in self.channels:
            return self._error(404, "Unknown Channel", 10003)
        limit = int(request.query.get("limit", "50"))
        history = self.messages.get(channel_id, [])
        return web.json_response(list(reversed(history))[:limit])

    async def handle_send_message(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return self._error(401, "401: Unauthorized")
        channel_id = request.match_info["channel_id"]
        if channel_id not in self.channels:
            return self._error(404, "Unknown Channel", 10003)

        body = await request.json()
        self.next_message_id += 1
        bot = {"id": "800", "username": "music-bot", "discriminator": "0"}
        message = self._message(str(self.next_message_id), channel_id, bot, body["content"])
        self.messages.setdefault(channel_id, []).append(message)
        self.logger.info(f"Stored message {message['id']} in channel {channel_id}")
        return web.json_response(message)

    async def start(self, port: int = 8080):
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        site = web.TCPSite(self.runner, "localhost", port)
        await site.start()
        self.logger.info(f"Mock Discord server started on port {port}")
        return site

    async def stop(self) -> None:
        if self.runner is not None:
            await self.runner.cleanup()
            self.runner = None
