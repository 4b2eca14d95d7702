import asyncio
from typing import Any, List, Optional

import aiohttp
from loguru import logger

from discord_mcp.config import USER_AGENT, DiscordSettings
from discord_mcp.models import Channel, Guild, Message

UNKNOWN_CHANNEL = 10003
UNKNOWN_GUILD = 10004


class DiscordApiError(Exception):
    """A failed Discord REST call.

    ``status`` is the HTTP status (None for transport failures) and
    ``code`` the Discord JSON error code, when the body carried one.
    """

    def __init__(
        self, message: str, status: Optional[int] = None, code: Optional[int] = None
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code


class DiscordClient:
    """Bot-authenticated access to the handful of REST routes the tools need."""

    def __init__(
        self,
        settings: DiscordSettings,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.base_url = settings.base_url.rstrip("/")
        self.settings = settings
        self.logger = logger
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "DiscordClient":
        if self._session is None:
            self._session = aiohttp.ClientSession(
                headers={
                    "Authorization": f"Bot {self.settings.token.get_secret_value()}",
                    "User-Agent": USER_AGENT,
                },
                timeout=aiohttp.ClientTimeout(total=self.settings.request_timeout),
            )
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError("DiscordClient must be used as an async context manager")
        return self._session

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"

        try:
            async with self.session.request(
                method, url, json=json, params=params
            ) as response:
                try:
                    body = await response.json(content_type=None)
                except ValueError:
                    body = None
                if response.status >= 400:
                    message, code = response.reason or "HTTP error", None
                    if isinstance(body, dict):
                        message = body.get("message") or message
                        code = body.get("code")
                    raise DiscordApiError(message, status=response.status, code=code)
                return body
        except DiscordApiError as e:
            self.logger.error(f"Discord API error {e.status}/{e.code} at {path}: {e}")
            raise
        except aiohttp.ClientError as e:
            self.logger.error(f"HTTP error at {path}: {e}")
            raise DiscordApiError(str(e) or type(e).__name__) from e
        except asyncio.TimeoutError as e:
            self.logger.error(f"Request to {path} timed out")
            raise DiscordApiError(
                f"Request timed out after {self.settings.request_timeout}s"
            ) from e

    async def list_guilds(self) -> List[Guild]:
        data = await self._request("GET", "/users/@me/guilds")
        return [Guild.model_validate(g) for g in data or []]

    async def get_guild(self, guild_id: str) -> Guild:
        data = await self._request(
            "GET", f"/guilds/{guild_id}", params={"with_counts": "true"}
        )
        return Guild.model_validate(data)

    async def get_guild_channels(self, guild_id: str) -> List[Channel]:
        data = await self._request("GET", f"/guilds/{guild_id}/channels")
        return [Channel.model_validate(c) for c in data or []]

    async def get_channel(self, channel_id: str) -> Channel:
        data = await self._request("GET", f"/channels/{channel_id}")
        return Channel.model_validate(data)

    async def get_messages(self, channel_id: str, limit: int = 50) -> List[Message]:
        """Latest messages in a channel, newest first"""
        data = await self._request(
            "GET", f"/channels/{channel_id}/messages", params={"limit": str(limit)}
        )
        return [Message.model_validate(m) for m in data or []]

    async def send_message(self, channel_id: str, content: str) -> Message:
        data = await self._request(
            "POST", f"/channels/{channel_id}/messages", json={"content": content}
        )
        self.logger.info(f"Sent message {data.get('id')} to channel {channel_id}")
        return Message.model_validate(data)
