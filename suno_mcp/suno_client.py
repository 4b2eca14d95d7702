import asyncio
from typing import Any, Optional

import aiohttp
from loguru import logger
from pydantic import ValidationError

from suno_mcp.config import DUMMY_CALLBACK_URL, SunoSettings
from suno_mcp.models import (
    AddInstrumentalRequest,
    AddVocalsRequest,
    ConvertToWavRequest,
    CreateMusicVideoRequest,
    ExtendMusicRequest,
    GenerateLyricsRequest,
    GenerateMusicRequest,
    SeparateVocalsRequest,
    StatusResponse,
)

INSUFFICIENT_CREDITS = 429


class SunoApiError(Exception):
    """A failed request to the Suno API.

    ``status`` is the HTTP status, or the ``code`` of an error envelope
    returned with HTTP 200. It is None for transport failures.
    """

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status

    @property
    def insufficient_credits(self) -> bool:
        return self.status == INSUFFICIENT_CREDITS


class SunoClient:
    """Single-shot wrapper around the Suno REST API.

    Submissions always carry a placeholder callback URL; completion is
    observed by polling ``fetch_status``. Nothing here retries.
    """

    def __init__(
        self,
        settings: SunoSettings,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.base_url = settings.base_url.rstrip("/")
        self.settings = settings
        self.logger = logger
        self._session = session
        self._owns_session = session is None
        self.logger.info("SunoClient initialized")

    async def __aenter__(self) -> "SunoClient":
        if self._session is None:
            self._session = aiohttp.ClientSession(
                headers={
                    "Authorization": f"Bearer {self.settings.api_key.get_secret_value()}",
                    "Content-Type": "application/json",
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
            raise RuntimeError("SunoClient must be used as an async context manager")
        return self._session

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> Any:
        """Send one request and return the ``data`` member of the reply envelope"""
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
                    message = _envelope_message(body) or response.reason or "HTTP error"
                    raise SunoApiError(message, status=response.status)
        except SunoApiError as e:
            self.logger.error(f"API error {e.status} at {path}: {e.message}")
            raise
        except aiohttp.ClientError as e:
            self.logger.error(f"HTTP error at {path}: {e}")
            raise SunoApiError(str(e) or type(e).__name__) from e
        except asyncio.TimeoutError as e:
            self.logger.error(f"Request to {path} timed out")
            raise SunoApiError(
                f"Request timed out after {self.settings.request_timeout}s"
            ) from e

        if not isinstance(body, dict):
            self.logger.error(f"Invalid response body from {path}")
            raise SunoApiError("Invalid response from API: expected a JSON object")

        code = body.get("code", 200)
        if code != 200:
            message = _envelope_message(body) or "Unknown API error"
            self.logger.error(f"API error {code} at {path}: {message}")
            raise SunoApiError(message, status=code)

        return body.get("data")

    async def _submit(self, path: str, payload: dict) -> str:
        data = await self._request(
            "POST", path, json={**payload, "callBackUrl": DUMMY_CALLBACK_URL}
        )
        task_id = data.get("taskId") if isinstance(data, dict) else None
        if not task_id:
            self.logger.error(f"No taskId in response from {path}")
            raise SunoApiError("API response did not include a taskId")
        self.logger.info(f"Submitted {path}, task {task_id}")
        return task_id

    async def generate_music(self, request: GenerateMusicRequest) -> str:
        return await self._submit("/api/v1/generate", request.to_payload())

    async def extend_music(self, request: ExtendMusicRequest) -> str:
        return await self._submit("/api/v1/generate/extend", request.to_payload())

    async def separate_vocals(self, request: SeparateVocalsRequest) -> str:
        return await self._submit("/api/v1/separate", request.to_payload())

    async def convert_to_wav(self, request: ConvertToWavRequest) -> str:
        return await self._submit(
            "/api/v1/convert", {**request.to_payload(), "format": "wav"}
        )

    async def generate_lyrics(self, request: GenerateLyricsRequest) -> str:
        return await self._submit("/api/v1/lyrics", request.to_payload())

    async def create_music_video(self, request: CreateMusicVideoRequest) -> str:
        return await self._submit("/api/v1/video", request.to_payload())

    async def add_vocals(self, request: AddVocalsRequest) -> str:
        return await self._submit("/api/v1/vocals", request.to_payload())

    async def add_instrumental(self, request: AddInstrumentalRequest) -> str:
        return await self._submit("/api/v1/instrumental", request.to_payload())

    async def fetch_status(self, task_id: str) -> StatusResponse:
        """Fetches the current status of a task"""
        start_time = asyncio.get_running_loop().time()
        data = await self._request(
            "GET", "/api/v1/generate/record-info", params={"taskId": task_id}
        )
        if not isinstance(data, dict):
            raise SunoApiError("Invalid status response: missing data")

        try:
            return StatusResponse.from_payload(
                data,
                task_id=task_id,
                elapsed_time=asyncio.get_running_loop().time() - start_time,
            )
        except ValidationError as e:
            self.logger.error(f"Unexpected status payload for task {task_id}: {e}")
            raise SunoApiError(f"Invalid status response: {e}") from e

    async def check_credits(self) -> float:
        data = await self._request("GET", "/api/v1/generate/credit")
        try:
            return float(data)
        except (TypeError, ValueError) as e:
            raise SunoApiError(f"Invalid credit balance: {data!r}") from e


def _envelope_message(body: Any) -> Optional[str]:
    if isinstance(body, dict):
        return body.get("msg") or body.get("message")
    return None
