from typing import Any, Awaitable, Callable, Optional

from loguru import logger

from suno_mcp import formatting, validation
from suno_mcp.config import OperationTimeouts, PollingConfig
from suno_mcp.formatting import Operation
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
from suno_mcp.polling import TaskPoller
from suno_mcp.suno_client import SunoApiError, SunoClient


class SunoTools:
    """The Suno tool operations, bound to one client for one invocation.

    Each task operation validates its request, submits it, and then either
    returns the task id at once or drives a TaskPoller to an outcome.
    Every path returns text; API errors are rendered, never raised.
    """

    def __init__(
        self,
        client: SunoClient,
        polling: Optional[PollingConfig] = None,
        timeouts: Optional[OperationTimeouts] = None,
        on_status_change: Optional[Callable[[StatusResponse], Awaitable[Any]]] = None,
    ):
        self.client = client
        self.polling = polling or PollingConfig()
        self.timeouts = timeouts or OperationTimeouts()
        self.on_status_change = on_status_change
        self.logger = logger

    async def _run_task(
        self,
        operation: Operation,
        submit: Callable[[], Awaitable[str]],
        wait_for_completion: bool,
    ) -> str:
        try:
            task_id = await submit()
        except SunoApiError as e:
            self.logger.error(f"Error in {operation.name}: {e}")
            return formatting.render_api_error(e, operation.noun)

        if not wait_for_completion:
            return formatting.render_started(task_id, operation)

        poller = TaskPoller(
            self.client, self.polling, on_status_change=self.on_status_change
        )
        outcome = await poller.poll_until_complete(
            task_id, getattr(self.timeouts, operation.timeout_key)
        )
        return formatting.render_outcome(outcome, operation)

    async def generate_music(
        self, request: GenerateMusicRequest, wait_for_completion: bool = True
    ) -> str:
        error = validation.validate_generate_music(request)
        if error:
            return error
        return await self._run_task(
            formatting.GENERATE_MUSIC,
            lambda: self.client.generate_music(request),
            wait_for_completion,
        )

    async def extend_music(
        self, request: ExtendMusicRequest, wait_for_completion: bool = True
    ) -> str:
        error = validation.validate_extend_music(request)
        if error:
            return error
        return await self._run_task(
            formatting.EXTEND_MUSIC,
            lambda: self.client.extend_music(request),
            wait_for_completion,
        )

    async def separate_vocals(
        self, request: SeparateVocalsRequest, wait_for_completion: bool = True
    ) -> str:
        error = validation.validate_separate_vocals(request)
        if error:
            return error
        return await self._run_task(
            formatting.SEPARATE_VOCALS,
            lambda: self.client.separate_vocals(request),
            wait_for_completion,
        )

    async def convert_to_wav(
        self, request: ConvertToWavRequest, wait_for_completion: bool = True
    ) -> str:
        error = validation.validate_convert_to_wav(request)
        if error:
            return error
        return await self._run_task(
            formatting.CONVERT_TO_WAV,
            lambda: self.client.convert_to_wav(request),
            wait_for_completion,
        )

    async def generate_lyrics(
        self, request: GenerateLyricsRequest, wait_for_completion: bool = True
    ) -> str:
        error = validation.validate_generate_lyrics(request)
        if error:
            return error
        return await self._run_task(
            formatting.GENERATE_LYRICS,
            lambda: self.client.generate_lyrics(request),
            wait_for_completion,
        )

    async def create_music_video(
        self, request: CreateMusicVideoRequest, wait_for_completion: bool = False
    ) -> str:
        error = validation.validate_create_music_video(request)
        if error:
            return error
        return await self._run_task(
            formatting.CREATE_MUSIC_VIDEO,
            lambda: self.client.create_music_video(request),
            wait_for_completion,
        )

    async def add_vocals(
        self, request: AddVocalsRequest, wait_for_completion: bool = True
    ) -> str:
        error = validation.validate_add_vocals(request)
        if error:
            return error
        return await self._run_task(
            formatting.ADD_VOCALS,
            lambda: self.client.add_vocals(request),
            wait_for_completion,
        )

    async def add_instrumental(
        self, request: AddInstrumentalRequest, wait_for_completion: bool = True
    ) -> str:
        error = validation.validate_add_instrumental(request)
        if error:
            return error
        return await self._run_task(
            formatting.ADD_INSTRUMENTAL,
            lambda: self.client.add_instrumental(request),
            wait_for_completion,
        )

    async def get_generation_status(self, task_id: str) -> str:
        error = validation.validate_required("task_id", task_id)
        if error:
            return error
        try:
            status = await self.client.fetch_status(task_id)
        except SunoApiError as e:
            self.logger.error(f"Error in suno_get_generation_status: {e}")
            if e.status == 404:
                return "❌ Task not found. Check that the task_id is correct."
            return formatting.render_api_error(e, "Task")
        return formatting.render_status(status)

    async def check_credits(self) -> str:
        try:
            credits = await self.client.check_credits()
        except SunoApiError as e:
            self.logger.error(f"Error in suno_check_credits: {e}")
            return formatting.render_api_error(e)
        shown = int(credits) if credits.is_integer() else credits
        return f"💰 Available credits: {shown}"
