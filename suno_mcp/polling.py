import asyncio
from typing import Any, Awaitable, Callable, Optional, Protocol

from loguru import logger

from suno_mcp.config import PollingConfig
from suno_mcp.models import (
    Completed,
    PollingFailed,
    PollOutcome,
    StatusFamily,
    StatusResponse,
    TaskFailed,
    TimedOut,
)
from suno_mcp.suno_client import SunoApiError


class StatusSource(Protocol):
    async def fetch_status(self, task_id: str) -> StatusResponse: ...


class TaskPoller:
    """Drives one task to a terminal status, a timeout, or an error ceiling.

    The interval between polls starts at ``config.initial_delay`` and grows by
    ``config.backoff_factor`` after every non-terminal poll, whether that poll
    returned a pending status or raised, up to ``config.max_delay``. The time
    budget is only checked before each poll, so the last sleep may run past it.

    ``clock`` and ``sleep`` default to the running event loop's clock and
    ``asyncio.sleep``; tests pass fakes.
    """

    def __init__(
        self,
        client: StatusSource,
        config: Optional[PollingConfig] = None,
        on_status_change: Optional[Callable[[StatusResponse], Awaitable[Any]]] = None,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ):
        self.client = client
        self.config = config or PollingConfig()
        self.on_status_change = on_status_change
        self.logger = logger
        self._clock = clock
        self._sleep = sleep or asyncio.sleep

    def _now(self) -> float:
        if self._clock is not None:
            return self._clock()
        return asyncio.get_running_loop().time()

    def _calculate_delay(self, current: float) -> float:
        """Next polling interval: multiplicative growth, capped at max_delay"""
        return min(current * self.config.backoff_factor, self.config.max_delay)

    async def _wait_before_retry(self, task_id: str, delay: float) -> None:
        self.logger.debug(f"Task {task_id} waiting {delay:.2f}s before next poll")
        await self._sleep(delay)

    async def _handle_status_change(
        self, status_response: StatusResponse, last_status: Optional[str]
    ) -> None:
        """Invoke the status change callback if the status has changed"""
        if last_status != status_response.status and self.on_status_change is not None:
            self.logger.debug(
                f"Task {status_response.task_id} status changed to {status_response.status}"
            )
            try:
                await self.on_status_change(status_response)
            except Exception as e:
                # A failed progress report does not count against the task
                self.logger.warning(
                    f"Status change callback failed for task {status_response.task_id}: {e}"
                )

    async def poll_until_complete(self, task_id: str, max_wait: float) -> PollOutcome:
        """Poll the status endpoint until a terminal status, the error ceiling, or max_wait"""
        start = self._now()
        interval = self.config.initial_delay
        consecutive_errors = 0
        last_status = None

        self.logger.info(f"Starting poll for task {task_id} (max {max_wait:.1f}s)")

        while self._now() - start < max_wait:
            try:
                status_response = await self.client.fetch_status(task_id)
            except SunoApiError as polling_error:
                consecutive_errors += 1
                self.logger.warning(
                    f"Polling error ({consecutive_errors}/{self.config.max_consecutive_errors})"
                    f" for task {task_id}: {polling_error}"
                )

                if consecutive_errors >= self.config.max_consecutive_errors:
                    self.logger.error(f"Max consecutive errors reached for task {task_id}")
                    return PollingFailed(
                        task_id=task_id,
                        reason=(
                            f"Failed after {consecutive_errors} consecutive API errors: "
                            f"{polling_error}"
                        ),
                    )

                interval = self._calculate_delay(interval)
                await self._wait_before_retry(task_id, interval)
                continue

            consecutive_errors = 0
            await self._handle_status_change(status_response, last_status)
            last_status = status_response.status

            if status_response.family is StatusFamily.success:
                self.logger.info(f"Task {task_id} completed with status {status_response.status}")
                return Completed(status=status_response)

            if status_response.family is StatusFamily.failed:
                self.logger.info(f"Task {task_id} failed with status {status_response.status}")
                return TaskFailed(status=status_response)

            self.logger.debug(
                f"Task {task_id} status {status_response.status}, polling again in {interval:.2f}s"
            )
            await self._wait_before_retry(task_id, interval)
            interval = self._calculate_delay(interval)

        self.logger.warning(
            f"Task {task_id} polling timeout after {self._now() - start:.1f}s"
        )
        return TimedOut(task_id=task_id)
