from typing import List, Sequence, Union

import pytest

from suno_mcp.config import PollingConfig
from suno_mcp.models import (
    Completed,
    PollingFailed,
    StatusResponse,
    TaskFailed,
    TimedOut,
)
from suno_mcp.polling import TaskPoller
from suno_mcp.suno_client import SunoApiError

Step = Union[str, Exception]


class FakeClock:
    """Virtual time: sleeping advances the clock instantly."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: List[float] = []

    def time(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay


class ScriptedStatusSource:
    """Replays a script of statuses/errors; the last step repeats forever."""

    def __init__(self, clock: FakeClock, script: Sequence[Step]):
        self.clock = clock
        self.script = list(script)
        self.calls: List[float] = []

    async def fetch_status(self, task_id: str) -> StatusResponse:
        step = self.script[min(len(self.calls), len(self.script) - 1)]
        self.calls.append(self.clock.now)
        if isinstance(step, Exception):
            raise step
        return StatusResponse(
            task_id=task_id,
            status=step,
            error_message="audio generation failed" if "FAILED" in step else None,
        )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config() -> PollingConfig:
    """The reference policy: 2s initial, x1.2 growth, 5s cap, 3 errors."""
    return PollingConfig(
        initial_delay=2.0,
        max_delay=5.0,
        backoff_factor=1.2,
        max_consecutive_errors=3,
    )


def make_poller(clock, config, script, **kwargs):
    source = ScriptedStatusSource(clock, script)
    poller = TaskPoller(source, config, clock=clock.time, sleep=clock.sleep, **kwargs)
    return poller, source


@pytest.mark.asyncio
async def test_success_after_pending_polls_on_backoff_schedule(clock, config):
    poller, source = make_poller(
        clock, config, ["PENDING", "PENDING", "PENDING", "SUCCESS"]
    )

    outcome = await poller.poll_until_complete("task-1", max_wait=10.0)

    assert isinstance(outcome, Completed)
    assert outcome.status.status == "SUCCESS"
    assert source.calls == pytest.approx([0.0, 2.0, 4.4, 7.28])
    assert clock.sleeps == pytest.approx([2.0, 2.4, 2.88])


@pytest.mark.asyncio
async def test_immediate_success_never_sleeps(clock, config):
    poller, source = make_poller(clock, config, ["SUCCESS"])

    outcome = await poller.poll_until_complete("task-1", max_wait=60.0)

    assert isinstance(outcome, Completed)
    assert len(source.calls) == 1
    assert clock.sleeps == []


@pytest.mark.asyncio
async def test_failure_status_returns_without_trailing_sleep(clock, config):
    poller, source = make_poller(clock, config, ["PENDING", "GENERATE_AUDIO_FAILED"])

    outcome = await poller.poll_until_complete("task-1", max_wait=60.0)

    assert isinstance(outcome, TaskFailed)
    assert outcome.status.error_message == "audio generation failed"
    assert len(source.calls) == 2
    assert clock.sleeps == [2.0]


@pytest.mark.asyncio
async def test_create_task_failed_is_terminal(clock, config):
    poller, _ = make_poller(clock, config, ["CREATE_TASK_FAILED"])

    outcome = await poller.poll_until_complete("task-1", max_wait=60.0)

    assert isinstance(outcome, TaskFailed)


@pytest.mark.asyncio
async def test_consecutive_errors_stop_polling_early(clock, config):
    poller, source = make_poller(clock, config, [SunoApiError("boom", status=500)])

    outcome = await poller.poll_until_complete("task-1", max_wait=60.0)

    assert isinstance(outcome, PollingFailed)
    assert outcome.task_id == "task-1"
    assert "3 consecutive" in outcome.reason
    assert "boom" in outcome.reason
    assert len(source.calls) == 3
    # error path grows the interval before sleeping
    assert clock.sleeps == pytest.approx([2.4, 2.88])
    assert clock.now < 60.0


@pytest.mark.asyncio
async def test_successful_poll_resets_error_count(clock, config):
    error = SunoApiError("flaky")
    poller, source = make_poller(
        clock, config, [error, error, "PENDING", error, error, "SUCCESS"]
    )

    outcome = await poller.poll_until_complete("task-1", max_wait=120.0)

    assert isinstance(outcome, Completed)
    assert len(source.calls) == 6


@pytest.mark.asyncio
async def test_pending_forever_times_out(clock, config):
    poller, source = make_poller(clock, config, ["PENDING"])

    outcome = await poller.poll_until_complete("task-1", max_wait=10.0)

    assert isinstance(outcome, TimedOut)
    assert outcome.task_id == "task-1"
    assert len(source.calls) >= 1
    assert clock.now >= 10.0
    assert all(call < 10.0 for call in source.calls)


@pytest.mark.asyncio
async def test_budget_checked_only_before_each_poll(clock, config):
    poller, source = make_poller(clock, config, ["PENDING", "SUCCESS"])

    outcome = await poller.poll_until_complete("task-1", max_wait=1.0)

    # the single 2s sleep overruns the 1s budget; the loop then exits
    assert isinstance(outcome, TimedOut)
    assert len(source.calls) == 1
    assert clock.sleeps == [2.0]
    assert clock.now == pytest.approx(2.0)


@pytest.mark.asyncio
async def test_unknown_statuses_are_treated_as_pending(clock, config):
    poller, source = make_poller(
        clock, config, ["TEXT_SUCCESS", "FIRST_SUCCESS", "SOMETHING_NEW", "SUCCESS"]
    )

    outcome = await poller.poll_until_complete("task-1", max_wait=60.0)

    assert isinstance(outcome, Completed)
    assert len(source.calls) == 4


@pytest.mark.parametrize(
    "script",
    [
        ["PENDING"],
        [SunoApiError("down"), "PENDING"],
        ["PENDING", SunoApiError("down"), "PENDING", SunoApiError("down"), "PENDING"],
        [SunoApiError("a"), SunoApiError("b"), "PENDING", "PENDING", SunoApiError("c")],
    ],
)
@pytest.mark.asyncio
async def test_interval_is_non_decreasing_and_capped(clock, config, script):
    poller, _ = make_poller(clock, config, script)

    await poller.poll_until_complete("task-1", max_wait=60.0)

    assert clock.sleeps
    assert all(b >= a for a, b in zip(clock.sleeps, clock.sleeps[1:]))
    assert max(clock.sleeps) <= config.max_delay
    assert clock.sleeps[-1] == pytest.approx(config.max_delay)


@pytest.mark.asyncio
async def test_status_change_callback_fires_on_transitions_only(clock, config):
    seen = []

    async def on_change(status: StatusResponse):
        seen.append(status.status)

    poller, _ = make_poller(
        clock,
        config,
        ["PENDING", "PENDING", "TEXT_SUCCESS", "TEXT_SUCCESS", "SUCCESS"],
        on_status_change=on_change,
    )

    await poller.poll_until_complete("task-1", max_wait=60.0)

    assert seen == ["PENDING", "TEXT_SUCCESS", "SUCCESS"]


@pytest.mark.asyncio
async def test_default_clock_and_sleep_use_event_loop():
    """Without injected fakes the poller really waits on asyncio"""
    config = PollingConfig(initial_delay=0.01, max_delay=0.02)
    source = ScriptedStatusSource(FakeClock(), ["PENDING", "SUCCESS"])
    poller = TaskPoller(source, config)

    outcome = await poller.poll_until_complete("task-1", max_wait=5.0)

    assert isinstance(outcome, Completed)
    assert len(source.calls) == 2


@pytest.mark.asyncio
async def test_failing_status_callback_does_not_stop_polling(clock, config):
    async def disconnected(status: StatusResponse):
        raise RuntimeError("client disconnected")

    poller, source = make_poller(
        clock, config, ["PENDING", "TEXT_SUCCESS", "SUCCESS"], on_status_change=disconnected
    )

    outcome = await poller.poll_until_complete("task-1", max_wait=60.0)

    assert isinstance(outcome, Completed)
    assert len(source.calls) == 3


@pytest.mark.asyncio
async def test_failing_status_callback_still_times_out(clock, config):
    async def disconnected(status: StatusResponse):
        raise RuntimeError("client disconnected")

    poller, _ = make_poller(clock, config, ["PENDING"], on_status_change=disconnected)

    outcome = await poller.poll_until_complete("task-1", max_wait=10.0)

    assert isinstance(outcome, TimedOut)
