from typing import AsyncGenerator

import pytest
import pytest_asyncio

from mock_suno_server import SunoMockServer
from suno_mcp.config import OperationTimeouts, PollingConfig, SunoSettings
from suno_mcp.models import (
    AddInstrumentalRequest,
    AddVocalsRequest,
    ConvertToWavRequest,
    CreateMusicVideoRequest,
    ExtendMusicRequest,
    GenerateLyricsRequest,
    GenerateMusicRequest,
    SeparateVocalsRequest,
)
from suno_mcp.suno_client import SunoClient
from suno_mcp.tools import SunoTools

FAST_TIMEOUTS = OperationTimeouts(
    music_generation=5.0,
    music_extension=5.0,
    vocal_separation=5.0,
    wav_conversion=5.0,
    lyrics_generation=5.0,
    video_creation=5.0,
    add_vocals=5.0,
    add_instrumental=5.0,
)


@pytest_asyncio.fixture
async def server(unused_tcp_port_factory) -> AsyncGenerator[SunoMockServer, None]:
    port = unused_tcp_port_factory()
    server_instance = SunoMockServer(completion_time=0.2)
    await server_instance.start(port=port)
    server_instance.port = port
    try:
        yield server_instance
    finally:
        await server_instance.stop()


@pytest_asyncio.fixture
async def tools(server) -> AsyncGenerator[SunoTools, None]:
    settings = SunoSettings(
        api_key="test-key", base_url=f"http://localhost:{server.port}"
    )
    async with SunoClient(settings) as client:
        yield SunoTools(
            client,
            PollingConfig(initial_delay=0.05, max_delay=0.1),
            FAST_TIMEOUTS,
        )


def simple_music() -> GenerateMusicRequest:
    return GenerateMusicRequest(
        custom_mode=False, instrumental=False, model="V4_5", prompt="an upbeat synthwave song"
    )


@pytest.mark.asyncio
async def test_generate_music_waits_for_tracks(tools):
    text = await tools.generate_music(simple_music())

    assert text.startswith("✅ Music generated successfully!")
    assert "Track 1: Track 1" in text
    assert "Duration: 120.5s" in text
    assert "Tags: synthwave" in text


@pytest.mark.asyncio
async def test_generate_music_without_waiting_returns_task_id(tools, server):
    text = await tools.generate_music(simple_music(), wait_for_completion=False)

    task_id = next(iter(server.tasks))
    assert text.startswith("✅ Generation started.")
    assert task_id in text
    assert "suno_get_generation_status" in text
    assert server.status_requests == 0


@pytest.mark.asyncio
async def test_generate_music_validation_happens_before_network(tools, server):
    text = await tools.generate_music(
        GenerateMusicRequest(custom_mode=True, instrumental=False, model="V4")
    )

    assert text.startswith("❌ Error: custom_mode + vocals requires")
    assert server.submissions == []


@pytest.mark.asyncio
async def test_insufficient_credits_message(tools, server):
    server.credits = 0

    text = await tools.extend_music(
        ExtendMusicRequest(default_param_flag=False, audio_id="a1", model="V4")
    )

    assert text == "❌ Insufficient credits. Check balance with: suno_check_credits"


@pytest.mark.asyncio
async def test_timeout_reports_in_progress(tools, server):
    server.completion_time = 60.0
    tools.timeouts = OperationTimeouts(vocal_separation=0.3)

    text = await tools.separate_vocals(
        SeparateVocalsRequest(task_id="t1", audio_id="a1", separation_type="split_stem")
    )

    task_id = next(iter(server.tasks))
    assert text.startswith(f"⏳ Separation in progress. Task ID: {task_id}")


@pytest.mark.asyncio
async def test_remote_failure_uses_service_message(tools, server):
    server.final_status = "CREATE_TASK_FAILED"
    server.error_message = "Prompt rejected"

    text = await tools.convert_to_wav(ConvertToWavRequest(task_id="t1", audio_id="a1"))

    assert text == "❌ Conversion failed: Prompt rejected"


@pytest.mark.asyncio
async def test_remote_failure_without_message(tools, server):
    server.final_status = "GENERATE_AUDIO_FAILED"

    text = await tools.add_vocals(
        AddVocalsRequest(
            prompt="soft vocals",
            title="Echo",
            negative_tags="metal",
            style="indie pop",
            upload_url="https://files.example.com/inst.mp3",
        )
    )

    assert text == "❌ Vocal addition failed: Unknown error"


@pytest.mark.asyncio
async def test_polling_failure_after_errors(tools, server):
    server.error_rate = 1.0

    text = await tools.add_instrumental(
        AddInstrumentalRequest(
            upload_url="https://files.example.com/vocals.mp3",
            title="Backing",
            negative_tags="drums",
            tags="acoustic guitar",
        )
    )

    assert text.startswith("❌ Instrumental addition failed: Failed after 3 consecutive")


@pytest.mark.asyncio
async def test_generate_lyrics(tools):
    text = await tools.generate_lyrics(GenerateLyricsRequest(prompt="a night drive"))

    assert text.startswith("✅ Lyrics generated successfully!")
    assert "City lights below" in text


@pytest.mark.asyncio
async def test_music_video_does_not_wait_by_default(tools, server):
    text = await tools.create_music_video(
        CreateMusicVideoRequest(task_id="t1", audio_id="a1", author="DJ Test")
    )

    assert text.startswith("✅ Video creation started.")
    assert "Video creation is slow" in text
    assert server.status_requests == 0
    assert server.submissions[-1][1]["author"] == "DJ Test"


@pytest.mark.asyncio
async def test_music_video_waits_when_asked(tools):
    text = await tools.create_music_video(
        CreateMusicVideoRequest(task_id="t1", audio_id="a1"), wait_for_completion=True
    )

    assert text.startswith("✅ Music video created!")
    assert ".mp4" in text


@pytest.mark.asyncio
async def test_get_generation_status(tools, server):
    server.completion_time = 0.0
    await tools.generate_music(simple_music(), wait_for_completion=False)
    task_id = next(iter(server.tasks))

    text = await tools.get_generation_status(task_id)

    assert text.startswith("✅ Task completed successfully!")


@pytest.mark.asyncio
async def test_get_generation_status_pending(tools, server):
    server.completion_time = 60.0
    await tools.generate_music(simple_music(), wait_for_completion=False)
    task_id = next(iter(server.tasks))

    text = await tools.get_generation_status(task_id)

    assert text == f"📊 Task Status: PENDING\n\nTask ID: {task_id}"


@pytest.mark.asyncio
async def test_get_generation_status_unknown_task(tools):
    text = await tools.get_generation_status("nope")

    assert text == "❌ Task not found. Check that the task_id is correct."


@pytest.mark.asyncio
async def test_get_generation_status_requires_task_id(tools):
    assert await tools.get_generation_status("  ") == "❌ Error: task_id is required"


@pytest.mark.asyncio
async def test_check_credits(tools, server):
    server.credits = 12

    assert await tools.check_credits() == "💰 Available credits: 12"
