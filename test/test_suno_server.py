import pytest

from suno_mcp.config import ConfigurationError, load_settings
from suno_mcp.server import create_server


def test_load_settings_requires_api_key():
    with pytest.raises(ConfigurationError, match="SUNO_API_KEY"):
        load_settings({"SUNO_API_KEY": "   "})


def test_load_settings_reads_overrides():
    settings = load_settings(
        {
            "SUNO_API_KEY": "secret-key",
            "SUNO_API_BASE_URL": "http://localhost:9999",
            "SUNO_REQUEST_TIMEOUT": "7.5",
            "LOG_LEVEL": "debug",
        }
    )

    assert settings.api_key.get_secret_value() == "secret-key"
    assert settings.base_url == "http://localhost:9999"
    assert settings.request_timeout == 7.5
    assert settings.log_level == "DEBUG"
    assert "secret-key" not in repr(settings)


def test_load_settings_defaults():
    settings = load_settings({"SUNO_API_KEY": "k"})

    assert settings.base_url == "https://api.sunoapi.org"
    assert settings.timeouts.video_creation == 120.0
    assert settings.timeouts.lyrics_generation == 20.0
    assert settings.polling.initial_delay == 2.0


@pytest.mark.asyncio
async def test_server_registers_all_tools():
    mcp = create_server(load_settings({"SUNO_API_KEY": "k"}))

    tools = {tool.name: tool for tool in await mcp.list_tools()}

    assert set(tools) == {
        "suno_generate_music",
        "suno_extend_music",
        "suno_separate_vocals",
        "suno_convert_to_wav",
        "suno_generate_lyrics",
        "suno_create_music_video",
        "suno_add_vocals",
        "suno_add_instrumental",
        "suno_get_generation_status",
        "suno_check_credits",
    }
    video_props = tools["suno_create_music_video"].inputSchema["properties"]
    assert video_props["wait_for_completion"]["default"] is False
    assert "ctx" not in video_props
