"""
Suno MCP Server.

Exposes the Suno music API as MCP tools over stdio. Every tool call opens
its own HTTP session, submits one task and (optionally) polls it to an
outcome; nothing is kept between calls.

RUN:
    SUNO_API_KEY=... suno-mcp
"""

import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from loguru import logger
from mcp.server.fastmcp import Context, FastMCP

from suno_mcp.config import (
    ConfigurationError,
    SunoSettings,
    configure_logging,
    load_settings,
)
from suno_mcp.descriptions import (
    ADD_INSTRUMENTAL_DESCRIPTION,
    ADD_VOCALS_DESCRIPTION,
    CHECK_CREDITS_DESCRIPTION,
    CONVERT_TO_WAV_DESCRIPTION,
    CREATE_MUSIC_VIDEO_DESCRIPTION,
    EXTEND_MUSIC_DESCRIPTION,
    GENERATE_LYRICS_DESCRIPTION,
    GENERATE_MUSIC_DESCRIPTION,
    GET_GENERATION_STATUS_DESCRIPTION,
    SEPARATE_VOCALS_DESCRIPTION,
)
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
from suno_mcp.suno_client import SunoClient
from suno_mcp.tools import SunoTools


def create_server(settings: SunoSettings) -> FastMCP:
    mcp = FastMCP("Suno Music Tools")

    @asynccontextmanager
    async def open_tools(ctx: Optional[Context] = None) -> AsyncIterator[SunoTools]:
        async def report_status(status: StatusResponse) -> None:
            if ctx is not None:
                await ctx.info(f"Task {status.task_id} status: {status.status}")

        async with SunoClient(settings) as client:
            yield SunoTools(
                client,
                settings.polling,
                settings.timeouts,
                on_status_change=report_status,
            )

    @mcp.tool(description=GENERATE_MUSIC_DESCRIPTION)
    async def suno_generate_music(
        custom_mode: bool,
        instrumental: bool,
        model: str,
        ctx: Context,
        prompt: Optional[str] = None,
        style: Optional[str] = None,
        title: Optional[str] = None,
        persona_id: Optional[str] = None,
        negative_tags: Optional[str] = None,
        vocal_gender: Optional[str] = None,
        style_weight: Optional[float] = None,
        weirdness_constraint: Optional[float] = None,
        audio_weight: Optional[float] = None,
        wait_for_completion: bool = True,
    ) -> str:
        request = GenerateMusicRequest(
            custom_mode=custom_mode,
            instrumental=instrumental,
            model=model,
            prompt=prompt,
            style=style,
            title=title,
            persona_id=persona_id,
            negative_tags=negative_tags,
            vocal_gender=vocal_gender,
            style_weight=style_weight,
            weirdness_constraint=weirdness_constraint,
            audio_weight=audio_weight,
        )
        async with open_tools(ctx) as tools:
            return await tools.generate_music(request, wait_for_completion)

    @mcp.tool(description=EXTEND_MUSIC_DESCRIPTION)
    async def suno_extend_music(
        default_param_flag: bool,
        audio_id: str,
        model: str,
        ctx: Context,
        prompt: Optional[str] = None,
        style: Optional[str] = None,
        title: Optional[str] = None,
        continue_at: Optional[float] = None,
        persona_id: Optional[str] = None,
        negative_tags: Optional[str] = None,
        vocal_gender: Optional[str] = None,
        style_weight: Optional[float] = None,
        weirdness_constraint: Optional[float] = None,
        audio_weight: Optional[float] = None,
        wait_for_completion: bool = True,
    ) -> str:
        request = ExtendMusicRequest(
            default_param_flag=default_param_flag,
            audio_id=audio_id,
            model=model,
            prompt=prompt,
            style=style,
            title=title,
            continue_at=continue_at,
            persona_id=persona_id,
            negative_tags=negative_tags,
            vocal_gender=vocal_gender,
            style_weight=style_weight,
            weirdness_constraint=weirdness_constraint,
            audio_weight=audio_weight,
        )
        async with open_tools(ctx) as tools:
            return await tools.extend_music(request, wait_for_completion)

    @mcp.tool(description=SEPARATE_VOCALS_DESCRIPTION)
    async def suno_separate_vocals(
        task_id: str,
        audio_id: str,
        ctx: Context,
        separation_type: str = "separate_vocal",
        wait_for_completion: bool = True,
    ) -> str:
        request = SeparateVocalsRequest(
            task_id=task_id, audio_id=audio_id, separation_type=separation_type
        )
        async with open_tools(ctx) as tools:
            return await tools.separate_vocals(request, wait_for_completion)

    @mcp.tool(description=CONVERT_TO_WAV_DESCRIPTION)
    async def suno_convert_to_wav(
        task_id: str,
        audio_id: str,
        ctx: Context,
        wait_for_completion: bool = True,
    ) -> str:
        request = ConvertToWavRequest(task_id=task_id, audio_id=audio_id)
        async with open_tools(ctx) as tools:
            return await tools.convert_to_wav(request, wait_for_completion)

    @mcp.tool(description=GENERATE_LYRICS_DESCRIPTION)
    async def suno_generate_lyrics(
        prompt: str, ctx: Context, wait_for_completion: bool = True
    ) -> str:
        async with open_tools(ctx) as tools:
            return await tools.generate_lyrics(
                GenerateLyricsRequest(prompt=prompt), wait_for_completion
            )

    @mcp.tool(description=CREATE_MUSIC_VIDEO_DESCRIPTION)
    async def suno_create_music_video(
        task_id: str,
        audio_id: str,
        ctx: Context,
        author: Optional[str] = None,
        domain_name: Optional[str] = None,
        wait_for_completion: bool = False,
    ) -> str:
        request = CreateMusicVideoRequest(
            task_id=task_id,
            audio_id=audio_id,
            author=author,
            domain_name=domain_name,
        )
        async with open_tools(ctx) as tools:
            return await tools.create_music_video(request, wait_for_completion)

    @mcp.tool(description=ADD_VOCALS_DESCRIPTION)
    async def suno_add_vocals(
        prompt: str,
        title: str,
        negative_tags: str,
        style: str,
        upload_url: str,
        ctx: Context,
        vocal_gender: Optional[str] = None,
        style_weight: Optional[float] = None,
        weirdness_constraint: Optional[float] = None,
        audio_weight: Optional[float] = None,
        model: str = "V4_5PLUS",
        wait_for_completion: bool = True,
    ) -> str:
        request = AddVocalsRequest(
            prompt=prompt,
            title=title,
            negative_tags=negative_tags,
            style=style,
            upload_url=upload_url,
            vocal_gender=vocal_gender,
            style_weight=style_weight,
            weirdness_constraint=weirdness_constraint,
            audio_weight=audio_weight,
            model=model,
        )
        async with open_tools(ctx) as tools:
            return await tools.add_vocals(request, wait_for_completion)

    @mcp.tool(description=ADD_INSTRUMENTAL_DESCRIPTION)
    async def suno_add_instrumental(
        upload_url: str,
        title: str,
        negative_tags: str,
        tags: str,
        ctx: Context,
        vocal_gender: Optional[str] = None,
        style_weight: Optional[float] = None,
        weirdness_constraint: Optional[float] = None,
        audio_weight: Optional[float] = None,
        model: str = "V4_5PLUS",
        wait_for_completion: bool = True,
    ) -> str:
        request = AddInstrumentalRequest(
            upload_url=upload_url,
            title=title,
            negative_tags=negative_tags,
            tags=tags,
            vocal_gender=vocal_gender,
            style_weight=style_weight,
            weirdness_constraint=weirdness_constraint,
            audio_weight=audio_weight,
            model=model,
        )
        async with open_tools(ctx) as tools:
            return await tools.add_instrumental(request, wait_for_completion)

    @mcp.tool(description=GET_GENERATION_STATUS_DESCRIPTION)
    async def suno_get_generation_status(task_id: str) -> str:
        async with open_tools() as tools:
            return await tools.get_generation_status(task_id)

    @mcp.tool(description=CHECK_CREDITS_DESCRIPTION)
    async def suno_check_credits() -> str:
        async with open_tools() as tools:
            return await tools.check_credits()

    return mcp


def main() -> None:
    try:
        settings = load_settings()
    except ConfigurationError as e:
        configure_logging()
        logger.critical(f"{e}")
        sys.exit(1)

    configure_logging(settings.log_level)
    logger.info("Starting Suno MCP server on stdio")
    create_server(settings).run()


if __name__ == "__main__":
    main()
