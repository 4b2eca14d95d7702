from typing import List, Optional

from pydantic import BaseModel

from suno_mcp.models import (
    Completed,
    LyricsVariant,
    PollingFailed,
    PollOutcome,
    StatusFamily,
    StatusResponse,
    TaskFailed,
    TimedOut,
    Track,
)
from suno_mcp.suno_client import SunoApiError

STATUS_HINT = "Check status with: suno_get_generation_status"
CREDITS_HINT = "Check balance with: suno_check_credits"


class Operation(BaseModel):
    """Wording and layout of one task-producing tool's results"""

    name: str
    noun: str
    headline: str
    timeout_key: str
    item_label: str = "Track"
    show_duration: bool = False
    show_tags: bool = False
    started_note: Optional[str] = None


GENERATE_MUSIC = Operation(
    name="suno_generate_music",
    noun="Generation",
    headline="Music generated successfully!",
    timeout_key="music_generation",
    show_duration=True,
    show_tags=True,
)
EXTEND_MUSIC = Operation(
    name="suno_extend_music",
    noun="Extension",
    headline="Music extended successfully!",
    timeout_key="music_extension",
    show_duration=True,
)
SEPARATE_VOCALS = Operation(
    name="suno_separate_vocals",
    noun="Separation",
    headline="Vocal separation completed!",
    timeout_key="vocal_separation",
)
CONVERT_TO_WAV = Operation(
    name="suno_convert_to_wav",
    noun="Conversion",
    headline="WAV conversion completed!",
    timeout_key="wav_conversion",
)
GENERATE_LYRICS = Operation(
    name="suno_generate_lyrics",
    noun="Lyrics generation",
    headline="Lyrics generated successfully!",
    timeout_key="lyrics_generation",
    item_label="Lyrics",
)
CREATE_MUSIC_VIDEO = Operation(
    name="suno_create_music_video",
    noun="Video creation",
    headline="Music video created!",
    timeout_key="video_creation",
    item_label="Video",
    started_note="Note: Video creation is slow.",
)
ADD_VOCALS = Operation(
    name="suno_add_vocals",
    noun="Vocal addition",
    headline="Vocals added successfully!",
    timeout_key="add_vocals",
)
ADD_INSTRUMENTAL = Operation(
    name="suno_add_instrumental",
    noun="Instrumental addition",
    headline="Instrumental added successfully!",
    timeout_key="add_instrumental",
)


def _format_track(index: int, track: Track, operation: Operation) -> str:
    title = track.title or "Untitled"
    if operation.item_label == "Video":
        return f"Video {index}: {title}\n  URL: {track.video_url or track.audio_url}"

    lines = [f"{operation.item_label} {index}: {title}"]
    if track.audio_url:
        lines.append(f"  Audio: {track.audio_url}")
    if operation.show_duration and track.duration is not None:
        lines.append(f"  Duration: {track.duration:g}s")
    if operation.show_tags and track.tags:
        lines.append(f"  Tags: {track.tags}")
    return "\n".join(lines)


def _format_lyrics(index: int, variant: LyricsVariant) -> str:
    return f"Lyrics {index}: {variant.title or 'Untitled'}\n\n{variant.text}"


def format_items(status: StatusResponse, operation: Operation) -> List[str]:
    blocks = [_format_lyrics(i, v) for i, v in enumerate(status.lyrics, start=1)]
    blocks.extend(
        _format_track(i, t, operation) for i, t in enumerate(status.tracks, start=1)
    )
    if status.video_url:
        blocks.append(f"Video: {status.video_url}")
    return blocks


def render_outcome(outcome: PollOutcome, operation: Operation) -> str:
    if isinstance(outcome, Completed):
        blocks = format_items(outcome.status, operation)
        if not blocks:
            return f"✅ {operation.noun} completed. Task ID: {outcome.status.task_id}"
        return f"✅ {operation.headline}\n\n" + "\n\n".join(blocks)

    if isinstance(outcome, TimedOut):
        return (
            f"⏳ {operation.noun} in progress. Task ID: {outcome.task_id}\n\n{STATUS_HINT}"
        )

    if isinstance(outcome, PollingFailed):
        return f"❌ {operation.noun} failed: {outcome.reason}"

    if isinstance(outcome, TaskFailed):
        reason = outcome.status.error_message or "Unknown error"
        return f"❌ {operation.noun} failed: {reason}"

    raise TypeError(f"Unknown poll outcome: {outcome!r}")


def render_started(task_id: str, operation: Operation) -> str:
    note = f"{operation.started_note} " if operation.started_note else ""
    return f"✅ {operation.noun} started. Task ID: {task_id}\n\n{note}{STATUS_HINT}"


def render_status(status: StatusResponse) -> str:
    """Single status lookup, as returned by suno_get_generation_status"""
    if status.family is StatusFamily.success and status.has_payload:
        blocks = format_items(status, GENERATE_MUSIC)
        return "✅ Task completed successfully!\n\n" + "\n\n".join(blocks)

    if status.family is StatusFamily.failed:
        return f"❌ Task failed: {status.error_message or 'Unknown error'}"

    return f"📊 Task Status: {status.status}\n\nTask ID: {status.task_id}"


def render_api_error(error: SunoApiError, noun: str = "Request") -> str:
    if error.insufficient_credits:
        return f"❌ Insufficient credits. {CREDITS_HINT}"
    if error.status is None:
        return f"❌ Network Error: {error.message}"
    if error.status == 400:
        return f"❌ Invalid parameters: {error.message}"
    if error.status == 401:
        return "❌ Authentication failed: check SUNO_API_KEY"
    if error.status == 404:
        return f"❌ {noun} target not found: {error.message}"
    if error.status == 409:
        return f"❌ Resource already exists: {error.message}"
    if error.status == 413:
        return "❌ Text too long: Check character limits for prompt/style/title"
    if error.status == 430:
        return "❌ Rate limit exceeded. Wait 10 seconds and retry"
    return f"❌ API Error {error.status}: {error.message}"
