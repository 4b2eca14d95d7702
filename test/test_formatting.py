from suno_mcp import formatting
from suno_mcp.models import (
    Completed,
    PollingFailed,
    StatusResponse,
    TaskFailed,
    TimedOut,
)
from suno_mcp.suno_client import SunoApiError


def success_status(**response) -> StatusResponse:
    return StatusResponse.from_payload(
        {"taskId": "t1", "status": "SUCCESS", "response": response or None}
    )


def test_completed_lists_tracks():
    status = success_status(
        sunoData=[
            {"title": "One", "audioUrl": "https://a/1.mp3", "duration": 61, "tags": "jazz"},
            {"title": "Two", "audioUrl": "https://a/2.mp3", "duration": 59.5, "tags": "jazz"},
        ]
    )

    text = formatting.render_outcome(Completed(status=status), formatting.GENERATE_MUSIC)

    assert text == (
        "✅ Music generated successfully!\n\n"
        "Track 1: One\n  Audio: https://a/1.mp3\n  Duration: 61s\n  Tags: jazz\n\n"
        "Track 2: Two\n  Audio: https://a/2.mp3\n  Duration: 59.5s\n  Tags: jazz"
    )


def test_completed_without_payload_is_generic_success():
    text = formatting.render_outcome(
        Completed(status=success_status()), formatting.SEPARATE_VOCALS
    )

    assert text == "✅ Separation completed. Task ID: t1"


def test_null_track_fields_do_not_break_rendering():
    status = success_status(sunoData=[{"title": None, "audioUrl": "https://a/1.wav", "tags": None}])

    text = formatting.render_outcome(Completed(status=status), formatting.CONVERT_TO_WAV)

    assert "Track 1: Untitled\n  Audio: https://a/1.wav" in text


def test_video_rendering():
    status = success_status(videoUrl="https://v/1.mp4")

    text = formatting.render_outcome(Completed(status=status), formatting.CREATE_MUSIC_VIDEO)

    assert text == "✅ Music video created!\n\nVideo: https://v/1.mp4"


def test_timeout_is_not_a_failure():
    text = formatting.render_outcome(TimedOut(task_id="t9"), formatting.EXTEND_MUSIC)

    assert text.startswith("⏳ Extension in progress. Task ID: t9")
    assert "❌" not in text


def test_polling_failed_includes_reason():
    outcome = PollingFailed(task_id="t1", reason="Failed after 3 consecutive API errors: 502")

    text = formatting.render_outcome(outcome, formatting.ADD_VOCALS)

    assert text == "❌ Vocal addition failed: Failed after 3 consecutive API errors: 502"


def test_task_failed_falls_back_to_unknown_error():
    status = StatusResponse(task_id="t1", status="CREATE_TASK_FAILED")

    text = formatting.render_outcome(TaskFailed(status=status), formatting.GENERATE_LYRICS)

    assert text == "❌ Lyrics generation failed: Unknown error"


def test_rendering_is_idempotent():
    outcomes = [
        Completed(status=success_status(sunoData=[{"title": "A", "audioUrl": "u"}])),
        TimedOut(task_id="t1"),
        PollingFailed(task_id="t1", reason="boom"),
        TaskFailed(status=StatusResponse(task_id="t1", status="GENERATE_AUDIO_FAILED")),
    ]

    for outcome in outcomes:
        first = formatting.render_outcome(outcome, formatting.GENERATE_MUSIC)
        second = formatting.render_outcome(outcome, formatting.GENERATE_MUSIC)
        assert first == second


def test_api_error_messages():
    assert formatting.render_api_error(SunoApiError("no", status=429)).startswith(
        "❌ Insufficient credits"
    )
    assert formatting.render_api_error(SunoApiError("reset")) == "❌ Network Error: reset"
    assert formatting.render_api_error(SunoApiError("bad", status=400)) == (
        "❌ Invalid parameters: bad"
    )
    assert formatting.render_api_error(SunoApiError("slow", status=430)).startswith(
        "❌ Rate limit exceeded"
    )
    assert formatting.render_api_error(SunoApiError("oops", status=503)) == (
        "❌ API Error 503: oops"
    )


def test_status_family_uses_explicit_failure_set():
    assert StatusResponse(task_id="t", status="SUCCESS").family.value == "success"
    assert StatusResponse(task_id="t", status="GENERATE_AUDIO_FAILED").family.value == "failed"
    assert StatusResponse(task_id="t", status="FIRST_SUCCESS").family.value == "pending"
    assert StatusResponse(task_id="t", status="BRAND_NEW_STATE").family.value == "pending"


def test_track_without_audio_url_omits_audio_line():
    status = success_status(sunoData=[{"title": "Pending stem", "audioUrl": None}])

    text = formatting.render_outcome(Completed(status=status), formatting.SEPARATE_VOCALS)

    assert text == "✅ Vocal separation completed!\n\nTrack 1: Pending stem"
    assert "None" not in text


def test_non_list_result_fields_are_ignored():
    for bogus in (7, {"title": "x"}, "text"):
        status = success_status(sunoData=bogus, lyricsData=bogus)

        assert status.tracks == []
        assert status.lyrics == []
        assert not status.has_payload
