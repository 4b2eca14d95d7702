"""Input checks for the Suno tools.

Every check returns None when the value is acceptable, or a user-facing
error message. Optional values that are absent always pass.
"""

import math
from typing import Iterable, Optional
from urllib.parse import urlparse

from suno_mcp.config import (
    OVERLAY_MODELS,
    SEPARATION_TYPES,
    VALID_MODELS,
    VALID_VOCAL_GENDERS,
    CharacterLimits,
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
)


def validate_required(name: str, value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return f"❌ Error: {name} is required"
    return None


def validate_weight(name: str, value: Optional[float]) -> Optional[str]:
    if value is None:
        return None
    if math.isnan(value) or value < 0 or value > 1:
        return f"❌ Error: {name} must be between 0.00 and 1.00"
    return None


def validate_character_limit(name: str, value: Optional[str], limit: int) -> Optional[str]:
    if not value:
        return None
    if len(value) > limit:
        return f"❌ Error: {name} exceeds {limit} character limit ({len(value)} chars)"
    return None


def validate_model(model: str, allowed: Iterable[str] = VALID_MODELS) -> Optional[str]:
    allowed = tuple(allowed)
    if model not in allowed:
        return f"❌ Error: model must be one of: {', '.join(allowed)}"
    return None


def validate_vocal_gender(gender: Optional[str]) -> Optional[str]:
    if not gender:
        return None
    if gender not in VALID_VOCAL_GENDERS:
        return "❌ Error: vocal_gender must be 'm' (male) or 'f' (female)"
    return None


def validate_url(name: str, url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        return f"❌ Error: {name} must be a valid URL"
    return None


def style_limit(model: str) -> int:
    return CharacterLimits.STYLE_V3_5 if model == "V3_5" else CharacterLimits.STYLE_V4_PLUS


def _first_error(*results: Optional[str]) -> Optional[str]:
    return next((result for result in results if result), None)


def _weights(request) -> Optional[str]:
    return _first_error(
        validate_weight("style_weight", request.style_weight),
        validate_weight("weirdness_constraint", request.weirdness_constraint),
        validate_weight("audio_weight", request.audio_weight),
        validate_vocal_gender(request.vocal_gender),
    )


def validate_generate_music(request: GenerateMusicRequest) -> Optional[str]:
    error = validate_model(request.model)
    if error:
        return error

    if request.custom_mode and request.instrumental:
        if not request.style or not request.title:
            return "❌ Error: custom_mode + instrumental requires 'style' and 'title' parameters"
    elif request.custom_mode:
        if not request.style or not request.title or not request.prompt:
            return (
                "❌ Error: custom_mode + vocals requires 'style', 'title', "
                "and 'prompt' parameters"
            )
    elif not request.prompt:
        return "❌ Error: non-custom mode requires 'prompt' parameter"

    prompt_limit = (
        CharacterLimits.PROMPT_CUSTOM_MODE
        if request.custom_mode
        else CharacterLimits.PROMPT_SIMPLE_MODE
    )
    return _first_error(
        validate_character_limit("title", request.title, CharacterLimits.TITLE),
        validate_character_limit("prompt", request.prompt, prompt_limit),
        validate_character_limit("style", request.style, style_limit(request.model)),
        validate_character_limit(
            "negative_tags", request.negative_tags, CharacterLimits.NEGATIVE_TAGS
        ),
        _weights(request),
    )


def validate_extend_music(request: ExtendMusicRequest) -> Optional[str]:
    return _first_error(
        validate_required("audio_id", request.audio_id),
        validate_model(request.model),
        validate_character_limit(
            "prompt", request.prompt, CharacterLimits.PROMPT_CUSTOM_MODE
        ),
        validate_character_limit("style", request.style, style_limit(request.model)),
        validate_character_limit("title", request.title, CharacterLimits.TITLE),
        validate_character_limit(
            "negative_tags", request.negative_tags, CharacterLimits.NEGATIVE_TAGS
        ),
        _continue_at(request.continue_at),
        _weights(request),
    )


def _continue_at(value: Optional[float]) -> Optional[str]:
    if value is not None and (math.isnan(value) or value < 0):
        return "❌ Error: continue_at must be a non-negative number of seconds"
    return None


def validate_separate_vocals(request: SeparateVocalsRequest) -> Optional[str]:
    error = _first_error(
        validate_required("task_id", request.task_id),
        validate_required("audio_id", request.audio_id),
    )
    if error:
        return error
    if request.separation_type not in SEPARATION_TYPES:
        return "❌ Error: separation_type must be 'separate_vocal' or 'split_stem'"
    return None


def validate_convert_to_wav(request: ConvertToWavRequest) -> Optional[str]:
    return _first_error(
        validate_required("task_id", request.task_id),
        validate_required("audio_id", request.audio_id),
    )


def validate_generate_lyrics(request: GenerateLyricsRequest) -> Optional[str]:
    error = validate_required("prompt", request.prompt)
    if error:
        return error

    # Rough word count, about one word per five characters
    word_estimate = math.ceil(len(request.prompt) / 5)
    if word_estimate > CharacterLimits.LYRICS_WORDS:
        return (
            f"❌ Error: prompt exceeds {CharacterLimits.LYRICS_WORDS} word limit "
            f"(estimated {word_estimate} words)"
        )
    return None


def validate_create_music_video(request: CreateMusicVideoRequest) -> Optional[str]:
    return _first_error(
        validate_required("task_id", request.task_id),
        validate_required("audio_id", request.audio_id),
        validate_character_limit("author", request.author, CharacterLimits.AUTHOR),
        validate_character_limit(
            "domain_name", request.domain_name, CharacterLimits.DOMAIN_NAME
        ),
    )


def validate_add_vocals(request: AddVocalsRequest) -> Optional[str]:
    return _first_error(
        validate_required("prompt", request.prompt),
        validate_required("title", request.title),
        validate_required("negative_tags", request.negative_tags),
        validate_required("style", request.style),
        validate_required("upload_url", request.upload_url),
        validate_model(request.model, OVERLAY_MODELS),
        validate_character_limit(
            "prompt", request.prompt, CharacterLimits.PROMPT_CUSTOM_MODE
        ),
        validate_character_limit("title", request.title, CharacterLimits.TITLE),
        validate_character_limit(
            "negative_tags", request.negative_tags, CharacterLimits.NEGATIVE_TAGS
        ),
        validate_character_limit("style", request.style, CharacterLimits.STYLE_V4_PLUS),
        validate_url("upload_url", request.upload_url),
        _weights(request),
    )


def validate_add_instrumental(request: AddInstrumentalRequest) -> Optional[str]:
    return _first_error(
        validate_required("upload_url", request.upload_url),
        validate_required("title", request.title),
        validate_required("negative_tags", request.negative_tags),
        validate_required("tags", request.tags),
        validate_model(request.model, OVERLAY_MODELS),
        validate_url("upload_url", request.upload_url),
        validate_character_limit("title", request.title, CharacterLimits.TITLE),
        validate_character_limit(
            "negative_tags", request.negative_tags, CharacterLimits.NEGATIVE_TAGS
        ),
        validate_character_limit("tags", request.tags, CharacterLimits.TAGS),
        _weights(request),
    )
