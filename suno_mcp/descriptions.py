GENERATE_MUSIC_DESCRIPTION = """
Generate AI music from a text description.

MODES:
- custom_mode=false: only `prompt` is needed (max 500 chars); lyrics and style are chosen for you.
- custom_mode=true, instrumental=true: `style` and `title` are required.
- custom_mode=true, instrumental=false: `style`, `title` and `prompt` (the lyrics, max 3000 chars) are required.

PARAMETERS:
- model: V3_5, V4, V4_5, V4_5PLUS or V5
- style: genre/style (max 200 chars for V3_5, 1000 for newer models)
- title: max 80 chars
- negative_tags: styles or traits to avoid (max 500 chars)
- vocal_gender: 'm' or 'f'
- style_weight, weirdness_constraint, audio_weight: 0.00-1.00

By default the tool waits up to 60 seconds for the tracks. If generation takes
longer it returns the task ID; use `suno_get_generation_status` to check later.
"""

EXTEND_MUSIC_DESCRIPTION = """
Extend an existing track.

- default_param_flag=true: use the custom `prompt`, `style`, `title` and `continue_at` (seconds).
- default_param_flag=false: reuse the source track's parameters.
- model must match the model of the source audio.

Waits up to 60 seconds unless wait_for_completion=false.
"""

SEPARATE_VOCALS_DESCRIPTION = """
Separate vocals from a generated track, or split it into stems.

- separation_type='separate_vocal': vocals + instrumental (1 credit)
- separation_type='split_stem': up to 12 stems (5 credits)

Needs the original generation `task_id` and the `audio_id` of the track.
"""

CONVERT_TO_WAV_DESCRIPTION = """
Convert a generated track to WAV format. Needs the generation `task_id` and the track's `audio_id`.
"""

GENERATE_LYRICS_DESCRIPTION = """
Generate song lyrics from a theme or description (max about 200 words).
Returns the generated lyric variants, ready to pass as `prompt` to `suno_generate_music` in custom mode.
"""

CREATE_MUSIC_VIDEO_DESCRIPTION = """
Create a music video for a generated track.

Video rendering is slow, so by default this returns the task ID immediately.
Pass wait_for_completion=true to wait up to 120 seconds.
- author: artist name shown in the video (max 50 chars)
- domain_name: website/brand watermark (max 50 chars)
"""

ADD_VOCALS_DESCRIPTION = """
Add sung vocals to an instrumental track.

`upload_url` must be a publicly accessible audio URL. `prompt`, `title`,
`negative_tags` and `style` are required. model is V4_5PLUS (default) or V5.
"""

ADD_INSTRUMENTAL_DESCRIPTION = """
Add instrumental backing to a vocal track.

`upload_url` must be a publicly accessible audio URL. `title`, `negative_tags`
and `tags` (desired instrumental characteristics) are required. model is
V4_5PLUS (default) or V5.
"""

GET_GENERATION_STATUS_DESCRIPTION = """
Check the status of any Suno task by its task ID (one lookup, no waiting).
Use this after a tool returned "in progress" or "started" with a task ID.
"""

CHECK_CREDITS_DESCRIPTION = """
Check the remaining credit balance of the Suno account.
"""
