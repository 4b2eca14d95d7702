from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TaskStatus(str, Enum):
    pending = "PENDING"
    text_success = "TEXT_SUCCESS"
    first_success = "FIRST_SUCCESS"
    success = "SUCCESS"
    create_task_failed = "CREATE_TASK_FAILED"
    generate_audio_failed = "GENERATE_AUDIO_FAILED"


class StatusFamily(str, Enum):
    pending = "pending"
    success = "success"
    failed = "failed"


# New failure statuses from the service have to be listed here explicitly;
# anything unrecognised is polled as still pending.
FAILED_STATUSES = frozenset(
    {
        TaskStatus.create_task_failed.value,
        TaskStatus.generate_audio_failed.value,
    }
)


def status_family(status: str) -> StatusFamily:
    if status == TaskStatus.success.value:
        return StatusFamily.success
    if status in FAILED_STATUSES:
        return StatusFamily.failed
    return StatusFamily.pending


def _as_list(value) -> list:
    return value if isinstance(value, list) else []


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class Track(_CamelModel):
    id: Optional[str] = None
    title: Optional[str] = None
    audio_url: Optional[str] = None
    stream_audio_url: Optional[str] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    tags: Optional[str] = None
    duration: Optional[float] = None


class LyricsVariant(_CamelModel):
    title: Optional[str] = None
    text: str = ""


class StatusResponse(BaseModel):
    task_id: str
    status: str
    tracks: List[Track] = Field(default_factory=list)
    lyrics: List[LyricsVariant] = Field(default_factory=list)
    video_url: Optional[str] = None
    error_message: Optional[str] = None
    raw_response: dict = Field(default_factory=dict)
    elapsed_time: float = 0.0

    @property
    def family(self) -> StatusFamily:
        return status_family(self.status)

    @property
    def has_payload(self) -> bool:
        return bool(self.tracks or self.lyrics or self.video_url)

    @classmethod
    def from_payload(
        cls, data: dict, task_id: str = "", elapsed_time: float = 0.0
    ) -> "StatusResponse":
        """Build a StatusResponse from the ``data`` object of a record-info reply"""
        response = data.get("response") or {}
        if not isinstance(response, dict):
            response = {}

        tracks = [
            Track.model_validate(t)
            for t in _as_list(response.get("sunoData"))
            if isinstance(t, dict)
        ]
        lyrics = [
            LyricsVariant.model_validate(item)
            for item in _as_list(response.get("lyricsData"))
            or _as_list(response.get("data"))
            if isinstance(item, dict) and item.get("text")
        ]

        return cls(
            task_id=data.get("taskId") or task_id,
            status=str(data.get("status") or TaskStatus.pending.value),
            tracks=tracks,
            lyrics=lyrics,
            video_url=response.get("videoUrl"),
            error_message=data.get("errorMessage"),
            raw_response=data,
            elapsed_time=elapsed_time,
        )


class Completed(BaseModel):
    kind: Literal["completed"] = "completed"
    status: StatusResponse


class TaskFailed(BaseModel):
    kind: Literal["failed"] = "failed"
    status: StatusResponse


class TimedOut(BaseModel):
    kind: Literal["timed_out"] = "timed_out"
    task_id: str


class PollingFailed(BaseModel):
    kind: Literal["polling_failed"] = "polling_failed"
    task_id: str
    reason: str


PollOutcome = Union[Completed, TaskFailed, TimedOut, PollingFailed]


class GenerateMusicRequest(_CamelModel):
    custom_mode: bool
    instrumental: bool
    model: str
    prompt: Optional[str] = None
    style: Optional[str] = None
    title: Optional[str] = None
    persona_id: Optional[str] = None
    negative_tags: Optional[str] = None
    vocal_gender: Optional[str] = None
    style_weight: Optional[float] = None
    weirdness_constraint: Optional[float] = None
    audio_weight: Optional[float] = None


class ExtendMusicRequest(_CamelModel):
    default_param_flag: bool
    audio_id: str
    model: str
    prompt: Optional[str] = None
    style: Optional[str] = None
    title: Optional[str] = None
    continue_at: Optional[float] = None
    persona_id: Optional[str] = None
    negative_tags: Optional[str] = None
    vocal_gender: Optional[str] = None
    style_weight: Optional[float] = None
    weirdness_constraint: Optional[float] = None
    audio_weight: Optional[float] = None


class SeparateVocalsRequest(_CamelModel):
    task_id: str
    audio_id: str
    separation_type: str = "separate_vocal"


class ConvertToWavRequest(_CamelModel):
    task_id: str
    audio_id: str


class GenerateLyricsRequest(_CamelModel):
    prompt: str


class CreateMusicVideoRequest(_CamelModel):
    task_id: str
    audio_id: str
    author: Optional[str] = None
    domain_name: Optional[str] = None


class AddVocalsRequest(_CamelModel):
    prompt: str
    title: str
    negative_tags: str
    style: str
    upload_url: str
    vocal_gender: Optional[str] = None
    style_weight: Optional[float] = None
    weirdness_constraint: Optional[float] = None
    audio_weight: Optional[float] = None
    model: str = "V4_5PLUS"


class AddInstrumentalRequest(_CamelModel):
    upload_url: str
    title: str
    negative_tags: str
    tags: str
    vocal_gender: Optional[str] = None
    style_weight: Optional[float] = None
    weirdness_constraint: Optional[float] = None
    audio_weight: Optional[float] = None
    model: str = "V4_5PLUS"
