import json
from typing import Iterable, List

from pydantic import ValidationError

from discord_mcp.channel_lookup import ResolvedChannel
from discord_mcp.models import Message, MessageView


def format_message(message: Message, where: ResolvedChannel) -> MessageView:
    return MessageView(
        author=message.author.tag,
        content=message.content,
        timestamp=message.timestamp,
        channel=where.label,
        server=where.guild.name,
        message_id=message.id,
    )


def format_messages(messages: Iterable[Message], where: ResolvedChannel) -> str:
    views = [format_message(m, where).model_dump(by_alias=True) for m in messages]
    return to_json(views)


def to_json(data: List[dict]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def describe_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        field = ".".join(str(loc) for loc in item["loc"])
        parts.append(f"{field}: {item['msg']}" if field else item["msg"])
    return "; ".join(parts)


def format_error(error) -> str:
    if isinstance(error, ValidationError):
        message = describe_validation_error(error)
    else:
        message = str(error)
    return f"❌ Error: {message}"


def format_success(message: str) -> str:
    return f"✅ {message}"


def format_info(message: str) -> str:
    return f"ℹ️ {message}"
