from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

GUILD_TEXT = 0


class _DiscordObject(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Guild(_DiscordObject):
    id: str
    name: str
    owner_id: Optional[str] = None
    approximate_member_count: Optional[int] = None


class Channel(_DiscordObject):
    id: str
    type: int
    name: Optional[str] = None
    guild_id: Optional[str] = None

    @property
    def is_text(self) -> bool:
        return self.type == GUILD_TEXT


class User(_DiscordObject):
    id: str
    username: str
    discriminator: str = "0"

    @property
    def tag(self) -> str:
        # Accounts migrated to unique usernames report discriminator "0"
        if self.discriminator and self.discriminator != "0":
            return f"{self.username}#{self.discriminator}"
        return self.username


class Message(_DiscordObject):
    id: str
    channel_id: str
    author: User
    content: str = ""
    timestamp: str


class MessageView(BaseModel):
    """A message as the tools report it"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    author: str
    content: str
    timestamp: str
    channel: str
    server: str
    message_id: str


class SendMessageParams(BaseModel):
    channel: str
    message: str = Field(min_length=1)
    server: Optional[str] = None


class ReadMessagesParams(BaseModel):
    channel: str
    limit: int = Field(default=50, ge=1, le=100)
    server: Optional[str] = None


class SearchMessagesParams(BaseModel):
    channel: str
    query: str = Field(min_length=1)
    limit: int = Field(default=50, ge=1, le=100)
    server: Optional[str] = None


class ListChannelsParams(BaseModel):
    server: Optional[str] = None
