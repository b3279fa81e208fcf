"""Inbound port — platform-agnostic message representation."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class IncomingMessage:
    """Discord-agnostic view of one inbound chat message."""

    message_id: int
    content: str
    channel_id: int
    author_id: int
    author_name: str
    guild_id: Optional[int] = None  # None for direct messages
    author_avatar_url: Optional[str] = None
    attachment_urls: List[str] = field(default_factory=list)

    @property
    def is_direct(self) -> bool:
        return self.guild_id is None

    @property
    def has_attachment(self) -> bool:
        return bool(self.attachment_urls)

    @property
    def first_attachment(self) -> Optional[str]:
        return self.attachment_urls[0] if self.attachment_urls else None
