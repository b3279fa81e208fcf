"""Domain data models — pure Python dataclasses."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

SENDER_USER = "user"
SENDER_STAFF = "staff"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ChannelInfo:
    """Resolved metadata of a guild channel."""

    id: int
    name: str
    parent_id: Optional[int] = None
    topic: Optional[str] = None


@dataclass
class Ticket:
    """An open per-user routing channel in the staff guild."""

    owner_user_id: int
    channel_id: int


@dataclass
class EmbedSpec:
    """Rich message content, independent of the chat library."""

    description: str = ""
    title: Optional[str] = None
    color: Optional[int] = None
    author_name: Optional[str] = None
    author_icon_url: Optional[str] = None
    image_url: Optional[str] = None
    timestamp: Optional[datetime] = None


@dataclass
class LogEntry:
    """One forwarded message, persisted for audit."""

    user_id: str
    content: str
    sender: str  # SENDER_USER or SENDER_STAFF
    has_attachment: bool
    timestamp: datetime = field(default_factory=_utcnow)

    def to_document(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "content": self.content,
            "has_file": self.has_attachment,
            "timestamp": self.timestamp,
            "sender": self.sender,
        }
