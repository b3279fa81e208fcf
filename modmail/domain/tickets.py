"""Ticket channel naming and topic encoding."""

import re
from typing import Optional, Union

from modmail.domain.models import ChannelInfo

CHANNEL_PREFIX = "ticket-"
TOPIC_PREFIX = "Modmail ID: "
CLOSE_COMMAND = "!close"

_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]+")


def channel_name_for(display_name: str) -> str:
    """Build ``ticket-<name>`` from a display name, keeping only ASCII alphanumerics.

    Names made only of other characters yield a bare ``ticket-``; no
    uniqueness suffix is added since tickets are found by user id.
    """
    return CHANNEL_PREFIX + _NON_ALNUM_RE.sub("", display_name or "").lower()


def topic_for(user_id: Union[int, str]) -> str:
    return f"{TOPIC_PREFIX}{user_id}"


def owner_from_topic(topic: Optional[str]) -> Optional[str]:
    """Return the owner id embedded in a ticket topic, or None if it is not one."""
    if not topic or not topic.startswith(TOPIC_PREFIX):
        return None
    owner = topic[len(TOPIC_PREFIX):].strip()
    return owner or None


def is_ticket_channel(channel: ChannelInfo, category_id: int) -> bool:
    return channel.parent_id == category_id and channel.name.startswith(CHANNEL_PREFIX)


def is_close_command(content: str) -> bool:
    return content.lower() == CLOSE_COMMAND
