"""Domain layer — pure Python, no framework dependencies."""

from modmail.domain.models import ChannelInfo, EmbedSpec, LogEntry, Ticket
from modmail.domain.registry import TicketRegistry
from modmail.domain.tickets import (
    channel_name_for,
    is_close_command,
    is_ticket_channel,
    owner_from_topic,
    topic_for,
)

__all__ = [
    "ChannelInfo",
    "EmbedSpec",
    "LogEntry",
    "Ticket",
    "TicketRegistry",
    "channel_name_for",
    "is_close_command",
    "is_ticket_channel",
    "owner_from_topic",
    "topic_for",
]
