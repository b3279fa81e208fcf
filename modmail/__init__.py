"""Modmail — relays Discord DMs into staff ticket channels and back."""

from modmail.config import ConfigError, ModmailConfig, __version__
from modmail.domain.router import MessageRouter
from modmail.domain.registry import TicketRegistry
from modmail.infrastructure.log_writer import LogWriter
from modmail.ports.inbound import IncomingMessage

__all__ = [
    "__version__",
    "ConfigError",
    "ModmailConfig",
    "MessageRouter",
    "TicketRegistry",
    "LogWriter",
    "IncomingMessage",
]
