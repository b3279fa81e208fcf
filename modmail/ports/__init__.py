"""Port interfaces (Hexagonal Architecture)."""

from modmail.ports.inbound import IncomingMessage
from modmail.ports.outbound import ChatGatewayPort, GatewayError, LogStorePort

__all__ = [
    "IncomingMessage",
    "ChatGatewayPort",
    "GatewayError",
    "LogStorePort",
]
