"""Outbound ports — interfaces for external system adapters."""

from typing import List, Optional, Protocol, runtime_checkable

from modmail.domain.models import ChannelInfo, EmbedSpec, LogEntry


class GatewayError(Exception):
    """A chat platform call failed (missing object, permission, HTTP error)."""


@runtime_checkable
class ChatGatewayPort(Protocol):
    """Interface for the live chat-platform connection."""

    @property
    def user_id(self) -> Optional[int]: ...

    async def list_guild_channels(self, guild_id: int) -> List[ChannelInfo]: ...

    async def fetch_channel(self, channel_id: int) -> Optional[ChannelInfo]: ...

    async def create_text_channel(
        self, guild_id: int, name: str, parent_id: int, topic: str,
    ) -> ChannelInfo: ...

    async def send_text(self, channel_id: int, text: str) -> int: ...

    async def send_embed(self, channel_id: int, embed: EmbedSpec) -> int: ...

    async def add_reaction(self, channel_id: int, message_id: int, emoji: str) -> None: ...

    async def delete_channel(self, channel_id: int) -> None: ...

    async def open_dm(self, user_id: int) -> int: ...


@runtime_checkable
class LogStorePort(Protocol):
    """Interface for the append-only audit store."""

    async def insert(self, entry: LogEntry) -> None: ...
