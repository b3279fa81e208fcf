"""Discord implementation of ChatGatewayPort."""

from typing import List, Optional, Union

import discord

from modmail.domain.models import ChannelInfo, EmbedSpec
from modmail.ports.outbound import GatewayError

Messageable = Union[discord.TextChannel, discord.DMChannel, discord.Thread]


def to_channel_info(channel) -> ChannelInfo:
    """Convert a discord.py channel object to ChannelInfo."""
    return ChannelInfo(
        id=channel.id,
        name=getattr(channel, "name", None) or "",
        parent_id=getattr(channel, "category_id", None),
        topic=getattr(channel, "topic", None),
    )


def to_discord_embed(spec: EmbedSpec) -> discord.Embed:
    embed = discord.Embed(
        title=spec.title,
        description=spec.description,
        color=spec.color,
        timestamp=spec.timestamp,
    )
    if spec.author_name:
        embed.set_author(name=spec.author_name, icon_url=spec.author_icon_url)
    if spec.image_url:
        embed.set_image(url=spec.image_url)
    return embed


class DiscordGateway:
    """ChatGatewayPort backed by a live discord.Client.

    Every discord.py failure surfaces as GatewayError so the router never
    has to know about the library's exception types.
    """

    def __init__(self, client: discord.Client):
        self._client = client

    @property
    def user_id(self) -> Optional[int]:
        return self._client.user.id if self._client.user else None

    async def _guild(self, guild_id: int) -> discord.Guild:
        guild = self._client.get_guild(guild_id)
        if guild is not None:
            return guild
        try:
            return await self._client.fetch_guild(guild_id)
        except discord.HTTPException as e:
            raise GatewayError(f"guild {guild_id} unavailable: {e}") from e

    async def _channel(self, channel_id: int):
        channel = self._client.get_channel(channel_id)
        if channel is not None:
            return channel
        try:
            return await self._client.fetch_channel(channel_id)
        except discord.HTTPException as e:
            raise GatewayError(f"channel {channel_id} unavailable: {e}") from e

    async def list_guild_channels(self, guild_id: int) -> List[ChannelInfo]:
        guild = await self._guild(guild_id)
        channels = guild.channels
        if not channels:
            try:
                channels = await guild.fetch_channels()
            except discord.HTTPException as e:
                raise GatewayError(f"listing channels of guild {guild_id} failed: {e}") from e
        return [to_channel_info(ch) for ch in channels]

    async def fetch_channel(self, channel_id: int) -> Optional[ChannelInfo]:
        """Resolve channel metadata; None when the channel does not exist."""
        channel = self._client.get_channel(channel_id)
        if channel is None:
            try:
                channel = await self._client.fetch_channel(channel_id)
            except discord.NotFound:
                return None
            except discord.HTTPException as e:
                raise GatewayError(f"fetching channel {channel_id} failed: {e}") from e
        return to_channel_info(channel)

    async def create_text_channel(
        self, guild_id: int, name: str, parent_id: int, topic: str,
    ) -> ChannelInfo:
        guild = await self._guild(guild_id)
        category = guild.get_channel(parent_id)
        if category is None:
            # Guilds fetched over REST carry no channel cache
            try:
                category = await self._client.fetch_channel(parent_id)
            except discord.HTTPException as e:
                raise GatewayError(f"category {parent_id} unavailable: {e}") from e
        if not isinstance(category, discord.CategoryChannel):
            raise GatewayError(f"category {parent_id} not found in guild {guild_id}")
        try:
            channel = await guild.create_text_channel(name, category=category, topic=topic)
        except discord.HTTPException as e:
            raise GatewayError(f"creating channel {name!r} failed: {e}") from e
        return to_channel_info(channel)

    async def send_text(self, channel_id: int, text: str) -> int:
        channel: Messageable = await self._channel(channel_id)
        try:
            sent = await channel.send(text)
        except discord.HTTPException as e:
            raise GatewayError(f"sending to channel {channel_id} failed: {e}") from e
        return sent.id

    async def send_embed(self, channel_id: int, embed: EmbedSpec) -> int:
        channel: Messageable = await self._channel(channel_id)
        try:
            sent = await channel.send(embed=to_discord_embed(embed))
        except discord.HTTPException as e:
            raise GatewayError(f"sending embed to channel {channel_id} failed: {e}") from e
        return sent.id

    async def add_reaction(self, channel_id: int, message_id: int, emoji: str) -> None:
        channel: Messageable = await self._channel(channel_id)
        try:
            await channel.get_partial_message(message_id).add_reaction(emoji)
        except discord.HTTPException as e:
            raise GatewayError(f"reacting to message {message_id} failed: {e}") from e

    async def delete_channel(self, channel_id: int) -> None:
        channel = await self._channel(channel_id)
        try:
            await channel.delete(reason="Modmail ticket closed")
        except discord.HTTPException as e:
            raise GatewayError(f"deleting channel {channel_id} failed: {e}") from e

    async def open_dm(self, user_id: int) -> int:
        user = self._client.get_user(user_id)
        try:
            if user is None:
                user = await self._client.fetch_user(user_id)
            dm = user.dm_channel or await user.create_dm()
        except discord.HTTPException as e:
            raise GatewayError(f"opening DM with user {user_id} failed: {e}") from e
        return dm.id
