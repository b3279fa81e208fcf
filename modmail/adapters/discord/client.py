"""Discord client — converts discord.Message to IncomingMessage for the router."""

import sys
from typing import Optional

import discord

from modmail.domain.router import MessageRouter
from modmail.ports.inbound import IncomingMessage


def _log(msg: str):
    print(msg, file=sys.stderr)


def to_incoming(message: discord.Message) -> IncomingMessage:
    """Convert a Discord message to platform-agnostic IncomingMessage."""
    author = message.author
    avatar = getattr(author, "display_avatar", None)
    return IncomingMessage(
        message_id=message.id,
        content=message.content,
        channel_id=message.channel.id,
        author_id=author.id,
        author_name=author.name,
        guild_id=message.guild.id if message.guild else None,
        author_avatar_url=avatar.url if avatar else None,
        attachment_urls=[a.url for a in message.attachments],
    )


class ModmailClient(discord.Client):
    """Thin Discord adapter that delegates every message to MessageRouter.

    The router is attached after construction because it needs a gateway
    built around this very client.
    """

    def __init__(self, **discord_kwargs):
        intents = discord.Intents.default()
        intents.message_content = True
        intents.dm_messages = True
        intents.guild_messages = True
        intents.guilds = True
        super().__init__(intents=intents, **discord_kwargs)
        self.router: Optional[MessageRouter] = None

    async def on_ready(self):
        _log(f"[discord] logged in as {self.user}")

    async def on_message(self, message: discord.Message):
        # Ignore own messages
        if not self.user or message.author == self.user:
            return
        if self.router is None:
            return

        incoming = to_incoming(message)
        try:
            await self.router.handle(incoming)
        except Exception as e:
            _log(f"[discord] handling message {message.id} in ch={incoming.channel_id} failed: {e!r}")
