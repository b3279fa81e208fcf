"""MessageRouter — relays DMs into ticket channels and staff replies back.

Pure routing logic, no discord import. Talks to the platform through
ChatGatewayPort and hands audit entries to a LogWriter.
"""

import sys
from datetime import datetime, timezone
from typing import Optional

from modmail.domain.models import (
    SENDER_STAFF,
    SENDER_USER,
    ChannelInfo,
    EmbedSpec,
    LogEntry,
    Ticket,
)
from modmail.domain.registry import TicketRegistry
from modmail.domain.tickets import (
    channel_name_for,
    is_close_command,
    is_ticket_channel,
    owner_from_topic,
    topic_for,
)
from modmail.infrastructure.log_writer import LogWriter
from modmail.ports.inbound import IncomingMessage
from modmail.ports.outbound import ChatGatewayPort, GatewayError

COLOR_GREEN = 0x2ECC71
COLOR_BLUE = 0x3498DB

INBOX_REACTION = "📩"
DELIVERED_REACTION = "✅"
CLOSED_NOTICE = "🔒 Your ticket has been closed."
DELIVERY_FAILED_NOTICE = "❌ Failed to send DM (DMs might be closed)."


def _log(msg: str):
    print(msg, file=sys.stderr)


class MessageRouter:
    """Routes each inbound message by origin.

    Handles:
    - Direct message: find or create the user's ticket channel, forward into it
    - Ticket channel message: forward to the owner by DM, or close the ticket
    """

    def __init__(
        self,
        gateway: ChatGatewayPort,
        log_writer: LogWriter,
        staff_guild_id: int,
        category_id: int,
        registry: Optional[TicketRegistry] = None,
    ):
        self._gateway = gateway
        self._log_writer = log_writer
        self.staff_guild_id = staff_guild_id
        self.category_id = category_id
        self.registry = registry or TicketRegistry()

    async def handle(self, msg: IncomingMessage):
        if msg.author_id == self._gateway.user_id:
            return
        if msg.is_direct:
            await self._handle_direct(msg)
        elif msg.guild_id == self.staff_guild_id:
            await self._handle_staff(msg)

    # -- User → staff --

    async def _handle_direct(self, msg: IncomingMessage):
        async with self.registry.locked(msg.author_id):
            try:
                ticket = await self._find_ticket(msg.author_id)
            except GatewayError as e:
                _log(f"[router] ticket lookup for user={msg.author_id} failed: {e}")
                return
            if ticket is None:
                ticket = await self._open_ticket(msg)
                if ticket is None:
                    return

            embed = EmbedSpec(
                description=msg.content,
                color=COLOR_GREEN,
                author_name=msg.author_name,
                author_icon_url=msg.author_avatar_url,
                image_url=msg.first_attachment,
            )
            try:
                forwarded_id = await self._gateway.send_embed(ticket.channel_id, embed)
            except GatewayError as e:
                _log(f"[router] forward to ticket ch={ticket.channel_id} failed: {e}")
                return

        await self._best_effort(
            self._gateway.add_reaction(ticket.channel_id, forwarded_id, INBOX_REACTION),
            "inbox reaction",
        )
        self._record(str(msg.author_id), msg, SENDER_USER)

    async def _find_ticket(self, user_id: int) -> Optional[Ticket]:
        """Registry first, then a topic scan of the staff guild.

        Raises GatewayError when the staff guild cannot be listed.
        """
        ticket = self.registry.get(user_id)
        if ticket is not None:
            try:
                channel = await self._gateway.fetch_channel(ticket.channel_id)
            except GatewayError as e:
                # Only a confirmed miss evicts; keep the mapping on transient errors.
                _log(f"[router] checking ticket ch={ticket.channel_id} failed: {e}")
                return ticket
            if channel is not None:
                return ticket
            _log(f"[router] ticket ch={ticket.channel_id} for user={user_id} is gone, evicting")
            self.registry.forget_channel(ticket.channel_id)

        # Listing errors propagate; an unknown channel set must never lead to a create.
        channels = await self._gateway.list_guild_channels(self.staff_guild_id)

        wanted = str(user_id)
        for channel in channels:
            if owner_from_topic(channel.topic) == wanted:
                return self.registry.register(user_id, channel.id)
        return None

    async def _open_ticket(self, msg: IncomingMessage) -> Optional[Ticket]:
        try:
            channel = await self._gateway.create_text_channel(
                self.staff_guild_id,
                name=channel_name_for(msg.author_name),
                parent_id=self.category_id,
                topic=topic_for(msg.author_id),
            )
        except GatewayError as e:
            _log(f"[router] ticket creation for user={msg.author_id} failed: {e}")
            return None

        ticket = self.registry.register(msg.author_id, channel.id)
        _log(f"[router] opened ticket #{channel.name} (ch={channel.id}) for user={msg.author_id}")

        await self._best_effort(
            self._gateway.send_embed(msg.channel_id, EmbedSpec(
                title="🎫 Ticket Created",
                description="Your message has been sent to the staff. Please wait for a response.",
                color=COLOR_GREEN,
                timestamp=datetime.now(timezone.utc),
            )),
            "ticket created notice",
        )
        await self._best_effort(
            self._gateway.send_embed(channel.id, EmbedSpec(
                title="🆕 New Ticket",
                description=f"User: <@{msg.author_id}>",
                color=COLOR_BLUE,
            )),
            "new ticket notice",
        )
        return ticket

    # -- Staff → user --

    async def _handle_staff(self, msg: IncomingMessage):
        channel = await self._resolve_channel(msg.channel_id)
        if channel is None or not is_ticket_channel(channel, self.category_id):
            return

        owner = owner_from_topic(channel.topic)
        if owner is None:
            return
        try:
            owner_id = int(owner)
        except ValueError:
            _log(f"[router] ticket ch={channel.id} has malformed owner id {owner!r}")
            return

        if is_close_command(msg.content):
            await self._close_ticket(channel, owner_id)
            return

        try:
            dm_channel_id = await self._gateway.open_dm(owner_id)
            await self._gateway.send_embed(dm_channel_id, EmbedSpec(
                title="💬 Staff Response",
                description=msg.content,
                color=COLOR_BLUE,
                image_url=msg.first_attachment,
            ))
        except GatewayError as e:
            _log(f"[router] DM to user={owner_id} failed: {e}")
            await self._best_effort(
                self._gateway.send_text(channel.id, DELIVERY_FAILED_NOTICE),
                "delivery failed notice",
            )
            return

        await self._best_effort(
            self._gateway.add_reaction(channel.id, msg.message_id, DELIVERED_REACTION),
            "delivered reaction",
        )
        self._record(owner, msg, SENDER_STAFF)

    async def _resolve_channel(self, channel_id: int) -> Optional[ChannelInfo]:
        try:
            return await self._gateway.fetch_channel(channel_id)
        except GatewayError as e:
            _log(f"[router] resolving ch={channel_id} failed: {e}")
            return None

    async def _close_ticket(self, channel: ChannelInfo, owner_id: int):
        try:
            await self._gateway.delete_channel(channel.id)
        except GatewayError as e:
            _log(f"[router] deleting ticket ch={channel.id} failed: {e}")
            return
        self.registry.forget_channel(channel.id)
        _log(f"[router] closed ticket #{channel.name} for user={owner_id}")

        try:
            dm_channel_id = await self._gateway.open_dm(owner_id)
            await self._gateway.send_text(dm_channel_id, CLOSED_NOTICE)
        except GatewayError as e:
            _log(f"[router] close notice to user={owner_id} failed: {e}")

    # -- Helpers --

    def _record(self, user_id: str, msg: IncomingMessage, sender: str):
        self._log_writer.submit(LogEntry(
            user_id=user_id,
            content=msg.content,
            sender=sender,
            has_attachment=msg.has_attachment,
        ))

    @staticmethod
    async def _best_effort(call, what: str):
        try:
            await call
        except GatewayError as e:
            _log(f"[router] {what} failed: {e}")
