"""Tests for DiscordGateway — discord.py calls mapped onto ChatGatewayPort."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from modmail.adapters.discord.gateway import DiscordGateway, to_channel_info, to_discord_embed
from modmail.domain.models import EmbedSpec
from modmail.ports.outbound import ChatGatewayPort, GatewayError


def _http_error(cls, status):
    response = MagicMock()
    response.status = status
    response.reason = "error"
    return cls(response, "error")


def _text_channel(id=5, name="ticket-bob", category_id=200, topic="Modmail ID: 11"):
    return SimpleNamespace(id=id, name=name, category_id=category_id, topic=topic)


def _make_gateway():
    client = MagicMock()
    client.user = SimpleNamespace(id=1)
    client.get_channel = MagicMock(return_value=None)
    client.fetch_channel = AsyncMock()
    client.get_guild = MagicMock(return_value=None)
    client.fetch_guild = AsyncMock()
    client.get_user = MagicMock(return_value=None)
    client.fetch_user = AsyncMock()
    return DiscordGateway(client), client


class TestConversions:
    def test_channel_info(self):
        info = to_channel_info(_text_channel())
        assert info.id == 5
        assert info.name == "ticket-bob"
        assert info.parent_id == 200
        assert info.topic == "Modmail ID: 11"

    def test_dm_channel_info_has_no_metadata(self):
        info = to_channel_info(SimpleNamespace(id=9))
        assert info.name == ""
        assert info.parent_id is None
        assert info.topic is None

    def test_embed_full(self):
        embed = to_discord_embed(EmbedSpec(
            title="💬 Staff Response",
            description="hello",
            color=0x3498DB,
            author_name="Bob",
            author_icon_url="https://cdn/a.png",
            image_url="https://cdn/i.png",
        ))
        assert isinstance(embed, discord.Embed)
        assert embed.title == "💬 Staff Response"
        assert embed.description == "hello"
        assert embed.color.value == 0x3498DB
        assert embed.author.name == "Bob"
        assert embed.author.icon_url == "https://cdn/a.png"
        assert embed.image.url == "https://cdn/i.png"

    def test_embed_minimal(self):
        embed = to_discord_embed(EmbedSpec(description="plain"))
        assert embed.description == "plain"
        assert embed.image.url is None
        assert embed.author.name is None


class TestDiscordGateway:
    def test_conforms_to_port(self):
        gateway, _ = _make_gateway()
        assert isinstance(gateway, ChatGatewayPort)

    def test_user_id(self):
        gateway, client = _make_gateway()
        assert gateway.user_id == 1
        client.user = None
        assert gateway.user_id is None

    @pytest.mark.asyncio
    async def test_fetch_channel_cached(self):
        gateway, client = _make_gateway()
        client.get_channel.return_value = _text_channel()
        info = await gateway.fetch_channel(5)
        assert info.topic == "Modmail ID: 11"
        client.fetch_channel.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fetch_channel_falls_back_to_rest(self):
        gateway, client = _make_gateway()
        client.fetch_channel.return_value = _text_channel(id=6)
        info = await gateway.fetch_channel(6)
        assert info.id == 6

    @pytest.mark.asyncio
    async def test_fetch_channel_not_found(self):
        gateway, client = _make_gateway()
        client.fetch_channel.side_effect = _http_error(discord.NotFound, 404)
        assert await gateway.fetch_channel(6) is None

    @pytest.mark.asyncio
    async def test_fetch_channel_forbidden_raises(self):
        gateway, client = _make_gateway()
        client.fetch_channel.side_effect = _http_error(discord.Forbidden, 403)
        with pytest.raises(GatewayError):
            await gateway.fetch_channel(6)

    @pytest.mark.asyncio
    async def test_list_guild_channels_from_cache(self):
        gateway, client = _make_gateway()
        guild = MagicMock()
        guild.channels = [_text_channel(id=1), _text_channel(id=2, topic=None)]
        client.get_guild.return_value = guild

        infos = await gateway.list_guild_channels(100)

        assert [i.id for i in infos] == [1, 2]

    @pytest.mark.asyncio
    async def test_list_guild_channels_fetches_uncached_guild(self):
        gateway, client = _make_gateway()
        guild = MagicMock()
        guild.channels = []
        guild.fetch_channels = AsyncMock(return_value=[_text_channel(id=3)])
        client.fetch_guild.return_value = guild

        infos = await gateway.list_guild_channels(100)

        assert [i.id for i in infos] == [3]

    @pytest.mark.asyncio
    async def test_create_text_channel(self):
        gateway, client = _make_gateway()
        category = MagicMock(spec=discord.CategoryChannel)
        guild = MagicMock()
        guild.get_channel = MagicMock(return_value=category)
        guild.create_text_channel = AsyncMock(return_value=_text_channel(id=7))
        client.get_guild.return_value = guild

        info = await gateway.create_text_channel(100, "ticket-bob", 200, "Modmail ID: 11")

        assert info.id == 7
        guild.create_text_channel.assert_awaited_once_with(
            "ticket-bob", category=category, topic="Modmail ID: 11",
        )

    @pytest.mark.asyncio
    async def test_create_text_channel_missing_category(self):
        gateway, client = _make_gateway()
        guild = MagicMock()
        guild.get_channel = MagicMock(return_value=None)
        client.get_guild.return_value = guild
        with pytest.raises(GatewayError):
            await gateway.create_text_channel(100, "ticket-bob", 200, "Modmail ID: 11")

    @pytest.mark.asyncio
    async def test_create_text_channel_fetches_uncached_category(self):
        gateway, client = _make_gateway()
        category = MagicMock(spec=discord.CategoryChannel)
        guild = MagicMock()
        guild.get_channel = MagicMock(return_value=None)
        guild.create_text_channel = AsyncMock(return_value=_text_channel(id=7))
        client.fetch_guild.return_value = guild
        client.fetch_channel.return_value = category

        info = await gateway.create_text_channel(100, "ticket-bob", 200, "Modmail ID: 11")

        assert info.id == 7
        client.fetch_channel.assert_awaited_once_with(200)
        guild.create_text_channel.assert_awaited_once_with(
            "ticket-bob", category=category, topic="Modmail ID: 11",
        )

    @pytest.mark.asyncio
    async def test_create_text_channel_unknown_category(self):
        gateway, client = _make_gateway()
        guild = MagicMock()
        guild.get_channel = MagicMock(return_value=None)
        guild.create_text_channel = AsyncMock()
        client.get_guild.return_value = guild
        client.fetch_channel.side_effect = _http_error(discord.NotFound, 404)

        with pytest.raises(GatewayError):
            await gateway.create_text_channel(100, "ticket-bob", 200, "Modmail ID: 11")
        guild.create_text_channel.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_send_embed_returns_message_id(self):
        gateway, client = _make_gateway()
        channel = MagicMock()
        channel.send = AsyncMock(return_value=SimpleNamespace(id=42))
        client.get_channel.return_value = channel

        message_id = await gateway.send_embed(5, EmbedSpec(description="hi"))

        assert message_id == 42
        sent_embed = channel.send.call_args.kwargs["embed"]
        assert sent_embed.description == "hi"

    @pytest.mark.asyncio
    async def test_send_text_forbidden(self):
        gateway, client = _make_gateway()
        channel = MagicMock()
        channel.send = AsyncMock(side_effect=_http_error(discord.Forbidden, 403))
        client.get_channel.return_value = channel
        with pytest.raises(GatewayError):
            await gateway.send_text(5, "hello")

    @pytest.mark.asyncio
    async def test_send_to_unknown_channel(self):
        gateway, client = _make_gateway()
        client.fetch_channel.side_effect = _http_error(discord.NotFound, 404)
        with pytest.raises(GatewayError):
            await gateway.send_text(5, "hello")

    @pytest.mark.asyncio
    async def test_add_reaction(self):
        gateway, client = _make_gateway()
        partial = MagicMock()
        partial.add_reaction = AsyncMock()
        channel = MagicMock()
        channel.get_partial_message = MagicMock(return_value=partial)
        client.get_channel.return_value = channel

        await gateway.add_reaction(5, 42, "✅")

        channel.get_partial_message.assert_called_once_with(42)
        partial.add_reaction.assert_awaited_once_with("✅")

    @pytest.mark.asyncio
    async def test_delete_channel(self):
        gateway, client = _make_gateway()
        channel = MagicMock()
        channel.delete = AsyncMock()
        client.get_channel.return_value = channel
        await gateway.delete_channel(5)
        channel.delete.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_open_dm_creates_channel(self):
        gateway, client = _make_gateway()
        user = MagicMock()
        user.dm_channel = None
        user.create_dm = AsyncMock(return_value=SimpleNamespace(id=9))
        client.fetch_user.return_value = user

        assert await gateway.open_dm(11) == 9

    @pytest.mark.asyncio
    async def test_open_dm_reuses_existing(self):
        gateway, client = _make_gateway()
        user = MagicMock()
        user.dm_channel = SimpleNamespace(id=8)
        user.create_dm = AsyncMock()
        client.get_user.return_value = user

        assert await gateway.open_dm(11) == 8
        user.create_dm.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_open_dm_unknown_user(self):
        gateway, client = _make_gateway()
        client.fetch_user.side_effect = _http_error(discord.NotFound, 404)
        with pytest.raises(GatewayError):
            await gateway.open_dm(11)
