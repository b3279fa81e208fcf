"""Process wiring: startup, signal handling and shutdown."""

import asyncio
import signal
import sys
from typing import Optional

import discord

from modmail.adapters.discord.client import ModmailClient
from modmail.adapters.discord.gateway import DiscordGateway
from modmail.adapters.storage.mongo_store import MongoLogStore, StoreUnavailable
from modmail.adapters.web.health import build_server
from modmail.config import ConfigError, ModmailConfig
from modmail.domain.router import MessageRouter
from modmail.infrastructure.log_writer import LogWriter


def _log(msg: str):
    print(msg, file=sys.stderr)


def _install_signal_handlers(stop: asyncio.Event):
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            # Windows event loops have no add_signal_handler
            pass


async def serve(config: ModmailConfig, stop: Optional[asyncio.Event] = None) -> int:
    """Run the bot until a stop signal or a fatal error. Returns the exit code."""
    try:
        store = MongoLogStore(config.mongo_uri, config.mongo_db, config.mongo_collection)
    except StoreUnavailable as e:
        _log(f"[app] {e}")
        return 1
    try:
        await store.connect()
    except StoreUnavailable as e:
        _log(f"[app] {e}")
        await store.close()
        return 1

    writer = LogWriter(store, max_queue=config.log_queue_size)
    writer.start()

    client = ModmailClient()
    client.router = MessageRouter(
        DiscordGateway(client),
        writer,
        staff_guild_id=config.staff_guild_id,
        category_id=config.category_id,
    )
    server = build_server(config.port)

    if stop is None:
        stop = asyncio.Event()
        _install_signal_handlers(stop)

    exit_code = 0
    tasks = []
    try:
        try:
            await client.login(config.discord_token)
        except discord.LoginFailure as e:
            _log(f"[app] Discord login failed: {e}")
            return 1

        discord_task = asyncio.create_task(client.connect(), name="discord")
        web_task = asyncio.create_task(server.serve(), name="health")
        stop_task = asyncio.create_task(stop.wait(), name="stop")
        tasks = [discord_task, web_task, stop_task]
        _log(f"[app] Bot is live. Health check on port {config.port}.")

        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in done:
            if task is stop_task:
                _log("[app] stop signal received, shutting down")
            elif task.exception() is not None:
                _log(f"[app] {task.get_name()} stopped with error: {task.exception()!r}")
                exit_code = 1
            else:
                _log(f"[app] {task.get_name()} stopped")
    finally:
        await client.close()
        server.should_exit = True
        for task in tasks:
            if task.get_name() == "stop" and not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        await writer.stop()
        await store.close()
        _log("[app] shutdown complete")

    return exit_code


def main():
    try:
        config = ModmailConfig.from_env()
    except ConfigError as e:
        _log(f"[app] {e}")
        sys.exit(1)
    sys.exit(asyncio.run(serve(config)))


if __name__ == "__main__":
    main()
