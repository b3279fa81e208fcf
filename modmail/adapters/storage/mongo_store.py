"""MongoDB audit log adapter — implements LogStorePort."""

import sys
from typing import Optional

from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from modmail.domain.models import LogEntry


def _log(msg: str):
    print(msg, file=sys.stderr)


class StoreUnavailable(Exception):
    """Raised when the database cannot be reached or the URI is invalid at startup"""


class MongoLogStore:
    """Append-only store of LogEntry documents."""

    def __init__(
        self,
        uri: str,
        database: str = "modmail_db",
        collection: str = "messages",
        client: Optional[AsyncMongoClient] = None,
    ):
        if client is None:
            try:
                client = AsyncMongoClient(uri, tz_aware=True)
            except (ValueError, PyMongoError) as e:
                raise StoreUnavailable(f"invalid MongoDB URI: {e}") from e
        self._client = client
        self._collection = self._client[database][collection]
        self._database = database

    async def connect(self):
        """Ping the server so a bad URI fails at startup, not on first insert."""
        try:
            await self._client.admin.command("ping")
        except PyMongoError as e:
            raise StoreUnavailable(f"MongoDB unreachable: {e}") from e
        _log(f"[mongo] connected to database {self._database!r}")

    async def insert(self, entry: LogEntry) -> None:
        await self._collection.insert_one(entry.to_document())

    async def close(self):
        await self._client.close()
