"""In-process ticket registry with per-user locking.

The registry is the source of truth for which channel belongs to which user.
Channel topics are only a cache used to repopulate it after a restart.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

from modmail.domain.models import Ticket


class TicketRegistry:
    """Maps user id → open ticket channel id."""

    def __init__(self):
        self._by_user: Dict[int, int] = {}
        self._by_channel: Dict[int, int] = {}
        self._locks: Dict[int, asyncio.Lock] = {}
        self._lock_users: Dict[int, int] = {}  # user_id → holders + waiters

    def __len__(self) -> int:
        return len(self._by_user)

    def get(self, user_id: int) -> Optional[Ticket]:
        channel_id = self._by_user.get(user_id)
        if channel_id is None:
            return None
        return Ticket(owner_user_id=user_id, channel_id=channel_id)

    def owner_of(self, channel_id: int) -> Optional[int]:
        return self._by_channel.get(channel_id)

    def register(self, user_id: int, channel_id: int) -> Ticket:
        previous = self._by_user.get(user_id)
        if previous is not None and previous != channel_id:
            self._by_channel.pop(previous, None)
        self._by_user[user_id] = channel_id
        self._by_channel[channel_id] = user_id
        return Ticket(owner_user_id=user_id, channel_id=channel_id)

    def forget_channel(self, channel_id: int) -> Optional[int]:
        """Drop a channel; returns the user it belonged to, if any."""
        user_id = self._by_channel.pop(channel_id, None)
        if user_id is not None and self._by_user.get(user_id) == channel_id:
            del self._by_user[user_id]
        return user_id

    @asynccontextmanager
    async def locked(self, user_id: int) -> AsyncIterator[None]:
        """Serialize find-or-create for one user."""
        lock = self._locks.setdefault(user_id, asyncio.Lock())
        self._lock_users[user_id] = self._lock_users.get(user_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[user_id] -= 1
            if not self._lock_users[user_id]:
                del self._lock_users[user_id]
                del self._locks[user_id]
