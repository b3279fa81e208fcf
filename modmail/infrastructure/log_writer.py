"""Best-effort background writer for audit log entries."""

import asyncio
import sys
from typing import Optional

from modmail.domain.models import LogEntry
from modmail.ports.outbound import LogStorePort


def _log(msg: str):
    print(msg, file=sys.stderr)


class LogWriter:
    """Feeds a LogStorePort from a bounded queue.

    ``submit`` never blocks the caller. When the queue is full the new
    entry is dropped and counted. Store failures are logged and not retried.
    """

    def __init__(self, store: LogStorePort, max_queue: int = 1000):
        self._store = store
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max_queue)
        self._worker: Optional[asyncio.Task] = None
        self.dropped = 0
        self.written = 0
        self.failed = 0

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def submit(self, entry: LogEntry) -> bool:
        try:
            self._queue.put_nowait(entry)
        except asyncio.QueueFull:
            self.dropped += 1
            _log(f"[log-writer] queue full, dropped entry for user={entry.user_id} (total dropped: {self.dropped})")
            return False
        return True

    def start(self):
        if not self.running:
            self._worker = asyncio.create_task(self._run())

    async def stop(self, timeout: float = 5.0):
        """Flush queued entries for up to ``timeout`` seconds, then stop the worker."""
        if self._worker is None:
            return
        try:
            await asyncio.wait_for(self._queue.join(), timeout=timeout)
        except asyncio.TimeoutError:
            _log(f"[log-writer] shutdown timeout, {self.pending} entries not written")
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None

    async def _run(self):
        while True:
            entry = await self._queue.get()
            try:
                await self._store.insert(entry)
                self.written += 1
            except Exception as e:
                self.failed += 1
                _log(f"[log-writer] insert failed for user={entry.user_id}: {e}")
            finally:
                self._queue.task_done()
