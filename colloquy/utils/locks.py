"""In-process asyncio locks shared by the matcher, registry and engine."""

import asyncio
from collections.abc import AsyncGenerator, Hashable
from contextlib import asynccontextmanager


class AsyncReadWriteLock:
    """Multiple-readers / single-writer lock for asyncio tasks.

    Writers take priority: once a writer is waiting, new readers queue
    behind it, and the writer proceeds as soon as active readers drain.

    Usage:
        async with lock.read():
            ...
        async with lock.write():
            ...
    """

    def __init__(self) -> None:
        self._condition = asyncio.Condition()
        self._readers = 0
        self._writer_active = False
        self._writers_waiting = 0

    @property
    def readers(self) -> int:
        """Number of readers currently holding the lock."""
        return self._readers

    @property
    def writer_active(self) -> bool:
        """Whether a writer currently holds the lock."""
        return self._writer_active

    @asynccontextmanager
    async def read(self) -> AsyncGenerator[None, None]:
        """Hold the lock in shared mode."""
        async with self._condition:
            await self._condition.wait_for(
                lambda: not self._writer_active and self._writers_waiting == 0
            )
            self._readers += 1
        try:
            yield
        finally:
            async with self._condition:
                self._readers -= 1
                if self._readers == 0:
                    self._condition.notify_all()

    @asynccontextmanager
    async def write(self) -> AsyncGenerator[None, None]:
        """Hold the lock in exclusive mode."""
        async with self._condition:
            self._writers_waiting += 1
            try:
                await self._condition.wait_for(
                    lambda: not self._writer_active and self._readers == 0
                )
            finally:
                self._writers_waiting -= 1
            self._writer_active = True
        try:
            yield
        finally:
            async with self._condition:
                self._writer_active = False
                self._condition.notify_all()


class SessionMutex:
    """Per-session mutual exclusion within one process.

    Serializes read-modify-write sequences on the same session id while
    letting different sessions proceed concurrently. Locks are created on
    first use and dropped once no task holds or waits on them.
    """

    def __init__(self) -> None:
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._waiters: dict[Hashable, int] = {}

    @asynccontextmanager
    async def acquire(self, session_key: Hashable) -> AsyncGenerator[None, None]:
        """Acquire the lock for a session key."""
        lock = self._locks.setdefault(session_key, asyncio.Lock())
        self._waiters[session_key] = self._waiters.get(session_key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[session_key] -= 1
            if self._waiters[session_key] == 0:
                del self._waiters[session_key]
                del self._locks[session_key]

    def is_locked(self, session_key: Hashable) -> bool:
        """Check whether a session key is currently held."""
        lock = self._locks.get(session_key)
        return lock is not None and lock.locked()
