"""Reader/writer lock for asyncio tasks."""

import asyncio
from contextlib import asynccontextmanager


class ReadWriteLock:
    """
    Many concurrent readers or a single writer.

    A waiting writer blocks new readers, so a steady stream of reads
    cannot starve a config replacement.
    """

    def __init__(self):
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer_active = False
        self._writers_waiting = 0

    @asynccontextmanager
    async def read(self):
        async with self._cond:
            await self._cond.wait_for(
                lambda: not self._writer_active and self._writers_waiting == 0
            )
            self._readers += 1
        try:
            yield
        finally:
            async with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @asynccontextmanager
    async def write(self):
        async with self._cond:
            self._writers_waiting += 1
            try:
                await self._cond.wait_for(
                    lambda: not self._writer_active and self._readers == 0
                )
            finally:
                self._writers_waiting -= 1
                # Readers parked behind a cancelled writer must re-check
                self._cond.notify_all()
            self._writer_active = True
        try:
            yield
        finally:
            async with self._cond:
                self._writer_active = False
                self._cond.notify_all()
