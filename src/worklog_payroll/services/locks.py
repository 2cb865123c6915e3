"""Per-employee serialization of disbursements within one process."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from uuid import UUID


@dataclass
class _Entry:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    holders: int = 0


class EmployeeLocks:
    """Registry of one ``asyncio.Lock`` per employee id.

    Cross-process protection comes from the compare-and-swap in
    ``RecordStore.record_disbursement``; this only avoids losing that
    race needlessly between requests served by the same process.

    An entry lives only while some task holds or waits for it, so the
    registry does not grow with every id ever disbursed.
    """

    def __init__(self) -> None:
        self._entries: dict[UUID, _Entry] = {}

    @asynccontextmanager
    async def hold(self, employee_id: UUID) -> AsyncIterator[None]:
        entry = self._entries.get(employee_id)
        if entry is None:
            entry = self._entries[employee_id] = _Entry()
        entry.holders += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.holders -= 1
            if entry.holders == 0:
                del self._entries[employee_id]

    def is_held(self, employee_id: UUID) -> bool:
        entry = self._entries.get(employee_id)
        return entry is not None and entry.lock.locked()

    def __len__(self) -> int:
        return len(self._entries)
