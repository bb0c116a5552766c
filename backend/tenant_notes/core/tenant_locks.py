# tenant_notes/core/tenant_locks.py
from __future__ import annotations

import asyncio
import weakref
from contextlib import asynccontextmanager
from typing import AsyncIterator

# One lock per tenant id; entries vanish once no coroutine holds a reference.
_locks: "weakref.WeakValueDictionary[int, asyncio.Lock]" = weakref.WeakValueDictionary()


def _lock_for(tenant_id: int) -> asyncio.Lock:
    lock = _locks.get(tenant_id)
    if lock is None:
        lock = asyncio.Lock()
        _locks[tenant_id] = lock
    return lock


@asynccontextmanager
async def tenant_write_lock(tenant_id: int) -> AsyncIterator[None]:
    """
    Serialize quota-checked writes for one tenant inside this process.

    Pair with crud.tenant.get_tenant_for_update(), which serializes across
    processes on databases that honour row locks. Commit before leaving the
    block so the next writer counts the new row.
    """
    lock = _lock_for(tenant_id)
    async with lock:
        yield
