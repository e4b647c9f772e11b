"""
Registry of live tenant connections.

One TenantConnection per tenant id, created lazily on first use and reused afterwards.
Creation is single-flight: the in-flight creation task is stored per tenant id and every
concurrent caller awaits that same task, so a burst of first requests for a new tenant
opens exactly one connection.

A connection taken out of the registry (replaced, evicted, pruned) is retired: requests
that still hold it through `using` keep a working client, and it is closed when the last
of them releases it.

The registry lives on the event loop. Lookups and the create-if-absent step never yield
between reading and writing the maps, so no lock is needed.
"""

import asyncio
from collections import OrderedDict
from contextlib import asynccontextmanager
from functools import partial
from typing import AsyncIterator, Dict, List, Optional, Protocol, Set

from storehub.exceptions import ConnectionFailed, TenantIdMissing
from storehub.utils.logger import get_logger

from .connection import TenantConnection

logger = get_logger(__name__)


class ConnectionOpener(Protocol):
    def open(self, tenant_id: str) -> TenantConnection: ...

    def close(self, connection: TenantConnection) -> None: ...


class TenantRegistry:
    def __init__(
        self,
        opener: ConnectionOpener,
        max_connections: int = 500,
        idle_timeout: float = 0,
        connect_timeout: float = 20.0,
    ):
        if max_connections < 1:
            raise ValueError("max_connections must be at least 1")
        self._opener = opener
        self._max_connections = max_connections
        self._idle_timeout = idle_timeout
        self._connect_timeout = connect_timeout
        # Least recently used first
        self._connections: "OrderedDict[str, TenantConnection]" = OrderedDict()
        self._pending: Dict[str, asyncio.Task] = {}
        # Out of the map but still held by requests
        self._retired: Set[TenantConnection] = set()
        # Close tasks started outside a caller's await; close_all waits for them
        self._background: Set[asyncio.Task] = set()

    def __contains__(self, tenant_id: str) -> bool:
        return tenant_id in self._connections

    def __len__(self) -> int:
        return len(self._connections)

    async def get_connection(self, tenant_id: str) -> TenantConnection:
        """
        Returns the ready connection for a tenant, opening it on first use.

        Raises:
            TenantIdMissing: if tenant_id is empty
            ConnectionFailed: if the database could not be opened; the failure is not cached
        """
        if not tenant_id:
            raise TenantIdMissing()

        connection = self._connections.get(tenant_id)
        if connection is not None and connection.is_ready:
            connection.touch()
            self._connections.move_to_end(tenant_id)
            logger.debug(f"Reusing existing connection for tenant: {tenant_id}")
            return connection

        creation = self._pending.get(tenant_id)
        if creation is None:
            creation = asyncio.ensure_future(self._create(tenant_id, stale=connection))
            self._pending[tenant_id] = creation
            creation.add_done_callback(partial(self._forget_pending, tenant_id))

        # A cancelled caller must not cancel the creation other callers are waiting on
        return await asyncio.shield(creation)

    @asynccontextmanager
    async def using(self, tenant_id: str) -> AsyncIterator[TenantConnection]:
        """Holds the tenant connection for the block; it is not closed underneath the holder."""
        connection = await self.get_connection(tenant_id)
        if not connection.acquire():
            # Retired between the lookup and the acquire; the registry already has its successor
            connection = await self.get_connection(tenant_id)
            if not connection.acquire():
                raise ConnectionFailed(tenant_id, "connection was retired")
        try:
            yield connection
        finally:
            connection.release()

    async def _create(self, tenant_id: str, stale: Optional[TenantConnection]) -> TenantConnection:
        if stale is not None:
            logger.info(f"Replacing {stale.state.value} connection for tenant: {tenant_id}")
            if self._connections.get(tenant_id) is stale:
                del self._connections[tenant_id]
            await self._retire(stale)

        logger.info(f"Creating new DB connection for tenant: {tenant_id}")
        opening = asyncio.ensure_future(asyncio.to_thread(self._opener.open, tenant_id))
        try:
            connection = await asyncio.wait_for(asyncio.shield(opening), timeout=self._connect_timeout)
        except asyncio.TimeoutError as e:
            self._spawn(self._close_when_opened(opening))
            logger.error(f"Timed out opening DB connection for tenant: {tenant_id}")
            raise ConnectionFailed(tenant_id, "connection timed out") from e
        except ConnectionFailed:
            raise
        except Exception as e:
            logger.error(f"Tenant DB connection error for {tenant_id}", exc_info=True)
            raise ConnectionFailed(tenant_id, str(e)) from e

        connection.touch()
        self._connections[tenant_id] = connection
        await self._evict_overflow()
        return connection

    def _forget_pending(self, tenant_id: str, task: asyncio.Task):
        if self._pending.get(tenant_id) is task:
            del self._pending[tenant_id]
        if not task.cancelled():
            # Marks the exception as retrieved even if every waiter was cancelled
            task.exception()

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    async def _close_when_opened(self, opening: asyncio.Future):
        try:
            connection = await opening
        except Exception:
            return
        logger.info(f"Closing connection opened after timeout for tenant: {connection.tenant_id}")
        await self._close_quietly(connection)

    async def _retire(self, connection: TenantConnection):
        loop = asyncio.get_running_loop()
        if connection.retire(partial(self._on_retired_released, loop)):
            self._retired.add(connection)
            logger.info(f"Deferring close of in-use connection for tenant: {connection.tenant_id}")
            return
        await self._close_quietly(connection)

    def _on_retired_released(self, loop: asyncio.AbstractEventLoop, connection: TenantConnection):
        # Called from whichever thread dropped the last user
        loop.call_soon_threadsafe(self._close_retired, connection)

    def _close_retired(self, connection: TenantConnection):
        if connection in self._retired:
            self._retired.discard(connection)
            self._spawn(self._close_quietly(connection))

    async def _evict_overflow(self):
        while len(self._connections) > self._max_connections:
            tenant_id, connection = self._connections.popitem(last=False)
            logger.info(f"Evicting least recently used connection for tenant: {tenant_id}")
            await self._retire(connection)

    async def _close_quietly(self, connection: TenantConnection):
        try:
            await asyncio.to_thread(self._opener.close, connection)
        except Exception:
            logger.warning(f"Error closing connection for tenant: {connection.tenant_id}", exc_info=True)
        connection.mark_closed()

    async def prune_idle(self) -> List[str]:
        """Closes connections unused for longer than the idle timeout. Returns the pruned tenant ids."""
        if not self._idle_timeout:
            return []

        idle = [
            tenant_id
            for tenant_id, connection in self._connections.items()
            if connection.idle_for() > self._idle_timeout and tenant_id not in self._pending
        ]
        for tenant_id in idle:
            connection = self._connections.pop(tenant_id, None)
            if connection is not None:
                logger.info(f"Closing idle connection for tenant: {tenant_id}")
                await self._retire(connection)
        return idle

    async def close(self, tenant_id: str) -> bool:
        connection = self._connections.pop(tenant_id, None)
        if connection is None:
            return False
        await self._retire(connection)
        return True

    async def close_all(self):
        """Shutdown: closes every connection, including retired ones still held by requests."""
        connections = list(self._connections.values()) + list(self._retired)
        self._connections.clear()
        self._retired.clear()
        await asyncio.gather(*(self._close_quietly(connection) for connection in connections))
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)
        logger.info(f"All tenant DB connections closed ({len(connections)})")

    def stats(self) -> dict:
        states: Dict[str, int] = {}
        for connection in self._connections.values():
            states[connection.state.value] = states.get(connection.state.value, 0) + 1
        return {
            "connections": len(self._connections),
            "pending": len(self._pending),
            "retired": len(self._retired),
            "max_connections": self._max_connections,
            "states": states,
        }


async def prune_idle_periodically(registry: TenantRegistry, interval: float):
    """Background loop started from the application lifespan."""
    while True:
        await asyncio.sleep(interval)
        try:
            await registry.prune_idle()
        except Exception:
            logger.error("Idle tenant connection pruning failed", exc_info=True)
