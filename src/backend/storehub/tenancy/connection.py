"""
Per-tenant database handles.

A TenantConnection wraps one mongoengine connection alias pointing at the tenant's own
database, together with the entity accessors bound to it. MongoConnectionOpener creates
them; it is blocking and is driven from the registry through a worker thread.
"""

import itertools
import threading
import time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from mongoengine.connection import connect, disconnect, get_db

from storehub.core.config import settings
from storehub.exceptions import ConnectionFailed, DuplicateRegistration
from storehub.utils.logger import get_logger

from .listeners import TenantConnectionListener

logger = get_logger(__name__)


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    READY = "ready"
    ERRORED = "errored"
    CLOSED = "closed"


def tenant_alias(tenant_id: str, attempt: Optional[int] = None) -> str:
    if attempt is None:
        return f"tenant:{tenant_id}"
    return f"tenant:{tenant_id}:{attempt}"


def tenant_db_name(tenant_id: str, prefix: Optional[str] = None) -> str:
    return f"{settings.TENANT_DB_PREFIX if prefix is None else prefix}{tenant_id}"


class TenantConnection:
    def __init__(self, tenant_id: str, alias: str, db_name: str, clock: Callable[[], float] = time.monotonic):
        self.tenant_id = tenant_id
        self.alias = alias
        self.db_name = db_name
        self.client = None
        self.db = None
        self.state = ConnectionState.CONNECTING
        self._clock = clock
        self.created_at = clock()
        self.last_used_at = self.created_at
        self._entities: Dict[str, Any] = {}
        self._entities_lock = threading.Lock()
        # Requests currently holding the connection, see acquire/release
        self._users = 0
        self._retired = False
        self._on_released: Optional[Callable[["TenantConnection"], None]] = None
        self._users_lock = threading.Lock()

    def __repr__(self):
        return f"<TenantConnection {self.tenant_id} db={self.db_name} state={self.state.value}>"

    @property
    def is_ready(self) -> bool:
        return self.state == ConnectionState.READY

    def attach(self, client, db):
        self.client = client
        self.db = db
        self.state = ConnectionState.READY

    def touch(self):
        self.last_used_at = self._clock()

    def idle_for(self) -> float:
        return self._clock() - self.last_used_at

    def mark_ready(self):
        if self.state in (ConnectionState.CONNECTING, ConnectionState.ERRORED) and self.db is not None:
            self.state = ConnectionState.READY

    def mark_errored(self):
        if self.state != ConnectionState.CLOSED:
            self.state = ConnectionState.ERRORED

    def mark_closed(self):
        self.state = ConnectionState.CLOSED

    @property
    def in_use(self) -> bool:
        return self._users > 0

    def acquire(self) -> bool:
        """Registers a user of the connection. Returns False once the connection is retired or closed."""
        with self._users_lock:
            if self._retired or self.state == ConnectionState.CLOSED:
                return False
            self._users += 1
            return True

    def release(self):
        with self._users_lock:
            self._users -= 1
            callback = self._on_released if self._users == 0 else None
            if callback is not None:
                self._on_released = None
        if callback is not None:
            callback(self)

    def retire(self, on_released: Callable[["TenantConnection"], None]) -> bool:
        """
        Stops new users from acquiring the connection. Returns True when requests still hold it;
        on_released is then called by the last release. Returns False when it can be closed now.
        """
        with self._users_lock:
            self._retired = True
            if self._users == 0:
                return False
            self._on_released = on_released
            return True

    def collection(self, name: str):
        if self.db is None:
            raise ConnectionFailed(self.tenant_id, "connection is not open")
        return self.db[name]

    def register_entity(self, kind: str, accessor):
        """Registers an accessor for an entity kind. Registering the same kind twice is an error."""
        with self._entities_lock:
            if kind in self._entities:
                raise DuplicateRegistration(kind, self.tenant_id)
            self._entities[kind] = accessor
        return accessor

    def registered_entity(self, kind: str):
        return self._entities.get(kind)

    def registered_kinds(self) -> List[str]:
        return list(self._entities)


class MongoConnectionOpener:
    """Opens tenant databases as mongoengine connection aliases."""

    def __init__(
        self,
        host: Optional[str] = None,
        db_prefix: Optional[str] = None,
        max_pool_size: Optional[int] = None,
        server_selection_timeout_ms: Optional[int] = None,
        socket_timeout_ms: Optional[int] = None,
        **client_options,
    ):
        self.host = host or settings.TENANT_DB_URI
        self.db_prefix = settings.TENANT_DB_PREFIX if db_prefix is None else db_prefix
        self.max_pool_size = max_pool_size or settings.TENANT_DB_MAX_POOL_SIZE
        self.server_selection_timeout_ms = server_selection_timeout_ms or settings.TENANT_DB_SERVER_SELECTION_TIMEOUT_MS
        self.socket_timeout_ms = socket_timeout_ms or settings.TENANT_DB_SOCKET_TIMEOUT_MS
        # Extra MongoClient options, e.g. mongo_client_class for an in-memory client
        self.client_options = client_options
        self._attempts = itertools.count(1)

    def open(self, tenant_id: str) -> TenantConnection:
        # Every attempt gets its own alias: closing a late or replaced attempt must never
        # disconnect the client that took its place
        alias = tenant_alias(tenant_id, next(self._attempts))
        db_name = tenant_db_name(tenant_id, self.db_prefix)
        connection = TenantConnection(tenant_id=tenant_id, alias=alias, db_name=db_name)

        try:
            client = connect(
                db=db_name,
                alias=alias,
                host=self.host,
                maxPoolSize=self.max_pool_size,
                serverSelectionTimeoutMS=self.server_selection_timeout_ms,
                socketTimeoutMS=self.socket_timeout_ms,
                uuidRepresentation="standard",
                event_listeners=[TenantConnectionListener(connection)],
                **self.client_options,
            )
            # Blocks until a server is selected or serverSelectionTimeoutMS elapses
            client.server_info()
        except Exception as e:
            logger.error(f"Tenant DB connection error for {tenant_id}: {e}")
            disconnect(alias)
            raise ConnectionFailed(tenant_id, str(e)) from e

        connection.attach(client, get_db(alias))
        logger.info(f"Tenant DB connected: {tenant_id} ({db_name})")
        return connection

    def close(self, connection: TenantConnection):
        disconnect(connection.alias)
        connection.mark_closed()
        logger.info(f"Closed tenant DB connection: {connection.tenant_id}")
