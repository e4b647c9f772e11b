"""Test doubles for the tenant connection opener."""

import threading
import time
from unittest.mock import MagicMock

from storehub.exceptions import ConnectionFailed
from storehub.tenancy import TenantConnection
from storehub.tenancy.connection import tenant_alias, tenant_db_name


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeOpener:
    """Counts opens and can simulate slow or failing databases."""

    def __init__(self, failures: int = 0, delay: float = 0.0, clock=time.monotonic):
        self.failures = failures
        self.delay = delay
        self.clock = clock
        self.opened = []
        self.closed = []
        self._lock = threading.Lock()

    def open(self, tenant_id: str) -> TenantConnection:
        with self._lock:
            self.opened.append(tenant_id)
            fail = self.failures > 0
            if fail:
                self.failures -= 1
        if self.delay:
            time.sleep(self.delay)
        if fail:
            raise ConnectionFailed(tenant_id, "simulated outage")

        connection = TenantConnection(
            tenant_id, tenant_alias(tenant_id), tenant_db_name(tenant_id, "test_"), clock=self.clock
        )
        connection.attach(client=MagicMock(), db=MagicMock())
        return connection

    def close(self, connection: TenantConnection):
        with self._lock:
            self.closed.append(connection.tenant_id)
        connection.mark_closed()
