"""Unit tests for the tenant connection registry."""

import asyncio

import pytest

from storehub.exceptions import ConnectionFailed, TenantIdMissing
from storehub.tenancy import ConnectionState, TenantRegistry
from tests.fakes import FakeClock, FakeOpener


@pytest.mark.asyncio
async def test_concurrent_first_resolutions_open_once():
    """Test that 50 simultaneous first requests for a new tenant share one open."""
    opener = FakeOpener(delay=0.05)
    registry = TenantRegistry(opener)

    connections = await asyncio.gather(*(registry.get_connection("tenant_new") for _ in range(50)))

    assert opener.opened == ["tenant_new"]
    assert all(connection is connections[0] for connection in connections)
    assert connections[0].is_ready


@pytest.mark.asyncio
async def test_ready_connection_is_reused(fake_registry, fake_opener):
    """Test that later calls return the cached connection without opening again."""
    first = await fake_registry.get_connection("tenant_a")
    second = await fake_registry.get_connection("tenant_a")

    assert first is second
    assert fake_opener.opened == ["tenant_a"]


@pytest.mark.asyncio
async def test_tenants_get_separate_connections(fake_registry, fake_opener):
    """Test that two tenants never share a connection."""
    first = await fake_registry.get_connection("tenant_a")
    second = await fake_registry.get_connection("tenant_b")

    assert first is not second
    assert first.db_name == "test_tenant_a"
    assert second.db_name == "test_tenant_b"
    assert sorted(fake_opener.opened) == ["tenant_a", "tenant_b"]


@pytest.mark.asyncio
async def test_empty_tenant_id_is_rejected(fake_registry):
    """Test that an empty tenant id raises TenantIdMissing."""
    with pytest.raises(TenantIdMissing):
        await fake_registry.get_connection("")


@pytest.mark.asyncio
async def test_failed_open_is_not_cached():
    """Test that a failure is surfaced once and the next call retries and then reuses."""
    opener = FakeOpener(failures=1)
    registry = TenantRegistry(opener)

    with pytest.raises(ConnectionFailed) as exc_info:
        await registry.get_connection("tenant_t")

    assert exc_info.value.status_code == 503
    assert "tenant_t" not in registry

    connection = await registry.get_connection("tenant_t")
    again = await registry.get_connection("tenant_t")

    assert connection is again
    assert opener.opened == ["tenant_t", "tenant_t"]


@pytest.mark.asyncio
async def test_concurrent_callers_share_the_same_failure():
    """Test that callers waiting on a failing open all see the failure from a single attempt."""
    opener = FakeOpener(failures=1, delay=0.05)
    registry = TenantRegistry(opener)

    results = await asyncio.gather(
        *(registry.get_connection("tenant_t") for _ in range(10)),
        return_exceptions=True,
    )

    assert all(isinstance(result, ConnectionFailed) for result in results)
    assert opener.opened == ["tenant_t"]


@pytest.mark.asyncio
async def test_unexpected_open_error_becomes_connection_failed():
    """Test that arbitrary opener errors are wrapped as ConnectionFailed."""

    class BrokenOpener(FakeOpener):
        def open(self, tenant_id):
            raise RuntimeError("driver exploded")

    registry = TenantRegistry(BrokenOpener())

    with pytest.raises(ConnectionFailed) as exc_info:
        await registry.get_connection("tenant_x")

    assert exc_info.value.reason == "driver exploded"
    assert exc_info.value.to_dict() == {
        "error": "Store database is temporarily unavailable",
        "code": "CONNECTION_FAILED",
    }


@pytest.mark.asyncio
async def test_slow_open_times_out_and_is_closed_when_it_finishes():
    """Test that an open exceeding the connect timeout fails and its late result is closed."""
    opener = FakeOpener(delay=0.3)
    registry = TenantRegistry(opener, connect_timeout=0.05)

    with pytest.raises(ConnectionFailed):
        await registry.get_connection("tenant_slow")

    assert "tenant_slow" not in registry

    await asyncio.sleep(0.6)
    assert opener.closed == ["tenant_slow"]


@pytest.mark.asyncio
async def test_close_all_waits_for_late_opens():
    """Test that shutdown waits for an open that outlived its timeout and closes it."""
    opener = FakeOpener(delay=0.3)
    registry = TenantRegistry(opener, connect_timeout=0.05)

    with pytest.raises(ConnectionFailed):
        await registry.get_connection("tenant_slow")

    await registry.close_all()

    assert opener.closed == ["tenant_slow"]


async def wait_for_close(opener, count=1):
    for _ in range(100):
        if len(opener.closed) >= count:
            return
        await asyncio.sleep(0.01)


@pytest.mark.asyncio
async def test_replaced_connection_stays_open_while_in_use(fake_registry, fake_opener):
    """Test that a connection replaced mid-request is closed only after the request releases it."""
    async with fake_registry.using("tenant_a") as old:
        old.mark_errored()

        replacement = await fake_registry.get_connection("tenant_a")
        await asyncio.sleep(0.05)

        assert replacement is not old
        assert replacement.is_ready
        assert fake_opener.closed == []
        assert old.state == ConnectionState.ERRORED
        assert fake_registry.stats()["retired"] == 1

    await wait_for_close(fake_opener)

    assert fake_opener.closed == ["tenant_a"]
    assert old.state == ConnectionState.CLOSED
    assert replacement.is_ready
    assert fake_registry.stats()["retired"] == 0


@pytest.mark.asyncio
async def test_evicted_connection_waits_for_its_users():
    """Test that LRU eviction defers closing a connection a request still holds."""
    opener = FakeOpener()
    registry = TenantRegistry(opener, max_connections=1)

    async with registry.using("tenant_a") as held:
        await registry.get_connection("tenant_b")

        assert "tenant_a" not in registry
        assert opener.closed == []

    await wait_for_close(opener)

    assert opener.closed == ["tenant_a"]
    assert held.state == ConnectionState.CLOSED


@pytest.mark.asyncio
async def test_retired_connection_cannot_be_acquired(fake_registry):
    """Test that a connection taken out of the registry refuses new users."""
    connection = await fake_registry.get_connection("tenant_a")

    await fake_registry.close("tenant_a")

    assert connection.acquire() is False


@pytest.mark.asyncio
async def test_using_holds_the_replacement_of_an_errored_connection(fake_registry):
    """Test that using() acquires the fresh connection when the cached one has errored."""
    stale = await fake_registry.get_connection("tenant_a")
    stale.mark_errored()

    async with fake_registry.using("tenant_a") as connection:
        assert connection is not stale
        assert connection.in_use

    assert not connection.in_use


@pytest.mark.asyncio
async def test_close_all_closes_retired_connections(fake_registry, fake_opener):
    """Test that shutdown also closes replaced connections still held by requests."""
    async with fake_registry.using("tenant_a") as old:
        old.mark_errored()
        await fake_registry.get_connection("tenant_a")

        await fake_registry.close_all()

        assert fake_opener.closed == ["tenant_a", "tenant_a"]
        assert old.state == ConnectionState.CLOSED

    await asyncio.sleep(0.05)
    assert fake_opener.closed == ["tenant_a", "tenant_a"]


@pytest.mark.asyncio
async def test_errored_connection_is_recreated(fake_registry, fake_opener):
    """Test that a connection marked errored is closed and replaced on the next call."""
    first = await fake_registry.get_connection("tenant_a")
    first.mark_errored()

    second = await fake_registry.get_connection("tenant_a")

    assert second is not first
    assert second.is_ready
    assert first.state == ConnectionState.CLOSED
    assert fake_opener.opened == ["tenant_a", "tenant_a"]
    assert fake_opener.closed == ["tenant_a"]


@pytest.mark.asyncio
async def test_cancelled_caller_does_not_cancel_shared_creation():
    """Test that cancelling one waiter leaves the creation running for the others."""
    opener = FakeOpener(delay=0.1)
    registry = TenantRegistry(opener)

    cancelled = asyncio.create_task(registry.get_connection("tenant_c"))
    waiting = asyncio.create_task(registry.get_connection("tenant_c"))
    await asyncio.sleep(0.01)
    cancelled.cancel()

    connection = await waiting

    assert connection.is_ready
    assert cancelled.cancelled()
    assert opener.opened == ["tenant_c"]


@pytest.mark.asyncio
async def test_least_recently_used_connection_is_evicted():
    """Test that exceeding max_connections closes the least recently used connection."""
    opener = FakeOpener()
    registry = TenantRegistry(opener, max_connections=2)

    await registry.get_connection("tenant_a")
    evicted = await registry.get_connection("tenant_b")
    await registry.get_connection("tenant_a")
    await registry.get_connection("tenant_c")

    assert "tenant_a" in registry
    assert "tenant_c" in registry
    assert "tenant_b" not in registry
    assert evicted.state == ConnectionState.CLOSED
    assert opener.closed == ["tenant_b"]


@pytest.mark.asyncio
async def test_prune_idle_closes_only_idle_connections():
    """Test that prune_idle closes connections unused for longer than the idle timeout."""
    clock = FakeClock()
    opener = FakeOpener(clock=clock)
    registry = TenantRegistry(opener, idle_timeout=10)

    await registry.get_connection("tenant_a")
    await registry.get_connection("tenant_b")
    clock.advance(5)
    await registry.get_connection("tenant_b")
    clock.advance(6)

    pruned = await registry.prune_idle()

    assert pruned == ["tenant_a"]
    assert "tenant_a" not in registry
    assert "tenant_b" in registry


@pytest.mark.asyncio
async def test_prune_idle_is_disabled_without_timeout(fake_registry):
    """Test that an idle timeout of zero never prunes."""
    await fake_registry.get_connection("tenant_a")

    assert await fake_registry.prune_idle() == []
    assert "tenant_a" in fake_registry


@pytest.mark.asyncio
async def test_close_all_closes_every_connection(fake_registry, fake_opener):
    """Test that close_all empties the registry and closes each connection."""
    connections = [await fake_registry.get_connection(f"tenant_{i}") for i in range(3)]

    await fake_registry.close_all()

    assert len(fake_registry) == 0
    assert sorted(fake_opener.closed) == ["tenant_0", "tenant_1", "tenant_2"]
    assert all(connection.state == ConnectionState.CLOSED for connection in connections)


@pytest.mark.asyncio
async def test_close_single_tenant(fake_registry):
    """Test that close removes one tenant and reports whether it was present."""
    await fake_registry.get_connection("tenant_a")

    assert await fake_registry.close("tenant_a") is True
    assert await fake_registry.close("tenant_a") is False


@pytest.mark.asyncio
async def test_stats_reports_connection_states(fake_registry):
    """Test that stats counts live connections by state."""
    await fake_registry.get_connection("tenant_a")
    errored = await fake_registry.get_connection("tenant_b")
    errored.mark_errored()

    stats = fake_registry.stats()

    assert stats["connections"] == 2
    assert stats["pending"] == 0
    assert stats["states"] == {"ready": 1, "errored": 1}


def test_max_connections_must_be_positive(fake_opener):
    """Test that a registry cannot be built without capacity."""
    with pytest.raises(ValueError):
        TenantRegistry(fake_opener, max_connections=0)
