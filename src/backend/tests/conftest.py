"""Shared fixtures: fake and in-memory connection openers for the tenant registry."""

import itertools

import mongomock
import pytest
import pytest_asyncio

from storehub.tenancy import MongoConnectionOpener, TenantConnection, TenantRegistry, TenantSchemaRegistry
from storehub.tenancy.connection import tenant_alias

from .fakes import FakeOpener

_db_prefixes = itertools.count()


@pytest.fixture
def fake_opener():
    return FakeOpener()


@pytest.fixture
def fake_registry(fake_opener):
    return TenantRegistry(fake_opener, connect_timeout=5)


@pytest.fixture
def mongo_opener():
    """Real mongoengine aliases backed by an in-memory client; a fresh prefix per test."""
    return MongoConnectionOpener(
        host="mongodb://localhost",
        db_prefix=f"test{next(_db_prefixes)}_",
        mongo_client_class=mongomock.MongoClient,
    )


@pytest_asyncio.fixture
async def mongo_registry(mongo_opener):
    registry = TenantRegistry(mongo_opener, connect_timeout=5)
    yield registry
    await registry.close_all()


@pytest.fixture
def schema_registry():
    return TenantSchemaRegistry()


@pytest.fixture
def memory_connection():
    """A ready tenant connection on an in-memory database, without going through an opener."""
    client = mongomock.MongoClient()
    connection = TenantConnection("tenant_memory", tenant_alias("tenant_memory"), "test_tenant_memory")
    connection.attach(client, client["test_tenant_memory"])
    return connection
