"""Unit tests for mapping requests to tenants."""

import logging

import pytest
from starlette.requests import Request

from storehub.core.security import TokenClaims
from storehub.exceptions import InvalidStoreId, StoreInactive, TenantIdMissing, TenantNotFound
from storehub.models.mongodb.store_owner import StoreOwner
from storehub.tenancy import TenantIdentifier
from storehub.tenancy.identification import normalize_store_id


class FakeDirectory:
    """In-memory stand-in for StoreDirectory keyed by upper-case store id."""

    def __init__(self, *owners):
        self.owners = {owner.store_id: owner for owner in owners}
        self.lookups = []

    def find_by_store_id(self, store_id):
        self.lookups.append(store_id)
        return self.owners.get(store_id.upper())


def make_owner(store_id="AB12CD", tenant_id="tenant_a", is_active=True):
    return StoreOwner(
        name="Asha Rao",
        email="a@x.com",
        password="hashed",
        tenant_id=tenant_id,
        store_id=store_id,
        store_name="Asha Styles",
        industry="Fashion",
        is_active=is_active,
    )


@pytest.fixture
def directory():
    return FakeDirectory(make_owner(), make_owner("OFF123", "tenant_off", is_active=False))


@pytest.fixture
def identifier(directory):
    return TenantIdentifier(directory, base_domain="example.com")


def make_request(host=None, store_id=None):
    headers = [(b"host", host.encode())] if host else []
    scope = {"type": "http", "method": "GET", "path": "/", "headers": headers, "path_params": {}}
    if store_id is not None:
        scope["path_params"] = {"store_id": store_id}
    return Request(scope)


@pytest.mark.parametrize(
    "host, expected",
    [
        ("ab12cd.example.com", "AB12CD"),
        ("AB12CD.Example.com:8443", "AB12CD"),
        ("www.example.com", None),
        ("api.example.com", None),
        ("example.com", None),
        ("ab12cd.shop.example.com", None),
        ("abc.example.com", None),
        ("ab12cd.other.com", None),
        ("", None),
        (None, None),
    ],
)
def test_store_id_from_host(identifier, host, expected):
    """Test that only a single six character label under the base domain is a store code."""
    assert identifier.store_id_from_host(host) == expected


def test_host_is_ignored_without_base_domain(directory):
    """Test that subdomain addressing is off when no base domain is configured."""
    identifier = TenantIdentifier(directory, base_domain="")

    assert identifier.store_id_from_host("ab12cd.example.com") is None


def test_normalize_store_id():
    """Test that store codes are upper-cased and malformed ones rejected."""
    assert normalize_store_id(" ab12cd ") == "AB12CD"

    for value in ["ab12c", "ab12cde", "ab-12c", ""]:
        with pytest.raises(InvalidStoreId):
            normalize_store_id(value)


def test_path_store_id_wins_over_host(identifier):
    """Test that the path parameter is used before the host subdomain."""
    assert identifier.extract_store_id("zz99zz", "ab12cd.example.com") == "ZZ99ZZ"
    assert identifier.extract_store_id(None, "ab12cd.example.com") == "AB12CD"


def test_resolve_store_id(identifier):
    """Test that a known store code resolves to its tenant and store metadata."""
    identity = identifier.resolve("AB12CD")

    assert identity.tenant_id == "tenant_a"
    assert identity.store_id == "AB12CD"
    assert identity.store_meta == {"name": "Asha Styles", "industry": "Fashion", "owner_email": "a@x.com"}


def test_resolve_unknown_store(identifier):
    """Test that a store code without a directory entry raises TenantNotFound."""
    with pytest.raises(TenantNotFound) as exc_info:
        identifier.resolve("ZZ99ZZ")

    assert exc_info.value.code == "TENANT_NOT_FOUND"
    assert exc_info.value.to_dict()["store_id"] == "ZZ99ZZ"


def test_resolve_inactive_store(identifier):
    """Test that a disabled store is reported as not found with its own code."""
    with pytest.raises(StoreInactive) as exc_info:
        identifier.resolve("OFF123")

    assert isinstance(exc_info.value, TenantNotFound)
    assert exc_info.value.status_code == 404
    assert exc_info.value.code == "STORE_NOT_ACTIVE"


def test_resolve_falls_back_to_token_claims(identifier, directory):
    """Test that the token tenant is used when the request has no store code."""
    claims = TokenClaims(sub="owner", tenant_id="tenant_b", store_id="QW12ER")

    identity = identifier.resolve(None, claims)

    assert identity.tenant_id == "tenant_b"
    assert identity.store_id == "QW12ER"
    assert directory.lookups == []


def test_store_id_takes_precedence_over_claims(identifier):
    """Test that a store code overrides a token issued for a different tenant."""
    claims = TokenClaims(sub="owner", tenant_id="tenant_b")

    identity = identifier.resolve("AB12CD", claims)

    assert identity.tenant_id == "tenant_a"


def test_cross_tenant_token_is_logged(identifier, caplog):
    """Test that a token for another tenant on a store address is visible at INFO."""
    claims = TokenClaims(sub="owner", tenant_id="tenant_b")

    with caplog.at_level(logging.INFO, logger="storehub.tenancy.identification"):
        identifier.resolve("AB12CD", claims)

    records = [record for record in caplog.records if "overrides token tenant tenant_b" in record.getMessage()]
    assert [record.levelno for record in records] == [logging.INFO]


def test_resolve_without_store_or_claims(identifier):
    """Test that a request identifying no tenant raises TenantIdMissing."""
    with pytest.raises(TenantIdMissing):
        identifier.resolve(None)

    with pytest.raises(TenantIdMissing):
        identifier.resolve(None, TokenClaims(sub="owner"))


@pytest.mark.asyncio
async def test_identify_from_path(identifier):
    """Test identify with a store code in the path."""
    identity = await identifier.identify(make_request(store_id="ab12cd"))

    assert identity.tenant_id == "tenant_a"


@pytest.mark.asyncio
async def test_identify_from_host(identifier):
    """Test identify with the store code in the host subdomain."""
    identity = await identifier.identify(make_request(host="ab12cd.example.com"))

    assert identity.store_id == "AB12CD"


@pytest.mark.asyncio
async def test_identify_rejects_malformed_path(identifier):
    """Test that a malformed path store code is rejected before any lookup."""
    with pytest.raises(InvalidStoreId):
        await identifier.identify(make_request(host="ab12cd.example.com", store_id="bad"))


@pytest.mark.asyncio
async def test_identify_from_claims(identifier, directory):
    """Test identify falls back to the token when neither path nor host name a store."""
    claims = TokenClaims(sub="owner", tenant_id="tenant_c")

    identity = await identifier.identify(make_request(host="api.example.com"), claims)

    assert identity.tenant_id == "tenant_c"
    assert directory.lookups == []
