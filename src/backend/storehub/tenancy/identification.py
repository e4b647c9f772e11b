"""
Maps an inbound request to the tenant it addresses.

The store code in the request's addressing (path parameter, then host subdomain) is
authoritative. Only when the request carries no store code is the verified token's
tenant_id claim used. Nothing here opens a tenant database.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Request
from starlette.concurrency import run_in_threadpool

from storehub.core.config import settings
from storehub.core.security import TokenClaims
from storehub.exceptions import InvalidStoreId, StoreInactive, TenantIdMissing, TenantNotFound
from storehub.utils.logger import get_logger

logger = get_logger(__name__)

STORE_ID_PATTERN = re.compile(r"^[A-Za-z0-9]{6}$")

# Subdomains of the store base domain that never address a store
RESERVED_SUBDOMAINS = frozenset({"www", "api", "admin", "static"})


@dataclass
class TenantIdentity:
    tenant_id: str
    store_id: Optional[str] = None
    store_meta: dict = field(default_factory=dict)


def normalize_store_id(value: str) -> str:
    """Validates a store code and returns it upper-cased. Raises InvalidStoreId."""
    value = (value or "").strip()
    if not STORE_ID_PATTERN.match(value):
        raise InvalidStoreId(store_id=value)
    return value.upper()


class TenantIdentifier:
    def __init__(self, directory, base_domain: Optional[str] = None):
        self.directory = directory
        base_domain = settings.STORE_BASE_DOMAIN if base_domain is None else base_domain
        self.base_domain = (base_domain or "").strip(".").lower() or None

    def store_id_from_host(self, host: Optional[str]) -> Optional[str]:
        """ab12cd.shops.example.com -> AB12CD when the base domain is shops.example.com"""
        if not host or not self.base_domain:
            return None

        hostname = host.split(":")[0].strip(".").lower()
        suffix = f".{self.base_domain}"
        if not hostname.endswith(suffix):
            return None

        label = hostname[: -len(suffix)]
        if "." in label or label in RESERVED_SUBDOMAINS:
            return None
        if not STORE_ID_PATTERN.match(label):
            return None
        return label.upper()

    def extract_store_id(self, path_store_id: Optional[str] = None, host: Optional[str] = None) -> Optional[str]:
        if path_store_id is not None:
            return normalize_store_id(path_store_id)
        return self.store_id_from_host(host)

    def resolve(self, store_id: Optional[str], claims: Optional[TokenClaims] = None) -> TenantIdentity:
        """
        Resolves a store code or token claims to a TenantIdentity. Blocking: the store code
        lookup reads the directory.

        Raises:
            TenantNotFound: store code with no directory entry
            StoreInactive: directory entry exists but the store is disabled
            TenantIdMissing: neither a store code nor a tenant claim
        """
        if store_id:
            owner = self.directory.find_by_store_id(store_id)
            if owner is None:
                logger.info(f"No store found for store id: {store_id}")
                raise TenantNotFound(store_id=store_id)
            if not owner.is_active:
                raise StoreInactive(store_id=store_id)

            if claims is not None and claims.tenant_id and claims.tenant_id != owner.tenant_id:
                logger.info(f"Store id {store_id} overrides token tenant {claims.tenant_id}")
            return TenantIdentity(tenant_id=owner.tenant_id, store_id=owner.store_id, store_meta=owner.store_meta())

        if claims is not None and claims.tenant_id:
            return TenantIdentity(tenant_id=claims.tenant_id, store_id=claims.store_id)

        raise TenantIdMissing()

    async def identify(self, request: Request, claims: Optional[TokenClaims] = None) -> TenantIdentity:
        store_id = self.extract_store_id(request.path_params.get("store_id"), request.headers.get("host"))
        if store_id is None:
            return self.resolve(None, claims)
        return await run_in_threadpool(self.resolve, store_id, claims)
