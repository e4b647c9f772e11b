from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from storehub.core.security import TokenClaims, decode_access_token
from storehub.exceptions import AuthError, TenantMismatch
from storehub.tenancy import TenantContext, TenantIdentifier, TenantRegistry, TenantSchemaRegistry
from storehub.utils.logger import get_logger

# Missing credentials are not an error for storefront routes; owner routes check below
security = HTTPBearer(auto_error=False)

logger = get_logger(__name__)


def get_registry(request: Request) -> TenantRegistry:
    return request.app.state.tenant_registry


def get_schema_registry(request: Request) -> TenantSchemaRegistry:
    return request.app.state.schema_registry


def get_identifier(request: Request) -> TenantIdentifier:
    return request.app.state.tenant_identifier


async def get_token_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[TokenClaims]:
    """Verified claims of the bearer token, or None when the request carries no token"""
    if credentials is None:
        return None
    return decode_access_token(credentials.credentials)


async def require_owner_claims(claims: Optional[TokenClaims] = Depends(get_token_claims)) -> TokenClaims:
    if claims is None:
        raise AuthError("Access denied. No token provided.", code="NO_TOKEN")
    if claims.type != "admin":
        raise AuthError("Access denied. Admin token required.", code="INVALID_TOKEN_TYPE")
    return claims


@asynccontextmanager
async def _open_context(
    request: Request, identity, registry: TenantRegistry, schema_registry: TenantSchemaRegistry
) -> AsyncIterator[TenantContext]:
    # The connection is held until the response is done so a replacement never closes it mid-query
    async with registry.using(identity.tenant_id) as connection:
        context = TenantContext(identity, connection, schema_registry)
        request.state.tenant = context
        yield context


async def get_tenant_context(
    request: Request,
    claims: Optional[TokenClaims] = Depends(get_token_claims),
    identifier: TenantIdentifier = Depends(get_identifier),
    registry: TenantRegistry = Depends(get_registry),
    schema_registry: TenantSchemaRegistry = Depends(get_schema_registry),
) -> AsyncIterator[TenantContext]:
    """
    Resolves the tenant a request addresses and opens (or reuses) its connection.
    Entity accessors on the returned context are bound lazily on first use.
    """
    identity = await identifier.identify(request, claims)
    async with _open_context(request, identity, registry, schema_registry) as context:
        yield context


async def get_storefront_context(
    request: Request,
    identifier: TenantIdentifier = Depends(get_identifier),
    registry: TenantRegistry = Depends(get_registry),
    schema_registry: TenantSchemaRegistry = Depends(get_schema_registry),
) -> AsyncIterator[TenantContext]:
    """Public routes: the tenant comes from the store code only, never from a token"""
    identity = await identifier.identify(request, None)
    async with _open_context(request, identity, registry, schema_registry) as context:
        yield context


async def get_owner_context(
    request: Request,
    claims: TokenClaims = Depends(require_owner_claims),
    identifier: TenantIdentifier = Depends(get_identifier),
    registry: TenantRegistry = Depends(get_registry),
    schema_registry: TenantSchemaRegistry = Depends(get_schema_registry),
) -> AsyncIterator[TenantContext]:
    identity = await identifier.identify(request, claims)
    if identity.tenant_id != claims.tenant_id:
        logger.warning(f"Token for tenant {claims.tenant_id} used against tenant {identity.tenant_id}")
        raise TenantMismatch()
    async with _open_context(request, identity, registry, schema_registry) as context:
        yield context
