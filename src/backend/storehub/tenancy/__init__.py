__all__ = [
    "ConnectionState",
    "MongoConnectionOpener",
    "TenantConnection",
    "TenantContext",
    "TenantEntity",
    "TenantIdentifier",
    "TenantIdentity",
    "TenantRegistry",
    "TenantSchemaRegistry",
]

from .connection import ConnectionState, MongoConnectionOpener, TenantConnection
from .context import TenantContext
from .identification import TenantIdentifier, TenantIdentity
from .registry import TenantRegistry
from .schema_registry import TenantEntity, TenantSchemaRegistry
