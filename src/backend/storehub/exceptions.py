from typing import Optional


class TenantError(Exception):
    """Base class for failures resolving or serving a tenant. Carries a machine-readable code."""

    code = "TENANT_ERROR"
    status_code = 500
    message = "Tenant resolution failed"

    def __init__(self, message: Optional[str] = None, **details):
        super().__init__(message or self.message)
        self.details = details

    def to_dict(self) -> dict:
        return {"error": str(self), "code": self.code, **self.details}


class TenantNotFound(TenantError):
    """Raised when a store code has no directory entry."""

    code = "TENANT_NOT_FOUND"
    status_code = 404
    message = "Store not found"


class StoreInactive(TenantNotFound):
    """Raised when the directory entry exists but the store is disabled."""

    code = "STORE_NOT_ACTIVE"
    message = "Store not active or not fully set up"


class TenantIdMissing(TenantError):
    """Raised when the request carries neither a store code nor a tenant claim."""

    code = "TENANT_ID_MISSING"
    status_code = 400
    message = "Request does not identify a store"


class InvalidStoreId(TenantError):
    code = "INVALID_STORE_ID"
    status_code = 400
    message = "Store ID must be 6 alphanumeric characters"


class TenantMismatch(TenantError):
    """Raised when an owner token is presented for a store it does not own."""

    code = "TENANT_MISMATCH"
    status_code = 403
    message = "Token is not valid for this store"


class ConnectionFailed(TenantError):
    """Raised when the tenant database could not be opened. Retryable."""

    code = "CONNECTION_FAILED"
    status_code = 503
    message = "Store database is temporarily unavailable"

    def __init__(self, tenant_id: str, reason: Optional[str] = None):
        super().__init__(tenant_id=tenant_id)
        self.tenant_id = tenant_id
        self.reason = reason

    def to_dict(self) -> dict:
        # The reason stays in the logs; clients only learn that they may retry
        return {"error": str(self), "code": self.code}


class DuplicateRegistration(TenantError):
    """Raised by a connection when an entity kind is registered on it twice."""

    code = "DUPLICATE_REGISTRATION"
    message = "Entity already registered on this connection"

    def __init__(self, kind: str, tenant_id: str):
        super().__init__(f"Entity {kind} already registered for tenant {tenant_id}")
        self.kind = kind
        self.tenant_id = tenant_id


class EntityBindFailed(TenantError):
    code = "ENTITY_BIND_FAILED"
    status_code = 500
    message = "Entity could not be bound to the store database"


class UnboundEntityError(Exception):
    """Raised when a tenant document is written without going through its tenant accessor."""


class AuthError(Exception):
    """Exception raised when a token or credential check fails."""

    status_code = 401

    def __init__(self, message: str, code: str = "INVALID_TOKEN"):
        super().__init__(message)
        self.code = code

    def to_dict(self) -> dict:
        return {"error": str(self), "code": self.code}


class AccountLocked(AuthError):
    status_code = 423

    def __init__(self, message: str = "Account temporarily locked due to too many failed login attempts"):
        super().__init__(message, code="ACCOUNT_LOCKED")
