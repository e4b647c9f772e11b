from typing import Optional

from fastapi import HTTPException
from starlette.concurrency import run_in_threadpool

from storehub.core.config import settings
from storehub.core.security import TokenClaims, create_access_token
from storehub.models.mongodb.enums import EntityKind
from storehub.models.mongodb.store_owner import StoreOwner
from storehub.models.mongodb.tenant.settings import GeneralSettings, ShippingSettings, SocialSettings
from storehub.schemas.auth import (
    AuthResponse,
    LoginRequest,
    OwnerResponse,
    RegisterRequest,
    SetupStoreRequest,
    SetupStoreResponse,
    UserStatusResponse,
)
from storehub.services.directory import StoreDirectory
from storehub.tenancy import TenantConnection, TenantRegistry, TenantSchemaRegistry
from storehub.utils.logger import get_logger

logger = get_logger(__name__)


def issue_token(owner: StoreOwner) -> str:
    return create_access_token(
        {
            "sub": str(owner.id),
            "email": owner.email,
            "tenant_id": owner.tenant_id,
            "store_id": owner.store_id,
            "type": "admin",
        }
    )


def owner_response(owner: StoreOwner) -> OwnerResponse:
    return OwnerResponse.model_validate(owner.to_serializable_dict())


def store_url(store_id: str, base_url: str) -> str:
    if settings.STORE_BASE_DOMAIN:
        return f"https://{store_id.lower()}.{settings.STORE_BASE_DOMAIN}"
    return f"{base_url.rstrip('/')}/api/v1/store/{store_id}"


class OnboardingService:
    @staticmethod
    def provision_tenant(connection: TenantConnection, schema_registry: TenantSchemaRegistry, owner: StoreOwner):
        """
        Binds every entity on a fresh tenant database and seeds the default settings and
        category. Safe to run again on a tenant that is already provisioned.
        """
        entities = schema_registry.bind_all(connection)

        store_settings = entities[EntityKind.SETTINGS]
        if store_settings.first() is None:
            store_settings.create(
                general=GeneralSettings(
                    tagline="Welcome to our store",
                    support_email=owner.email,
                    support_phone=owner.phone,
                ),
                social=SocialSettings(whatsapp=owner.phone),
                shipping=ShippingSettings(delivery_time="2-3 business days", charges=50, free_shipping_above=500),
            )

        categories = entities[EntityKind.CATEGORY]
        if not categories.count():
            categories.create(name="General", description="General products category")

        logger.info(f"Provisioned tenant database {connection.db_name}")

    @staticmethod
    def get_owner(claims: TokenClaims) -> StoreOwner:
        owner = StoreDirectory.find_by_tenant_id(claims.tenant_id) if claims.tenant_id else None
        if owner is None or not owner.is_active or str(owner.id) != claims.sub:
            raise HTTPException(status_code=404, detail={"error": "User not found", "code": "USER_NOT_FOUND"})
        return owner

    @classmethod
    async def register(
        cls,
        request: RegisterRequest,
        registry: TenantRegistry,
        schema_registry: TenantSchemaRegistry,
    ) -> AuthResponse:
        owner = await run_in_threadpool(
            StoreDirectory.register_owner, request.name, request.email, request.password, request.phone or ""
        )

        try:
            async with registry.using(owner.tenant_id) as connection:
                await run_in_threadpool(cls.provision_tenant, connection, schema_registry, owner)
        except Exception:
            # Registration can be retried with the same email once the directory entry is gone
            logger.error(f"Tenant setup failed for {owner.tenant_id}, removing directory entry", exc_info=True)
            await run_in_threadpool(owner.delete)
            raise

        return AuthResponse(
            message="User registered successfully",
            token=issue_token(owner),
            tenant_id=owner.tenant_id,
            store_id=None,
            status="no_store",
            user=owner_response(owner),
        )

    @staticmethod
    async def login(request: LoginRequest) -> AuthResponse:
        owner = await run_in_threadpool(StoreDirectory.authenticate, request.email, request.password)
        return AuthResponse(
            message="Login successful",
            token=issue_token(owner),
            tenant_id=owner.tenant_id,
            store_id=owner.store_id,
            status="active" if owner.has_store else "no_store",
            user=owner_response(owner),
        )

    @classmethod
    async def setup_store(
        cls,
        claims: TokenClaims,
        request: SetupStoreRequest,
        registry: TenantRegistry,
        schema_registry: TenantSchemaRegistry,
        base_url: str,
    ) -> SetupStoreResponse:
        owner = await run_in_threadpool(cls.get_owner, claims)
        owner = await run_in_threadpool(StoreDirectory.assign_store, owner, request.store_name, request.industry)

        async with registry.using(owner.tenant_id) as connection:
            await run_in_threadpool(cls.apply_store_settings, connection, schema_registry, request)

        return SetupStoreResponse(
            message="Store setup completed successfully",
            tenant_id=owner.tenant_id,
            store_id=owner.store_id,
            store_url=store_url(owner.store_id, base_url),
            store_name=owner.store_name,
            industry=owner.industry,
        )

    @staticmethod
    def apply_store_settings(
        connection: TenantConnection, schema_registry: TenantSchemaRegistry, request: SetupStoreRequest
    ):
        store_settings = schema_registry.get_entity(connection, EntityKind.SETTINGS)
        document = store_settings.first() or store_settings.document_cls()
        document.general.store_name = request.store_name.strip()
        document.general.logo = request.logo or ""
        document.general.banner = request.banner or ""
        store_settings.save(document)

    @classmethod
    async def user_status(cls, claims: TokenClaims) -> UserStatusResponse:
        owner: Optional[StoreOwner] = await run_in_threadpool(cls.get_owner, claims)
        return UserStatusResponse(
            user=owner_response(owner),
            has_store=owner.has_store,
            tenant_id=owner.tenant_id,
            store_id=owner.store_id,
            token_expiry=claims.exp,
        )
