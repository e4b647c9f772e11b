from fastapi import APIRouter, Depends, Request, status

from storehub.api.v1.deps import get_registry, get_schema_registry, require_owner_claims
from storehub.core.security import TokenClaims
from storehub.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    SetupStoreRequest,
    SetupStoreResponse,
    UserStatusResponse,
)
from storehub.services.onboarding import OnboardingService
from storehub.tenancy import TenantRegistry, TenantSchemaRegistry

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    registry: TenantRegistry = Depends(get_registry),
    schema_registry: TenantSchemaRegistry = Depends(get_schema_registry),
):
    """Creates the owner's directory entry and provisions a new tenant database."""
    return await OnboardingService.register(request, registry, schema_registry)


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest):
    return await OnboardingService.login(request)


@router.post("/setup-store", response_model=SetupStoreResponse)
async def setup_store(
    request: SetupStoreRequest,
    http_request: Request,
    claims: TokenClaims = Depends(require_owner_claims),
    registry: TenantRegistry = Depends(get_registry),
    schema_registry: TenantSchemaRegistry = Depends(get_schema_registry),
):
    return await OnboardingService.setup_store(
        claims, request, registry, schema_registry, base_url=str(http_request.base_url)
    )


@router.get("/user/status", response_model=UserStatusResponse)
async def user_status(claims: TokenClaims = Depends(require_owner_claims)):
    return await OnboardingService.user_status(claims)
