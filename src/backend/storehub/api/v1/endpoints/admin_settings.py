from fastapi import APIRouter, Depends

from storehub.api.v1.deps import get_owner_context
from storehub.schemas.settings import SettingsUpdateRequest
from storehub.services.store_settings import StoreSettingsService
from storehub.tenancy import TenantContext

router = APIRouter(prefix="/admin/settings", tags=["Admin Settings"])


@router.get("")
def get_settings(ctx: TenantContext = Depends(get_owner_context)):
    return StoreSettingsService.get_settings(ctx)


@router.put("")
def update_settings(request: SettingsUpdateRequest, ctx: TenantContext = Depends(get_owner_context)):
    return StoreSettingsService.update_settings(ctx, request)
