from fastapi import APIRouter, Depends

from storehub.api.v1.deps import get_owner_context
from storehub.schemas.offer import OfferCreateRequest, OfferUpdateRequest
from storehub.services.offers import OfferService
from storehub.tenancy import TenantContext

router = APIRouter(prefix="/admin/offers", tags=["Admin Offers"])


@router.get("")
def list_offers(active_only: bool = False, ctx: TenantContext = Depends(get_owner_context)):
    return OfferService.list_offers(ctx, active_only=active_only)


@router.post("", status_code=201)
def create_offer(request: OfferCreateRequest, ctx: TenantContext = Depends(get_owner_context)):
    return OfferService.create_offer(ctx, request)


@router.get("/{offer_id}")
def get_offer(offer_id: str, ctx: TenantContext = Depends(get_owner_context)):
    return OfferService.get_offer(ctx, offer_id)


@router.put("/{offer_id}")
def update_offer(offer_id: str, request: OfferUpdateRequest, ctx: TenantContext = Depends(get_owner_context)):
    return OfferService.update_offer(ctx, offer_id, request)


@router.delete("/{offer_id}")
def delete_offer(offer_id: str, ctx: TenantContext = Depends(get_owner_context)):
    return OfferService.delete_offer(ctx, offer_id)
