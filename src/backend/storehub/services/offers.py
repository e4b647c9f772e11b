from typing import List, Optional

from storehub.models.mongodb.utils import datetime_utc_now
from storehub.schemas.offer import OfferCreateRequest, OfferUpdateRequest
from storehub.services.utils import get_or_404, handle_write_errors, parse_object_id
from storehub.tenancy import TenantContext


def _object_ids(values: Optional[List[str]], field_name: str):
    if values is None:
        return None
    return [parse_object_id(value, field_name) for value in values]


class OfferService:
    @staticmethod
    def list_offers(ctx: TenantContext, active_only: bool = False) -> list:
        filters = {"is_active": True} if active_only else {}
        return [offer.to_serializable_dict() for offer in ctx.offers.objects(**filters).order_by("-created_at")]

    @staticmethod
    def get_offer(ctx: TenantContext, offer_id: str) -> dict:
        return get_or_404(ctx.offers, offer_id).to_serializable_dict()

    @staticmethod
    def create_offer(ctx: TenantContext, request: OfferCreateRequest) -> dict:
        data = request.model_dump()
        data["applicable_products"] = _object_ids(request.applicable_products, "product")
        data["applicable_categories"] = _object_ids(request.applicable_categories, "category")
        with handle_write_errors():
            offer = ctx.offers.create(**data)
        return offer.to_serializable_dict()

    @staticmethod
    def update_offer(ctx: TenantContext, offer_id: str, request: OfferUpdateRequest) -> dict:
        get_or_404(ctx.offers, offer_id)
        data = request.model_dump(exclude_unset=True)
        if "applicable_products" in data:
            data["applicable_products"] = _object_ids(request.applicable_products, "product") or []
        if "applicable_categories" in data:
            data["applicable_categories"] = _object_ids(request.applicable_categories, "category") or []
        with handle_write_errors():
            offer = ctx.offers.update(offer_id, **data)
        return offer.to_serializable_dict()

    @staticmethod
    def delete_offer(ctx: TenantContext, offer_id: str) -> dict:
        get_or_404(ctx.offers, offer_id)
        ctx.offers.delete(offer_id)
        return {"message": "Offer deleted successfully"}

    @staticmethod
    def list_live_offers(ctx: TenantContext) -> list:
        """Public offers that are active and inside their validity window right now"""
        now = datetime_utc_now()
        offers = ctx.offers.objects(is_active=True, is_public=True).order_by("end_date")
        return [offer.to_serializable_dict() for offer in offers if offer.is_valid(now)]
