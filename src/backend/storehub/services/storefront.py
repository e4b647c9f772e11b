from storehub.services.catalog import CategoryService
from storehub.services.store_settings import StoreSettingsService
from storehub.tenancy import TenantContext


class StorefrontService:
    @staticmethod
    def get_store_info(ctx: TenantContext) -> dict:
        store_settings = ctx.settings.first()
        general = store_settings.to_public_dict()["general"] if store_settings else {}
        return {
            "store_id": ctx.store_id,
            "name": general.get("store_name") or ctx.store_meta.get("name"),
            "industry": ctx.store_meta.get("industry"),
            "tagline": general.get("tagline", ""),
            "logo": general.get("logo", ""),
            "banner": general.get("banner", ""),
            "currency": general.get("currency", "INR"),
        }

    @staticmethod
    def list_categories(ctx: TenantContext) -> list:
        return CategoryService.list_categories(ctx, active_only=True)

    @staticmethod
    def get_settings(ctx: TenantContext) -> dict:
        return StoreSettingsService.get_public_settings(ctx)
