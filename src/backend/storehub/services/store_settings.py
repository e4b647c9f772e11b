from fastapi import HTTPException

from storehub.schemas.settings import SettingsUpdateRequest
from storehub.services.utils import handle_write_errors
from storehub.tenancy import TenantContext


class StoreSettingsService:
    @staticmethod
    def get_or_create(ctx: TenantContext):
        document = ctx.settings.first()
        if document is None:
            document = ctx.settings.create()
        return document

    @classmethod
    def get_settings(cls, ctx: TenantContext) -> dict:
        return cls.get_or_create(ctx).to_serializable_dict()

    @classmethod
    def update_settings(cls, ctx: TenantContext, request: SettingsUpdateRequest) -> dict:
        document = cls.get_or_create(ctx)
        for section, values in request.model_dump(exclude_unset=True, exclude_none=True).items():
            embedded = getattr(document, section)
            for name, value in values.items():
                setattr(embedded, name, value)
        with handle_write_errors():
            document = ctx.settings.save(document)
        return document.to_serializable_dict()

    @staticmethod
    def get_public_settings(ctx: TenantContext) -> dict:
        document = ctx.settings.first()
        if document is None:
            raise HTTPException(status_code=404, detail="Store settings not found")
        return document.to_public_dict()
