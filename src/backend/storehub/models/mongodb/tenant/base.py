from storehub.exceptions import UnboundEntityError

from ..base import BaseDocument


class TenantDocument(BaseDocument):
    """
    Shape of a document stored in a tenant database.

    Tenant documents carry no connection of their own: reads and writes go through the
    TenantEntity accessor bound to one tenant connection. Writing through mongoengine's
    default machinery would target the main database, so it is refused.
    """

    meta = {"abstract": True, "auto_create_index": False}

    def save(self, *args, **kwargs):
        raise UnboundEntityError(f"{self.__class__.__name__} must be saved through its tenant accessor")

    def delete(self, *args, **kwargs):
        raise UnboundEntityError(f"{self.__class__.__name__} must be deleted through its tenant accessor")
