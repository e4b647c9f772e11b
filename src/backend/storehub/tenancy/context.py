from typing import Dict, Optional, Union

from storehub.models.mongodb.enums import EntityKind

from .connection import TenantConnection
from .identification import TenantIdentity
from .schema_registry import TenantEntity, TenantSchemaRegistry


class TenantContext:
    """
    Everything a request handler needs to work inside one tenant: who the tenant is, its live
    connection and lazily bound entity accessors. Built once per request.
    """

    def __init__(self, identity: TenantIdentity, connection: TenantConnection, schema_registry: TenantSchemaRegistry):
        self.identity = identity
        self.connection = connection
        self._schema_registry = schema_registry
        self._entities: Dict[EntityKind, TenantEntity] = {}

    @property
    def tenant_id(self) -> str:
        return self.identity.tenant_id

    @property
    def store_id(self) -> Optional[str]:
        return self.identity.store_id

    @property
    def store_meta(self) -> dict:
        return self.identity.store_meta

    def entity(self, kind: Union[EntityKind, str]) -> TenantEntity:
        accessor = self._entities.get(kind)
        if accessor is None:
            accessor = self._schema_registry.get_entity(self.connection, kind)
            self._entities[accessor.kind] = accessor
        return accessor

    @property
    def customers(self) -> TenantEntity:
        return self.entity(EntityKind.CUSTOMER)

    @property
    def products(self) -> TenantEntity:
        return self.entity(EntityKind.PRODUCT)

    @property
    def orders(self) -> TenantEntity:
        return self.entity(EntityKind.ORDER)

    @property
    def categories(self) -> TenantEntity:
        return self.entity(EntityKind.CATEGORY)

    @property
    def offers(self) -> TenantEntity:
        return self.entity(EntityKind.OFFER)

    @property
    def payments(self) -> TenantEntity:
        return self.entity(EntityKind.PAYMENT)

    @property
    def settings(self) -> TenantEntity:
        return self.entity(EntityKind.SETTINGS)

    def __repr__(self):
        return f"<TenantContext tenant={self.tenant_id} store={self.store_id}>"
