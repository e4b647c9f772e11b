"""
Binds tenant document shapes to tenant connections.

Each entity kind is bound at most once per connection. The bound TenantEntity reads and
writes the tenant's own collection directly, so a document can only ever reach the
database of the connection it was obtained from.
"""

from typing import Dict, Optional, Type, Union

from bson import ObjectId
from bson.errors import InvalidId
from mongoengine import DoesNotExist, NotUniqueError
from mongoengine.queryset import QuerySet
from pymongo.errors import DuplicateKeyError, PyMongoError

from storehub.exceptions import DuplicateRegistration, EntityBindFailed
from storehub.models.mongodb.enums import EntityKind
from storehub.models.mongodb.tenant import ENTITY_DEFINITIONS, TenantDocument
from storehub.models.mongodb.utils import datetime_utc_now
from storehub.utils.logger import get_logger

from .connection import TenantConnection

logger = get_logger(__name__)


def _object_id(pk) -> Optional[ObjectId]:
    if isinstance(pk, ObjectId):
        return pk
    try:
        return ObjectId(str(pk))
    except (InvalidId, TypeError):
        return None


class TenantEntity:
    """Accessor for one entity kind inside one tenant database."""

    def __init__(self, kind: EntityKind, document_cls: Type[TenantDocument], connection: TenantConnection):
        self.kind = kind
        self.document_cls = document_cls
        self.tenant_id = connection.tenant_id
        self.collection = connection.collection(document_cls._get_collection_name())

    def __repr__(self):
        return f"<TenantEntity {self.kind.value} tenant={self.tenant_id}>"

    def objects(self, *q_objects, **filters) -> QuerySet:
        queryset = QuerySet(self.document_cls, self.collection)
        return queryset.filter(*q_objects, **filters)

    def get(self, pk):
        object_id = _object_id(pk)
        if object_id is None:
            return None
        return self.objects(pk=object_id).first()

    def get_or_raise(self, pk):
        document = self.get(pk)
        if document is None:
            raise DoesNotExist(f"{self.kind.value} {pk} not found")
        return document

    def first(self, **filters):
        return self.objects(**filters).first()

    def count(self, **filters) -> int:
        return self.objects(**filters).count()

    def create(self, **fields):
        return self.save(self.document_cls(**fields))

    def save(self, document: TenantDocument):
        """Validates the document (running its clean() invariants) and writes it to this tenant."""
        if not isinstance(document, self.document_cls):
            raise TypeError(f"Expected {self.document_cls.__name__}, got {type(document).__name__}")

        document.updated_at = datetime_utc_now()
        document.validate()
        son = document.to_mongo()
        try:
            if document.pk is None:
                result = self.collection.insert_one(son)
                document.pk = result.inserted_id
            else:
                self.collection.replace_one({"_id": document.pk}, son, upsert=True)
        except DuplicateKeyError as e:
            raise NotUniqueError(f"Duplicate {self.kind.value}: {e}") from e
        return document

    def update(self, pk, **fields):
        document = self.get_or_raise(pk)
        for name, value in fields.items():
            field = document._fields.get(name)
            if field is not None and value is not None:
                # Same conversion the constructor applies, e.g. dicts to embedded documents
                value = field.to_python(value)
            setattr(document, name, value)
        return self.save(document)

    def delete(self, pk) -> bool:
        object_id = _object_id(pk)
        if object_id is None:
            return False
        return self.collection.delete_one({"_id": object_id}).deleted_count > 0

    def create_indexes(self):
        """Creates the definition's indexes on the tenant collection. Idempotent on the server."""
        for spec in self.document_cls._meta.get("index_specs") or []:
            spec = spec.copy()
            index_fields = spec.pop("fields")
            spec.pop("cls", None)
            self.collection.create_index(index_fields, **spec)


class TenantSchemaRegistry:
    def __init__(self, definitions: Optional[Dict[EntityKind, Type[TenantDocument]]] = None):
        self._definitions = dict(ENTITY_DEFINITIONS if definitions is None else definitions)

    @property
    def kinds(self):
        return list(self._definitions)

    def get_entity(self, connection: TenantConnection, kind: Union[EntityKind, str]) -> TenantEntity:
        """
        Returns the accessor for `kind` bound to `connection`, binding it on first use.

        Raises:
            EntityBindFailed: unknown kind, malformed definition or index creation failure
        """
        kind = self._resolve_kind(kind)

        existing = connection.registered_entity(kind)
        if existing is not None:
            return existing

        accessor = self._bind(connection, kind)
        try:
            return connection.register_entity(kind, accessor)
        except DuplicateRegistration:
            # Another thread bound the same kind first; its accessor wins
            logger.info(f"{kind.value} already bound for tenant {connection.tenant_id}, reusing it")
            return connection.registered_entity(kind)

    def bind_all(self, connection: TenantConnection) -> Dict[EntityKind, TenantEntity]:
        return {kind: self.get_entity(connection, kind) for kind in self._definitions}

    def _resolve_kind(self, kind) -> EntityKind:
        try:
            return EntityKind(kind)
        except ValueError:
            raise EntityBindFailed(f"Unknown entity kind: {kind}", kind=str(kind))

    def _bind(self, connection: TenantConnection, kind: EntityKind) -> TenantEntity:
        document_cls = self._definitions.get(kind)
        if document_cls is None:
            raise EntityBindFailed(f"No definition registered for {kind.value}", kind=kind.value)
        if not (isinstance(document_cls, type) and issubclass(document_cls, TenantDocument)):
            raise EntityBindFailed(f"Definition for {kind.value} is not a tenant document", kind=kind.value)

        try:
            accessor = TenantEntity(kind, document_cls, connection)
            accessor.create_indexes()
        except PyMongoError as e:
            logger.error(f"Failed to bind {kind.value} for tenant {connection.tenant_id}", exc_info=True)
            raise EntityBindFailed(f"Could not bind {kind.value}: {e}", kind=kind.value) from e

        logger.info(f"Bound {kind.value} for tenant {connection.tenant_id}")
        return accessor
