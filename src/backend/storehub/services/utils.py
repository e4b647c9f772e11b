from contextlib import contextmanager
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import HTTPException
from mongoengine import NotUniqueError, ValidationError

from storehub.tenancy import TenantEntity

MAX_PAGE_SIZE = 100


def parse_object_id(value: Optional[str], field_name: str = "id") -> Optional[ObjectId]:
    if value is None or value == "":
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise HTTPException(status_code=400, detail=f"Invalid {field_name}: {value}")


def get_or_404(entity: TenantEntity, pk: str):
    parse_object_id(pk)
    document = entity.get(pk)
    if document is None:
        raise HTTPException(status_code=404, detail=f"{entity.kind.value} not found")
    return document


@contextmanager
def handle_write_errors():
    """Turns mongoengine write failures into client errors."""
    try:
        yield
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid input: {e}")
    except NotUniqueError as e:
        raise HTTPException(status_code=409, detail=f"Duplicate field: {e}")


def paginate(queryset, page: int = 1, limit: int = 20) -> dict:
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    total = queryset.count()
    items = queryset.skip((page - 1) * limit).limit(limit)
    return {
        "items": [item.to_serializable_dict() for item in items],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": (total + limit - 1) // limit,
        },
    }
