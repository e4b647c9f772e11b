from mongoengine import Document, fields
from .utils import datetime_utc_now, to_serializable


class BaseDocument(Document):
    created_at = fields.DateTimeField(default=datetime_utc_now)
    updated_at = fields.DateTimeField(default=datetime_utc_now)

    meta = {"abstract": True}

    # Fields never returned to API callers
    private_fields = ("password",)

    def to_serializable_dict(self):
        """Custom method for serialization with _id as string."""
        data = to_serializable(self.to_mongo().to_dict())
        if "_id" in data:
            data["id"] = data.pop("_id")
        for field_name in self.private_fields:
            data.pop(field_name, None)
        return data
