from mongoengine import EmbeddedDocument, fields

from ..utils import slugify
from .base import TenantDocument


class SeoInfo(EmbeddedDocument):
    title = fields.StringField()
    description = fields.StringField()
    keywords = fields.ListField(fields.StringField())


class Category(TenantDocument):
    name = fields.StringField(required=True, max_length=100)
    description = fields.StringField(default="")
    slug = fields.StringField()
    image = fields.StringField(default="")
    parent_category = fields.ObjectIdField()
    sort_order = fields.IntField(default=0)
    is_active = fields.BooleanField(default=True)
    seo = fields.EmbeddedDocumentField(SeoInfo)

    meta = {
        "collection": "categories",
        "indexes": ["slug", "is_active", "sort_order"],
    }

    def clean(self):
        self.name = self.name.strip() if self.name else self.name
        if not self.slug and self.name:
            self.slug = slugify(self.name)
