from datetime import timedelta

from mongoengine import fields

from .base import BaseDocument
from .utils import datetime_utc_now

MAX_LOGIN_ATTEMPTS = 5
LOCK_DURATION = timedelta(minutes=30)


class StoreOwner(BaseDocument):
    """
    Directory entry for one store. Lives in the main database and maps the owner
    to the tenant database holding the store's data.
    """

    name = fields.StringField(required=True)
    email = fields.EmailField(required=True, unique=True)
    phone = fields.StringField(default="")
    password = fields.StringField(required=True)

    tenant_id = fields.StringField(required=True, unique=True)
    store_id = fields.StringField(unique=True, sparse=True, regex=r"^[A-Z0-9]{6}$")
    store_name = fields.StringField()
    industry = fields.StringField(default="General")

    is_active = fields.BooleanField(default=True)
    email_verified = fields.BooleanField(default=False)
    login_attempts = fields.IntField(default=0)
    lock_until = fields.DateTimeField()
    password_changed_at = fields.DateTimeField()
    last_login_at = fields.DateTimeField()

    meta = {
        "collection": "store_owners",
        "indexes": [("email", "is_active")],
    }

    def clean(self):
        if self.email:
            self.email = self.email.strip().lower()
        if self.store_id:
            self.store_id = self.store_id.upper()

    @property
    def has_store(self) -> bool:
        return bool(self.store_id)

    def is_locked(self, now=None) -> bool:
        if not self.lock_until:
            return False
        now = now or datetime_utc_now()
        lock_until = self.lock_until
        if lock_until.tzinfo is None:
            lock_until = lock_until.replace(tzinfo=now.tzinfo)
        return lock_until > now

    def register_failed_login(self, now=None):
        now = now or datetime_utc_now()
        self.login_attempts = (self.login_attempts or 0) + 1
        if self.login_attempts >= MAX_LOGIN_ATTEMPTS:
            self.lock_until = now + LOCK_DURATION

    def register_successful_login(self, now=None):
        self.login_attempts = 0
        self.lock_until = None
        self.last_login_at = now or datetime_utc_now()

    def store_meta(self) -> dict:
        return {"name": self.store_name, "industry": self.industry, "owner_email": self.email}

    def __str__(self):
        return f"StoreOwner {self.email} ({self.tenant_id})"
