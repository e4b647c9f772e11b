import string
import time
from typing import Optional

from fastapi import HTTPException
from mongoengine import NotUniqueError

from storehub.core.security import get_password_hash, verify_password
from storehub.exceptions import AccountLocked, AuthError
from storehub.models.mongodb.store_owner import StoreOwner
from storehub.models.mongodb.utils import datetime_utc_now, random_code
from storehub.utils.logger import get_logger

logger = get_logger(__name__)

STORE_ID_ATTEMPTS = 20


class StoreDirectory:
    """Owner -> tenant directory kept in the main database."""

    @staticmethod
    def find_by_store_id(store_id: str) -> Optional[StoreOwner]:
        return StoreOwner.objects(store_id=store_id.upper()).first()

    @staticmethod
    def find_by_email(email: str) -> Optional[StoreOwner]:
        return StoreOwner.objects(email=email.strip().lower()).first()

    @staticmethod
    def find_by_tenant_id(tenant_id: str) -> Optional[StoreOwner]:
        return StoreOwner.objects(tenant_id=tenant_id).first()

    @staticmethod
    def generate_tenant_id() -> str:
        return f"tenant_{int(time.time() * 1000)}_{random_code(6, string.ascii_lowercase + string.digits)}"

    @staticmethod
    def generate_store_id() -> str:
        for _ in range(STORE_ID_ATTEMPTS):
            store_id = random_code(6)
            if not StoreOwner.objects(store_id=store_id).count():
                return store_id
        raise HTTPException(status_code=503, detail="Could not allocate a store id, please retry")

    @classmethod
    def register_owner(cls, name: str, email: str, password: str, phone: str = "") -> StoreOwner:
        """
        Creates the directory entry for a new owner with a fresh tenant id.
        The tenant database itself is provisioned by the onboarding service.
        """
        if cls.find_by_email(email):
            raise HTTPException(status_code=400, detail={"error": "User already exists", "code": "USER_EXISTS"})

        owner = StoreOwner(
            name=name.strip(),
            email=email,
            phone=phone or "",
            password=get_password_hash(password),
            tenant_id=cls.generate_tenant_id(),
            password_changed_at=datetime_utc_now(),
        )
        try:
            owner.save()
        except NotUniqueError:
            raise HTTPException(status_code=400, detail={"error": "User already exists", "code": "USER_EXISTS"})

        logger.info(f"Registered owner {owner.email} with tenant {owner.tenant_id}")
        return owner

    @classmethod
    def authenticate(cls, email: str, password: str) -> StoreOwner:
        """
        Checks credentials and applies the lockout policy.

        Raises:
            AccountLocked: too many failed attempts
            AuthError: unknown email, wrong password or disabled account
        """
        owner = cls.find_by_email(email)
        if owner is None:
            raise AuthError("Invalid credentials", code="INVALID_CREDENTIALS")

        now = datetime_utc_now()
        if owner.is_locked(now):
            raise AccountLocked()
        if not owner.is_active:
            raise AuthError("Account is disabled", code="ACCOUNT_DISABLED")

        if not verify_password(password, owner.password):
            owner.register_failed_login(now)
            owner.save()
            logger.warning(f"Failed login for {owner.email} ({owner.login_attempts} attempts)")
            if owner.is_locked(now):
                raise AccountLocked()
            raise AuthError("Invalid credentials", code="INVALID_CREDENTIALS")

        owner.register_successful_login(now)
        owner.save()
        return owner

    @classmethod
    def assign_store(cls, owner: StoreOwner, store_name: str, industry: Optional[str] = None) -> StoreOwner:
        """Gives the owner a store id. A store id, once assigned, never changes."""
        if owner.has_store:
            raise HTTPException(
                status_code=400,
                detail={"error": "Store already exists for this user", "code": "STORE_EXISTS"},
            )

        owner.store_id = cls.generate_store_id()
        owner.store_name = store_name.strip()
        owner.industry = industry or "General"
        owner.save()
        logger.info(f"Store {owner.store_id} assigned to tenant {owner.tenant_id}")
        return owner
