from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=8)
    phone: Optional[str] = ""


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class SetupStoreRequest(BaseModel):
    store_name: str = Field(min_length=2, max_length=100)
    industry: Optional[str] = "General"
    logo: Optional[str] = ""
    banner: Optional[str] = ""


class OwnerResponse(BaseModel):
    id: str
    name: str
    email: EmailStr
    phone: Optional[str] = ""
    tenant_id: str
    store_id: Optional[str] = None
    store_name: Optional[str] = None
    industry: Optional[str] = None
    email_verified: bool = False


class AuthResponse(BaseModel):
    """Schema returned by register and login"""

    message: str
    token: str
    tenant_id: str
    store_id: Optional[str] = None
    status: str = Field(description="no_store until the store has been set up, then active")
    user: OwnerResponse


class SetupStoreResponse(BaseModel):
    message: str
    tenant_id: str
    store_id: str
    store_url: str
    store_name: str
    industry: str


class UserStatusResponse(BaseModel):
    user: OwnerResponse
    has_store: bool
    tenant_id: str
    store_id: Optional[str] = None
    token_expiry: Optional[int] = None
