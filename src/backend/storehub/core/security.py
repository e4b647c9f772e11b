from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel

from storehub.core.config import settings
from storehub.exceptions import AuthError


class TokenClaims(BaseModel):
    sub: str
    email: Optional[str] = None
    tenant_id: Optional[str] = None
    store_id: Optional[str] = None
    type: str = "admin"
    iat: Optional[int] = None
    exp: Optional[int] = None


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a bcrypt hash."""
    if isinstance(hashed_password, str):
        hashed_password = hashed_password.encode("utf-8")

    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password)


def get_password_hash(password: str) -> str:
    """Generate a bcrypt hash for a password."""
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = {key: value for key, value in data.items() if value is not None}
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS))
    to_encode.update(
        {
            "iat": int(now.timestamp()),
            "exp": expire,
            "iss": settings.JWT_ISSUER,
            "aud": settings.JWT_AUDIENCE,
        }
    )
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> TokenClaims:
    """
    Verifies signature, expiry, issuer and audience and returns the claims.

    Raises:
        AuthError: TOKEN_EXPIRED or INVALID_TOKEN
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except ExpiredSignatureError:
        raise AuthError("Token has expired. Please login again.", code="TOKEN_EXPIRED")
    except JWTError:
        raise AuthError("Invalid token. Please login again.", code="INVALID_TOKEN")

    try:
        return TokenClaims(**payload)
    except ValueError:
        raise AuthError("Invalid token payload.", code="INVALID_TOKEN")
