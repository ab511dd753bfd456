from datetime import datetime, timedelta, timezone
from enum import Enum

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


def create_access_token(user_id: int, role: Enum | str, expires_minutes: int | None = None) -> str:
    """Signed session token for a profile; the role claim is informational only."""
    lifetime = timedelta(minutes=expires_minutes or settings.access_token_expire_minutes)
    payload = {
        "sub": str(user_id),
        "role": role.value if isinstance(role, Enum) else role,
        "type": "access",
        "iss": settings.issuer,
        "exp": datetime.now(timezone.utc) + lifetime,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> dict:
    claims = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm], issuer=settings.issuer)
    if claims.get("type") != "access" or not claims.get("sub"):
        raise JWTError("Not an access token")
    return claims
