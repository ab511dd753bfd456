from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import decode_access_token
from app.db.database import get_db
from app.models.user import Profile, UserRole

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

ROLE_PERMISSIONS: dict[UserRole, set[str]] = {
    UserRole.FOUNDER: {
        "inventory:view",
        "inventory:manage",
        "inventory:delete",
        "sales:create",
        "bills:view",
        "bills:manage",
        "purchases:view",
        "purchases:manage",
        "expenses:view",
        "expenses:manage",
        "reports:view",
        "users:manage",
    },
    UserRole.SALESMAN: {"inventory:view", "sales:create", "bills:view"},
    UserRole.ACCOUNTING: {
        "inventory:view",
        "bills:view",
        "purchases:view",
        "purchases:manage",
        "expenses:view",
        "expenses:manage",
        "reports:view",
    },
}


def has_permission(user: Profile, permission: str) -> bool:
    return permission in ROLE_PERMISSIONS.get(user.role, set())


def get_current_user(
    request: Request,
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Profile:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid authentication credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    raw_token = (token or "").strip() or (request.cookies.get(settings.cookie_name) or "").strip()
    if not raw_token:
        raise credentials_exception

    try:
        payload = decode_access_token(raw_token)
    except JWTError:
        raise credentials_exception

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise credentials_exception

    user = db.get(Profile, user_id)
    if not user or not user.is_active:
        raise credentials_exception
    return user


def require_founder(current_user: Profile = Depends(get_current_user)) -> Profile:
    if current_user.role != UserRole.FOUNDER:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Founder role required",
        )
    return current_user


def require_permission(permission: str):
    def checker(current_user: Profile = Depends(get_current_user)) -> Profile:
        if not has_permission(current_user, permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission required: {permission}",
            )
        return current_user

    return checker
