from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import require_permission
from app.db.database import get_db
from app.models.user import Profile, UserRole
from app.schemas.user import RoleUpdateRequest, UserOut
from app.services.audit import log_audit

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=list[UserOut])
def list_users(
    _: Profile = Depends(require_permission("users:manage")),
    db: Session = Depends(get_db),
):
    return list(db.scalars(select(Profile).order_by(Profile.created_at.desc())).all())


@router.put("/{user_id}/role", response_model=UserOut)
def update_role(
    user_id: int,
    payload: RoleUpdateRequest,
    current_user: Profile = Depends(require_permission("users:manage")),
    db: Session = Depends(get_db),
):
    user = db.get(Profile, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if user.id == current_user.id and payload.role != UserRole.FOUNDER:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Founders cannot demote themselves")

    previous = user.role
    user.role = payload.role
    log_audit(
        db,
        "users.role_changed",
        current_user.id,
        entity_type="profile",
        entity_id=user.id,
        details={"from": previous.value, "to": payload.role.value},
    )
    db.commit()
    db.refresh(user)
    return user
